"""Tests for the display buffer and the keypad."""

import pytest

from slow8.framebuffer import HEIGHT, WIDTH, Framebuffer
from slow8.keypad import Keypad


class TestFramebuffer:

    def test_starts_clear(self):
        fb = Framebuffer()
        assert fb.lit_count() == 0
        assert not fb.dirty

    def test_plot_toggles_and_reports_collision(self):
        fb = Framebuffer()
        assert fb.plot(5, 7) is False
        assert fb.is_lit(5, 7)
        assert fb.plot(5, 7) is True
        assert not fb.is_lit(5, 7)
        assert fb.dirty

    def test_plot_wraps(self):
        fb = Framebuffer()
        fb.plot(WIDTH + 1, HEIGHT + 2)
        assert fb.is_lit(1, 2)

    def test_rows(self):
        fb = Framebuffer()
        fb.plot(WIDTH - 1, 1)
        rows = list(fb.rows())
        assert len(rows) == HEIGHT
        assert all(len(row) == WIDTH for row in rows)
        assert rows[1][WIDTH - 1]
        assert sum(map(sum, rows)) == 1

    def test_clear(self):
        fb = Framebuffer()
        fb.plot(0, 0)
        fb.dirty = False
        fb.clear()
        assert fb.lit_count() == 0
        assert fb.dirty

    def test_text_rendering(self):
        fb = Framebuffer()
        fb.plot(0, 0)
        fb.plot(2, 0)
        lines = str(fb).split("\n")
        assert len(lines) == HEIGHT
        assert lines[0] == "X_X" + "_" * (WIDTH - 3)
        assert lines[1] == "_" * WIDTH


class TestKeypad:

    def test_press_and_release(self):
        keypad = Keypad()
        assert keypad.set_key(0xA, True) is True
        assert keypad.is_pressed(0xA)
        assert keypad.set_key(0xA, True) is False
        assert keypad.set_key(0xA, False) is False
        assert not keypad.is_pressed(0xA)

    def test_lookup_uses_low_nibble(self):
        keypad = Keypad()
        keypad.set_key(0x3, True)
        assert keypad.is_pressed(0x13)

    @pytest.mark.parametrize("code", [-1, 16, 0xFF])
    def test_rejects_invalid_code(self, code):
        with pytest.raises(ValueError):
            Keypad().set_key(code, True)
