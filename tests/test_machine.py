"""Tests for the engine boundary: load, step, tick_timers and set_key."""

import pytest

from slow8.errors import DecodeError, EngineFault, StackOverflow
from slow8.interpreter import ExecResult
from slow8.machine import Chip8
from slow8.state import FONTSET, MAX_PROGRAM_SIZE, PROGRAM_START


def _machine(*words, rng=None):
    machine = Chip8(rng=rng)
    program = bytearray()
    for word in words:
        program += bytes([word >> 8, word & 0xFF])
    machine.load(program)
    return machine


class TestConstruction:

    def test_fresh_state(self):
        machine = Chip8()
        state = machine.state
        assert state.pc == PROGRAM_START
        assert state.sp == 0
        assert state.i == 0
        assert bytes(state.v) == bytes(16)
        assert state.delay_timer == 0
        assert state.sound_timer == 0
        assert machine.framebuffer.lit_count() == 0

    def test_font_loaded_at_zero(self):
        memory = Chip8().state.memory
        expected = bytes(byte for glyph in FONTSET for byte in glyph)
        assert bytes(memory[0:80]) == expected
        assert bytes(memory[80:PROGRAM_START]) == bytes(PROGRAM_START - 80)

    def test_load_places_program_at_0x200(self):
        machine = _machine(0x6A42, 0x00E0)
        assert bytes(machine.state.memory[0x200:0x204]) == bytes([0x6A, 0x42, 0x00, 0xE0])

    def test_load_accepts_full_program_space(self):
        machine = Chip8()
        machine.load(bytes([0x12]) * MAX_PROGRAM_SIZE)
        assert machine.state.memory[0xFFF] == 0x12
        assert len(machine.state.memory) == 4096

    def test_load_rejects_oversized_image(self):
        machine = Chip8()
        with pytest.raises(ValueError):
            machine.load(bytes(MAX_PROGRAM_SIZE + 1))
        assert len(machine.state.memory) == 4096

    def test_reset_keeps_keypad(self):
        machine = _machine(0x6A42)
        machine.step()
        keypad = machine.keypad
        machine.reset()
        assert machine.state.v[0xA] == 0
        assert machine.state.pc == PROGRAM_START
        assert machine.state.keypad is keypad


class TestStep:

    def test_runs_a_small_program(self):
        machine = _machine(
            0x6005,  # LD V0, 5
            0x6103,  # LD V1, 3
            0x8014,  # ADD V0, V1
            0x3008,  # SE V0, 8
            0x620F,  # LD V2, 0xF (skipped)
            0x6301,  # LD V3, 1
        )
        for _ in range(5):
            assert machine.step() is ExecResult.CONTINUE
        state = machine.state
        assert state.v[0] == 8
        assert state.v[2] == 0
        assert state.v[3] == 1
        assert state.pc == 0x20C

    def test_skip_advances_four_from_prefetch_pc(self):
        machine = _machine(0x3000)
        machine.step()
        assert machine.state.pc == PROGRAM_START + 4

    def test_random_source_is_injected(self):
        machine = _machine(0xC3F0, rng=lambda: 0x5A)
        machine.step()
        assert machine.state.v[3] == 0x50

    def test_decode_error_surfaces_word_and_pc(self):
        machine = _machine(0x00E0, 0x5121)
        machine.step()
        with pytest.raises(EngineFault) as excinfo:
            machine.step()
        assert isinstance(excinfo.value, DecodeError)
        assert excinfo.value.word == 0x5121
        assert excinfo.value.pc == 0x202

    def test_recursive_call_overflows(self):
        machine = _machine(0x2200)  # CALL 0x200
        for _ in range(16):
            machine.step()
        assert machine.state.sp == 16
        with pytest.raises(StackOverflow):
            machine.step()

    def test_step_does_not_touch_timers(self):
        machine = _machine(0x1200)  # JP 0x200
        machine.state.delay_timer = 10
        for _ in range(100):
            machine.step()
        assert machine.state.delay_timer == 10
        machine.tick_timers()
        assert machine.state.delay_timer == 9


class TestWaitForKey:

    def test_step_is_suspended_until_key_down(self):
        machine = _machine(0xF50A, 0x6101)  # LD V5, K / LD V1, 1
        assert machine.step() is ExecResult.AWAIT_KEY
        assert machine.awaiting_key
        pc = machine.state.pc
        for _ in range(3):
            assert machine.step() is ExecResult.AWAIT_KEY
        assert machine.state.pc == pc
        assert machine.state.v[1] == 0

        machine.set_key(0xB, True)
        assert not machine.awaiting_key
        assert machine.state.v[5] == 0xB
        assert machine.step() is ExecResult.CONTINUE
        assert machine.state.v[1] == 1

    def test_held_key_does_not_satisfy_wait(self):
        machine = _machine(0xF50A)
        machine.set_key(0x3, True)
        machine.step()
        machine.set_key(0x3, True)
        assert machine.awaiting_key
        machine.set_key(0x3, False)
        assert machine.awaiting_key
        machine.set_key(0x3, True)
        assert not machine.awaiting_key
        assert machine.state.v[5] == 0x3

    def test_release_does_not_satisfy_wait(self):
        machine = _machine(0xF20A)
        machine.step()
        machine.set_key(0x4, False)
        assert machine.awaiting_key

    def test_timers_keep_running_while_waiting(self):
        machine = _machine(0xF00A)
        machine.state.delay_timer = 2
        machine.step()
        machine.tick_timers()
        machine.tick_timers()
        assert machine.state.delay_timer == 0
        assert machine.awaiting_key

    def test_key_press_without_wait_only_updates_keypad(self):
        machine = _machine(0xE09E)  # SKP V0
        machine.set_key(0x0, True)
        assert bytes(machine.state.v) == bytes(16)
        machine.step()
        assert machine.state.pc == PROGRAM_START + 4
