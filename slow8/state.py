from slow8.framebuffer import Framebuffer
from slow8.keypad import Keypad

# The total amount of memory available to the machine
MEMORY_SIZE = 4096

# Programs are loaded, and start executing, here
PROGRAM_START = 0x200

# Largest program image that fits between PROGRAM_START and the end of memory
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START

NUM_REGISTERS = 16
STACK_DEPTH = 16

# VF doubles as the carry, borrow and collision flag
FLAG = 0xF

# Each built-in glyph is 5 rows of 8 pixels
FONT_START = 0x000
GLYPH_SIZE = 5

FONTSET = (
    (0xF0, 0x90, 0x90, 0x90, 0xF0),  # 0
    (0x20, 0x60, 0x20, 0x20, 0x70),  # 1
    (0xF0, 0x10, 0xF0, 0x80, 0xF0),  # 2
    (0xF0, 0x10, 0xF0, 0x10, 0xF0),  # 3
    (0x90, 0x90, 0xF0, 0x10, 0x10),  # 4
    (0xF0, 0x80, 0xF0, 0x10, 0xF0),  # 5
    (0xF0, 0x80, 0xF0, 0x90, 0xF0),  # 6
    (0xF0, 0x10, 0x20, 0x40, 0x40),  # 7
    (0xF0, 0x90, 0xF0, 0x90, 0xF0),  # 8
    (0xF0, 0x90, 0xF0, 0x10, 0xF0),  # 9
    (0xF0, 0x90, 0xF0, 0x90, 0x90),  # A
    (0xE0, 0x90, 0xE0, 0x90, 0xE0),  # B
    (0xF0, 0x80, 0x80, 0x80, 0xF0),  # C
    (0xE0, 0x90, 0x90, 0x90, 0xE0),  # D
    (0xF0, 0x80, 0xF0, 0x80, 0xF0),  # E
    (0xF0, 0x80, 0xF0, 0x80, 0x80),  # F
)


class CpuState:
    """
    Everything a running program can observe or change: registers, memory,
    call stack, timers and the display. The keypad is only referenced, the
    host owns and writes it.
    """

    def __init__(self, keypad=None):
        self.memory = bytearray(MEMORY_SIZE)
        self.v = bytearray(NUM_REGISTERS)  # V0 - VF
        self.i = 0  # index register
        self.pc = PROGRAM_START
        self.sp = 0
        self.stack = [0] * STACK_DEPTH
        self.delay_timer = 0  # 60Hz timer, max 255
        self.sound_timer = 0  # 60Hz timer, max 255
        self.framebuffer = Framebuffer()
        self.keypad = keypad if keypad is not None else Keypad()
        # register index a pending LD Vx, K will store into
        self.awaiting_key = None
        self._load_fontset()

    def _load_fontset(self):
        for digit, glyph in enumerate(FONTSET):
            address = FONT_START + digit * GLYPH_SIZE
            self.memory[address:address + GLYPH_SIZE] = bytes(glyph)

    def load(self, data):
        """
        Copy a raw program image into memory starting at PROGRAM_START.
        """
        data = bytes(data)
        if len(data) > MAX_PROGRAM_SIZE:
            raise ValueError(
                "Program too large: {} bytes, at most {} fit in memory".format(
                    len(data), MAX_PROGRAM_SIZE
                )
            )
        self.memory[PROGRAM_START:PROGRAM_START + len(data)] = data

    def read(self, address):
        return self.memory[address % MEMORY_SIZE]

    def write(self, address, value):
        self.memory[address % MEMORY_SIZE] = value

    def __str__(self):
        val = "PC: {:04X}  I: {:04X}  SP: {:X}  DT: {:02X}  ST: {:02X}\n".format(
            self.pc, self.i, self.sp, self.delay_timer, self.sound_timer
        )
        val += " ".join("V{:X}:{:02X}".format(index, value) for index, value in enumerate(self.v))
        return val
