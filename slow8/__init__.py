from slow8.decoder import decode
from slow8.errors import DecodeError, EngineFault, StackOverflow
from slow8.framebuffer import Framebuffer
from slow8.instructions import Instruction, Op
from slow8.interpreter import ExecResult, execute, fetch_and_decode, tick_timers
from slow8.keypad import Keypad
from slow8.machine import Chip8
from slow8.state import CpuState

__all__ = [
    "Chip8",
    "CpuState",
    "DecodeError",
    "EngineFault",
    "ExecResult",
    "Framebuffer",
    "Instruction",
    "Keypad",
    "Op",
    "StackOverflow",
    "decode",
    "execute",
    "fetch_and_decode",
    "tick_timers",
]
