import logging

from slow8.interpreter import ExecResult, execute, fetch_and_decode, random_byte, tick_timers
from slow8.keypad import Keypad
from slow8.state import CpuState

logger = logging.getLogger(__name__)


class Chip8:
    """
    The engine as seen by a host: one CPU state, the keypad the host writes
    and the random source RND draws from.

    The host decides how often to call step() and must call tick_timers()
    at 60Hz on its own schedule. Neither call renders or sleeps.
    """

    def __init__(self, rng=None):
        self.rng = rng if rng is not None else random_byte
        self.keypad = Keypad()
        self.state = CpuState(self.keypad)

    def reset(self):
        """
        Start over with a blank machine. The program has to be loaded again.
        """
        self.state = CpuState(self.keypad)

    def load(self, data):
        self.state.load(data)

    @property
    def framebuffer(self):
        return self.state.framebuffer

    @property
    def awaiting_key(self):
        return self.state.awaiting_key is not None

    def step(self):
        """
        Fetch, decode and execute one instruction.

        While a LD Vx, K is pending nothing is fetched and AWAIT_KEY is
        returned. Raises DecodeError or StackOverflow, both EngineFault.
        """
        state = self.state
        if state.awaiting_key is not None:
            return ExecResult.AWAIT_KEY

        instruction = fetch_and_decode(state)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%04X: %s", (state.pc - 2) & 0xFFFF, instruction)
        return execute(instruction, state, self.rng)

    def tick_timers(self):
        return tick_timers(self.state)

    def set_key(self, code, pressed):
        """
        Update the keypad. A key going down completes a pending LD Vx, K.
        """
        key_down = self.keypad.set_key(code, pressed)
        state = self.state
        if key_down and state.awaiting_key is not None:
            register = state.awaiting_key
            state.v[register] = code
            state.awaiting_key = None
            logger.debug("Key %X stored in V%X, resuming", code, register)
