import logging
from enum import Enum
from random import randint

from slow8.decoder import decode
from slow8.errors import DecodeError, StackOverflow
from slow8.framebuffer import HEIGHT, WIDTH
from slow8.instructions import Instruction, Op
from slow8.state import FLAG, FONT_START, GLYPH_SIZE, MEMORY_SIZE, STACK_DEPTH, CpuState

logger = logging.getLogger(__name__)


class ExecResult(Enum):
    CONTINUE = "continue"
    # LD Vx, K is pending, nothing may be fetched until a key goes down
    AWAIT_KEY = "await_key"


def random_byte():
    return randint(0, 255)


def fetch_and_decode(state: CpuState) -> Instruction:
    """
    Read the big-endian word at PC, advance PC past it and decode it.
    """
    pc = state.pc
    memory = state.memory
    opcode = (memory[pc % MEMORY_SIZE] << 8) | memory[(pc + 1) % MEMORY_SIZE]
    state.pc = (pc + 2) & 0xFFFF
    try:
        return decode(opcode)
    except DecodeError as e:
        raise DecodeError(e.word, pc) from None


def tick_timers(state: CpuState) -> bool:
    """
    Count both timers down by one. Meant to be called at 60Hz no matter how
    fast instructions run. Returns True on the tick the sound timer expires.
    """
    if state.delay_timer > 0:
        state.delay_timer -= 1
    if state.sound_timer > 0:
        state.sound_timer -= 1
        return state.sound_timer == 0
    return False


def _draw_sprite(state, x, y, n):
    framebuffer = state.framebuffer
    memory = state.memory
    I = state.i

    collision = False
    for row in range(n):
        sprite_byte = memory[(I + row) % MEMORY_SIZE]
        if not sprite_byte:
            continue
        py = (y + row) % HEIGHT
        for col in range(8):
            if (sprite_byte >> (7 - col)) & 1:
                collision |= framebuffer.plot((x + col) % WIDTH, py)
    # any draw dirties the screen, even an empty sprite
    framebuffer.dirty = True
    return collision


def execute(instruction: Instruction, state: CpuState, rng=random_byte) -> ExecResult:
    """
    Apply one decoded instruction to `state`.

    PC is expected to point past the instruction already, as left by
    fetch_and_decode. The only fault raised here is StackOverflow.
    """
    # use local references, the register file is touched by almost every op
    op = instruction.op
    args = instruction.operands
    V = state.v

    if op is Op.DRW:
        # opcode 0xDXYN
        # check most expensive instruction first
        # draw sprite at coordinate (VX, VY) with height N, VF = collision
        x, y, n = args
        collision = _draw_sprite(state, V[x], V[y], n)
        V[FLAG] = 1 if collision else 0

    elif op is Op.SNE:
        # opcode 0x4XNN
        # skip next instruction if VX != NN
        x, kk = args
        if V[x] != kk:
            state.pc = (state.pc + 2) & 0xFFFF

    elif op is Op.ADD:
        # opcode 0x7XNN
        # add NN to register VX, carry is dropped and VF left alone
        x, kk = args
        V[x] = (V[x] + kk) & 0xFF

    elif op is Op.CLS:
        # opcode 0x00E0
        state.framebuffer.clear()

    elif op is Op.RET:
        # opcode 0x00EE
        # return from subroutine, an empty stack makes this a no-op
        if state.sp == 0:
            logger.debug("RET with an empty stack at %#06x, ignored", (state.pc - 2) & 0xFFFF)
        else:
            state.sp -= 1
            state.pc = state.stack[state.sp]

    elif op is Op.SYS:
        # opcode 0x0NNN
        # machine code routines do not exist on this machine
        pass

    elif op is Op.JP:
        # opcode 0x1NNN
        state.pc = args[0]

    elif op is Op.CALL:
        # opcode 0x2NNN
        # push the return address, then jump to NNN
        if state.sp >= STACK_DEPTH:
            raise StackOverflow((state.pc - 2) & 0xFFFF, args[0])
        state.stack[state.sp] = state.pc
        state.sp += 1
        state.pc = args[0]

    elif op is Op.SE:
        # opcode 0x3XNN
        # skip next instruction if VX == NN
        x, kk = args
        if V[x] == kk:
            state.pc = (state.pc + 2) & 0xFFFF

    elif op is Op.SE_REG:
        # opcode 0x5XY0
        # skip next instruction if VX == VY
        x, y = args
        if V[x] == V[y]:
            state.pc = (state.pc + 2) & 0xFFFF

    elif op is Op.LD:
        # opcode 0x6XNN
        x, kk = args
        V[x] = kk

    elif op is Op.LD_REG:
        # opcode 0x8XY0
        x, y = args
        V[x] = V[y]

    elif op is Op.OR:
        # opcode 0x8XY1
        x, y = args
        V[x] |= V[y]

    elif op is Op.AND:
        # opcode 0x8XY2
        x, y = args
        V[x] &= V[y]

    elif op is Op.XOR:
        # opcode 0x8XY3
        x, y = args
        V[x] ^= V[y]

    elif op is Op.ADD_REG:
        # opcode 0x8XY4
        # add VY to VX, set VF to 1 if overflow, else 0
        x, y = args
        total = V[x] + V[y]
        V[x] = total & 0xFF
        V[FLAG] = 1 if total > 0xFF else 0

    elif op is Op.SUB:
        # opcode 0x8XY5
        # set VX to VX - VY, set VF to 0 if underflow, else 1
        x, y = args
        no_borrow = V[x] >= V[y]
        V[x] = (V[x] - V[y]) & 0xFF
        V[FLAG] = 1 if no_borrow else 0

    elif op is Op.SHR:
        # opcode 0x8XY6
        # shift VX right in place, VF gets the bit shifted out
        x = args[0]
        shifted_out = V[x] & 0x01
        V[x] >>= 1
        V[FLAG] = shifted_out

    elif op is Op.SUBN:
        # opcode 0x8XY7
        # set VX to VY - VX, set VF to 0 if underflow, else 1
        x, y = args
        no_borrow = V[y] >= V[x]
        V[x] = (V[y] - V[x]) & 0xFF
        V[FLAG] = 1 if no_borrow else 0

    elif op is Op.SHL:
        # opcode 0x8XYE
        # shift VX left in place, VF gets the most significant bit
        x = args[0]
        shifted_out = (V[x] & 0x80) >> 7
        V[x] = (V[x] << 1) & 0xFF
        V[FLAG] = shifted_out

    elif op is Op.SNE_REG:
        # opcode 0x9XY0
        x, y = args
        if V[x] != V[y]:
            state.pc = (state.pc + 2) & 0xFFFF

    elif op is Op.LD_I:
        # opcode 0xANNN
        state.i = args[0]

    elif op is Op.JP_V0:
        # opcode 0xBNNN
        # jump to address NNN + V0
        state.pc = (args[0] + V[0]) & 0xFFFF

    elif op is Op.RND:
        # opcode 0xCXNN
        # set VX to random byte AND NN
        x, kk = args
        V[x] = rng() & kk

    elif op is Op.SKP:
        # opcode 0xEX9E
        # skip next instruction if key with value VX is pressed
        if state.keypad.is_pressed(V[args[0]]):
            state.pc = (state.pc + 2) & 0xFFFF

    elif op is Op.SKNP:
        # opcode 0xEXA1
        if not state.keypad.is_pressed(V[args[0]]):
            state.pc = (state.pc + 2) & 0xFFFF

    elif op is Op.LD_VX_DT:
        # opcode 0xFX07
        V[args[0]] = state.delay_timer

    elif op is Op.LD_VX_K:
        # opcode 0xFX0A
        # suspend until a key goes down, the machine stores it into VX
        state.awaiting_key = args[0]
        logger.debug("Waiting for a key press to store in V%X", args[0])
        return ExecResult.AWAIT_KEY

    elif op is Op.LD_DT_VX:
        # opcode 0xFX15
        state.delay_timer = V[args[0]]

    elif op is Op.LD_ST_VX:
        # opcode 0xFX18
        state.sound_timer = V[args[0]]

    elif op is Op.ADD_I:
        # opcode 0xFX1E
        # add VX to I, VF is not touched
        state.i = (state.i + V[args[0]]) & 0xFFFF

    elif op is Op.LD_F:
        # opcode 0xFX29
        # set I to the location of the glyph for the low nibble of VX
        state.i = FONT_START + (V[args[0]] & 0x0F) * GLYPH_SIZE

    elif op is Op.LD_B:
        # opcode 0xFX33
        # store decimal digits of VX at I, I+1, I+2
        vx = V[args[0]]
        state.write(state.i, vx // 100)  # hundreds
        state.write(state.i + 1, (vx // 10) % 10)  # tens
        state.write(state.i + 2, vx % 10)  # ones

    elif op is Op.LD_STORE:
        # opcode 0xFX55
        # store registers V0 to VX in memory starting at address I
        for index in range(args[0] + 1):
            state.write(state.i + index, V[index])

    elif op is Op.LD_READ:
        # opcode 0xFX65
        # read registers V0 to VX from memory starting at address I
        for index in range(args[0] + 1):
            V[index] = state.read(state.i + index)

    else:
        raise AssertionError("Unhandled op: {}".format(op))

    return ExecResult.CONTINUE
