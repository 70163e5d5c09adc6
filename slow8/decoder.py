from slow8.errors import DecodeError
from slow8.instructions import Instruction, Op

# 8xy_ ops keyed by their last nibble
ALU_OPS = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

# Ex__ ops keyed by their low byte
KEY_OPS = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

# Fx__ ops keyed by their low byte
MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I,
    0x29: Op.LD_F,
    0x33: Op.LD_B,
    0x55: Op.LD_STORE,
    0x65: Op.LD_READ,
}


def decode(opcode: int) -> Instruction:
    """
    Decode a 16-bit word into an Instruction.

    Raises DecodeError for bit patterns that have no assigned instruction.
    """
    opcode &= 0xFFFF
    first_nibble = opcode >> 12
    x = (opcode & 0x0F00) >> 8
    y = (opcode & 0x00F0) >> 4
    n = opcode & 0x000F
    kk = opcode & 0x00FF
    nnn = opcode & 0x0FFF

    if first_nibble == 0x0:
        if opcode == 0x00E0:
            return Instruction(Op.CLS)
        if opcode == 0x00EE:
            return Instruction(Op.RET)
        # opcode 0x0NNN
        # machine code routine, accepted but never run
        return Instruction(Op.SYS, (nnn,))

    elif first_nibble == 0x1:
        return Instruction(Op.JP, (nnn,))

    elif first_nibble == 0x2:
        return Instruction(Op.CALL, (nnn,))

    elif first_nibble == 0x3:
        return Instruction(Op.SE, (x, kk))

    elif first_nibble == 0x4:
        return Instruction(Op.SNE, (x, kk))

    elif first_nibble == 0x5:
        # opcode 0x5XY0, any other last nibble is unassigned
        if n == 0x0:
            return Instruction(Op.SE_REG, (x, y))

    elif first_nibble == 0x6:
        return Instruction(Op.LD, (x, kk))

    elif first_nibble == 0x7:
        return Instruction(Op.ADD, (x, kk))

    elif first_nibble == 0x8:
        op = ALU_OPS.get(n)
        if op is not None:
            return Instruction(op, (x, y))

    elif first_nibble == 0x9:
        # opcode 0x9XY0
        if n == 0x0:
            return Instruction(Op.SNE_REG, (x, y))

    elif first_nibble == 0xA:
        return Instruction(Op.LD_I, (nnn,))

    elif first_nibble == 0xB:
        return Instruction(Op.JP_V0, (nnn,))

    elif first_nibble == 0xC:
        return Instruction(Op.RND, (x, kk))

    elif first_nibble == 0xD:
        return Instruction(Op.DRW, (x, y, n))

    elif first_nibble == 0xE:
        op = KEY_OPS.get(kk)
        if op is not None:
            return Instruction(op, (x,))

    else:
        op = MISC_OPS.get(kk)
        if op is not None:
            return Instruction(op, (x,))

    raise DecodeError(opcode)
