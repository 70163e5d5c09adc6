from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Op(Enum):
    # each value is the mnemonic template, formatted with the operands
    SYS = "SYS {0:#05x}"
    CLS = "CLS"
    RET = "RET"
    JP = "JP {0:#05x}"
    CALL = "CALL {0:#05x}"
    SE = "SE V{0:X}, {1:#04x}"
    SNE = "SNE V{0:X}, {1:#04x}"
    SE_REG = "SE V{0:X}, V{1:X}"
    LD = "LD V{0:X}, {1:#04x}"
    ADD = "ADD V{0:X}, {1:#04x}"
    LD_REG = "LD V{0:X}, V{1:X}"
    OR = "OR V{0:X}, V{1:X}"
    AND = "AND V{0:X}, V{1:X}"
    XOR = "XOR V{0:X}, V{1:X}"
    ADD_REG = "ADD V{0:X}, V{1:X}"
    SUB = "SUB V{0:X}, V{1:X}"
    SHR = "SHR V{0:X}"
    SUBN = "SUBN V{0:X}, V{1:X}"
    SHL = "SHL V{0:X}"
    SNE_REG = "SNE V{0:X}, V{1:X}"
    LD_I = "LD I, {0:#05x}"
    JP_V0 = "JP V0, {0:#05x}"
    RND = "RND V{0:X}, {1:#04x}"
    DRW = "DRW V{0:X}, V{1:X}, {2:#x}"
    SKP = "SKP V{0:X}"
    SKNP = "SKNP V{0:X}"
    LD_VX_DT = "LD V{0:X}, DT"
    LD_VX_K = "LD V{0:X}, K"
    LD_DT_VX = "LD DT, V{0:X}"
    LD_ST_VX = "LD ST, V{0:X}"
    ADD_I = "ADD I, V{0:X}"
    LD_F = "LD F, V{0:X}"
    LD_B = "LD B, V{0:X}"
    LD_STORE = "LD [I], V{0:X}"
    LD_READ = "LD V{0:X}, [I]"


@dataclass(frozen=True)
class Instruction:
    """
    One decoded instruction. The operands are in encoding order: register
    indices first, then the byte, nibble or address literal. SHR and SHL
    keep the unused y register so every 8xy_ op carries the same shape.
    """

    op: Op
    operands: Tuple[int, ...] = ()

    def __str__(self):
        return self.op.value.format(*self.operands)
