#!/usr/bin/env python3

"""
Instruction Decoder

Turns a 16-bit instruction word into one of the 35 operations of the
instruction set.  The top nibble picks a category; categories 0x0, 0x8, 0xE and
0xF hold several operations each, so they are looked up again on the rest of
the word:

    * 0x0 - Full word.  Anything other than CLS or RET is an (ignored) SYS call
    * 0x8 - Low nibble picks one of the 9 ALU operations
    * 0xE - Low byte picks SKP or SKNP
    * 0xF - Low byte picks one of the 9 timer/memory/font operations

An unknown sub-code in 0x8, 0xE or 0xF decodes to None.  The CPU reports that as
a fault along with the address it was fetched from.

Operand fields always sit at the same bit positions, so they are extracted by
the small functions at the bottom of this module:
    n = Nibble
    kk = Byte
    nnn = Address
    x/y = Register (0-15)
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from enum import IntEnum, unique


@unique
class Op(IntEnum):
    SYS = 0        # 0nnn
    CLS = 1        # 00E0
    RET = 2        # 00EE
    JP = 3         # 1nnn
    CALL = 4       # 2nnn
    SE_BYTE = 5    # 3xkk
    SNE_BYTE = 6   # 4xkk
    SE_REG = 7     # 5xy0
    LD_BYTE = 8    # 6xkk
    ADD_BYTE = 9   # 7xkk
    LD_REG = 10    # 8xy0
    OR = 11        # 8xy1
    AND = 12       # 8xy2
    XOR = 13       # 8xy3
    ADD_REG = 14   # 8xy4
    SUB = 15       # 8xy5
    SHR = 16       # 8xy6
    SUBN = 17      # 8xy7
    SHL = 18       # 8xyE
    SNE_REG = 19   # 9xy0
    LD_I = 20      # Annn
    JP_V0 = 21     # Bnnn
    RND = 22       # Cxkk
    DRW = 23       # Dxyn
    SKP = 24       # Ex9E
    SKNP = 25      # ExA1
    LD_VX_DT = 26  # Fx07
    LD_VX_K = 27   # Fx0A
    LD_DT_VX = 28  # Fx15
    LD_ST_VX = 29  # Fx18
    ADD_I_VX = 30  # Fx1E
    LD_F_VX = 31   # Fx29
    LD_B_VX = 32   # Fx33
    LD_I_VX = 33   # Fx55
    LD_VX_I = 34   # Fx65


# Categories with a single meaning
CATEGORY_OPS = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_BYTE,
    0x4: Op.SNE_BYTE,
    0x5: Op.SE_REG,
    0x6: Op.LD_BYTE,
    0x7: Op.ADD_BYTE,
    0x9: Op.SNE_REG,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW
}

# Category 0x0, matched on the full word.  Everything else is SYS.
SYSTEM_OPS = {
    0x00E0: Op.CLS,
    0x00EE: Op.RET
}

# Category 0x8, matched on the low nibble
ALU_OPS = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL
}

# Category 0xE, matched on the low byte
KEY_OPS = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP
}

# Category 0xF, matched on the low byte
MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX,
    0x29: Op.LD_F_VX,
    0x33: Op.LD_B_VX,
    0x55: Op.LD_I_VX,
    0x65: Op.LD_VX_I
}


def decode(opcode):
    cat = category(opcode)

    if cat == 0x0:
        return SYSTEM_OPS.get(opcode, Op.SYS)

    if cat == 0x8:
        return ALU_OPS.get(nibble(opcode))

    if cat == 0xE:
        return KEY_OPS.get(imm8(opcode))

    if cat == 0xF:
        return MISC_OPS.get(imm8(opcode))

    return CATEGORY_OPS[cat]


def category(opcode):
    return (opcode & 0xF000) >> 12


def addr12(opcode):
    return opcode & 0xFFF


def nibble(opcode):
    return opcode & 0xF


def reg_x(opcode):
    return (opcode & 0xF00) >> 8


def reg_y(opcode):
    return (opcode & 0xF0) >> 4


def imm8(opcode):
    return opcode & 0xFF
