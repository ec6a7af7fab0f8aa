"""
Typed decoding of 68000 instruction words.

`decode_map` walks the opcode grammar, `ea` resolves effective addresses and
immediates, and `bind` holds the operand types the decoders produce.
"""

from .bind import (  # noqa: F401
    AbsLong,
    AbsShort,
    AddrDisp,
    AddrIndex,
    AddrIndirect,
    AddrReg,
    BranchDisp,
    DataReg,
    DecodedInstr,
    EffectiveAddress,
    Immediate,
    Operand,
    PCDisp,
    PCIndex,
    PostIncrement,
    PreDecrement,
    Quick,
    RegisterEA,
    RegList,
    Size,
    SpecialReg,
)
from .errors import (  # noqa: F401
    InvalidInstruction,
    MalformedOperand,
    MissingOperandSize,
    UnknownInstruction,
    UnsupportedAddressingMode,
    UnsupportedImmediateSize,
)
from .reader import LayoutEntry, StreamCtx  # noqa: F401
from . import decode_map  # noqa: F401

__all__ = [
    "AbsLong",
    "AbsShort",
    "AddrDisp",
    "AddrIndex",
    "AddrIndirect",
    "AddrReg",
    "BranchDisp",
    "DataReg",
    "DecodedInstr",
    "EffectiveAddress",
    "Immediate",
    "Operand",
    "PCDisp",
    "PCIndex",
    "PostIncrement",
    "PreDecrement",
    "Quick",
    "RegisterEA",
    "RegList",
    "Size",
    "SpecialReg",
    "InvalidInstruction",
    "MalformedOperand",
    "MissingOperandSize",
    "UnknownInstruction",
    "UnsupportedAddressingMode",
    "UnsupportedImmediateSize",
    "LayoutEntry",
    "StreamCtx",
    "decode_map",
]
