"""
Motorola 68000 disassembler.

`Disassembler(memory).decode(address)` renders one instruction as text and
leaves its cursor on the next one; `decode_instruction` returns the typed
`DecodedInstr` behind that text.
"""

from .decoding import DecodedInstr, InvalidInstruction, Size  # noqa: F401
from .disassembler import Disassembler, disassemble  # noqa: F401
from .listing import ListingLine, iter_listing  # noqa: F401
from .memory import BufferTooShort, Memory  # noqa: F401

__all__ = [
    "BufferTooShort",
    "DecodedInstr",
    "Disassembler",
    "InvalidInstruction",
    "ListingLine",
    "Memory",
    "Size",
    "disassemble",
    "iter_listing",
]
