from __future__ import annotations

from typing import Tuple

# Indexed by the 2-bit size field (0: byte, 1: word, 2: long).
SIZES: Tuple[str, ...] = ("", ".W", ".L")

# Indexed by the 4-bit condition field, in encoding order.
CONDITIONS: Tuple[str, ...] = (
    "T",
    "F",
    "HI",
    "LS",
    "CC",
    "CS",
    "NE",
    "EQ",
    "VC",
    "VS",
    "PL",
    "MI",
    "GE",
    "LT",
    "GT",
    "LE",
)

# MOVEM mask bit i names MOVEM_REGISTERS[i] for register-to-memory transfers;
# memory-to-register transfers walk the reversed table.
MOVEM_REGISTERS: Tuple[str, ...] = tuple(
    [f"D{n}" for n in range(8)] + [f"A{n}" for n in range(8)]
)
MOVEM_REGISTERS_REVERSED: Tuple[str, ...] = tuple(reversed(MOVEM_REGISTERS))

# Group 0, rx field of the immediate forms.
IMMEDIATE_OPS = {
    0: "ORI",
    1: "ANDI",
    2: "SUBI",
    3: "ADDI",
    5: "EORI",
    6: "CMPI",
}

# Bits 7-6 of the static and dynamic bit instructions.
BIT_OPS: Tuple[str, ...] = ("BTST", "BCHG", "BCLR", "BSET")

# Group 4, rx field of the single-operand instructions (size field < 3).
UNARY_OPS = {
    0: "NEGX",
    1: "CLR",
    2: "NEG",
    3: "NOT",
    5: "TST",
}

# Shift/rotate type (bits 4-3 of register shifts, bits 10-9 of memory shifts).
SHIFT_OPS: Tuple[str, ...] = ("AS", "LS", "ROX", "RO")

# MOVE size field (bits 13-12) to the canonical 2-bit size.
MOVE_SIZES = {1: 0, 3: 1, 2: 2}


def condition_name(cc: int) -> str:
    return CONDITIONS[cc & 0x0F]


def movem_register_names(mask: int, memory_to_register: bool) -> Tuple[str, ...]:
    table = MOVEM_REGISTERS_REVERSED if memory_to_register else MOVEM_REGISTERS
    selected = {table[bit] for bit in range(16) if mask & (1 << bit)}
    return tuple(name for name in MOVEM_REGISTERS if name in selected)
