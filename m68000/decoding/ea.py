"""Effective-address resolution and immediate-data fetch."""

from __future__ import annotations

from typing import Optional

from .bind import (
    AbsLong,
    AbsShort,
    AddrDisp,
    AddrIndex,
    AddrIndirect,
    AddrReg,
    DataReg,
    EffectiveAddress,
    Immediate,
    PCDisp,
    PCIndex,
    PostIncrement,
    PreDecrement,
    Size,
)
from .errors import (
    MalformedOperand,
    MissingOperandSize,
    UnsupportedAddressingMode,
    UnsupportedImmediateSize,
)
from .reader import StreamCtx, sign_extend


def read_immediate(ctx: StreamCtx, size: Optional[int], key: str = "imm") -> int:
    """
    Read immediate data of `size` at the cursor.

    Byte data still occupies a full word whose high byte must be zero; word
    and long data are returned sign-extended.
    """
    start = ctx.bytes_consumed()
    if size == Size.BYTE:
        raw = ctx.read_u16()
        if raw & 0xFF00:
            raise MalformedOperand(
                f"high byte of byte-immediate must be zero (got {raw:#06x})"
            )
        value = raw & 0xFF
        width = 8
    elif size == Size.WORD:
        value = ctx.read_s16()
        width = 16
    elif size == Size.LONG:
        value = ctx.read_s32()
        width = 32
    else:
        raise UnsupportedImmediateSize(f"unsupported immediate size: {size!r}")
    ctx.record_operand(key, f"imm{width}", start=start, width=width)
    return value


def _read_index(ctx: StreamCtx) -> tuple[int, int]:
    ext = ctx.read_u16()
    return sign_extend(ext & 0xFF, 8), (ext >> 8) & 0x07


def resolve_ea(
    ctx: StreamCtx,
    mode: int,
    reg: int,
    size: Optional[int] = None,
    key: str = "ea",
) -> EffectiveAddress:
    """Decode a mode/register pair, consuming its extension words."""
    start = ctx.bytes_consumed()

    if mode == 0:
        return DataReg(reg)
    if mode == 1:
        return AddrReg(reg)
    if mode == 2:
        return AddrIndirect(reg)
    if mode == 3:
        return PostIncrement(reg)
    if mode == 4:
        return PreDecrement(reg)

    operand: EffectiveAddress
    if mode == 5:
        operand = AddrDisp(reg, ctx.read_s16())
        ctx.record_operand(key, "d16_an", start=start)
        return operand
    if mode == 6:
        disp, index = _read_index(ctx)
        ctx.record_operand(key, "d8_an_xn", start=start)
        return AddrIndex(reg, disp, index)

    if mode == 7:
        if reg == 0:
            operand = AbsShort(ctx.read_s16())
            ctx.record_operand(key, "abs_w", start=start)
            return operand
        if reg == 1:
            operand = AbsLong(ctx.read_u32())
            ctx.record_operand(key, "abs_l", start=start)
            return operand
        if reg == 2:
            operand = PCDisp(ctx.read_s16())
            ctx.record_operand(key, "d16_pc", start=start)
            return operand
        if reg == 3:
            disp, index = _read_index(ctx)
            ctx.record_operand(key, "d8_pc_xn", start=start)
            return PCIndex(disp, index)
        if reg == 4:
            if size is None:
                raise MissingOperandSize("missing size for immediate operand")
            value = read_immediate(ctx, size, key)
            return Immediate(value, Size(size))

    raise UnsupportedAddressingMode(
        f"Unsupported addressing mode: mode {mode}, register {reg}"
    )
