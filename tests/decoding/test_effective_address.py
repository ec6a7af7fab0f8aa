from __future__ import annotations

import pytest

from m68000.decoding import (
    AbsLong,
    AbsShort,
    AddrIndex,
    Immediate,
    MalformedOperand,
    MissingOperandSize,
    PCIndex,
    RegisterEA,
    Size,
    StreamCtx,
    UnsupportedAddressingMode,
    UnsupportedImmediateSize,
)
from m68000.decoding.ea import read_immediate, resolve_ea
from m68000.memory import Memory


def _ctx(*words: int) -> StreamCtx:
    data = b"".join(w.to_bytes(2, "big") for w in words)
    return StreamCtx(memory=Memory.from_bytes(data), pc=0)


EA_RENDERINGS = {
    0: ("D{r}", 0),
    1: ("A{r}", 0),
    2: ("(A{r})", 0),
    3: ("(A{r})+", 0),
    4: ("-(A{r})", 0),
    5: ("(772,A{r})", 2),
    6: ("(4,A{r},X3)", 2),
}

MODE7_RENDERINGS = {
    0: ("(772).W", 2),
    1: ("(50593792).L", 4),
    2: ("(772,PC)", 2),
    3: ("(4,PC,X3)", 2),
    4: ("#772", 2),
}


@pytest.mark.parametrize("mode", range(7))
@pytest.mark.parametrize("reg", range(8))
def test_register_modes(mode: int, reg: int) -> None:
    ctx = _ctx(0x0304, 0x0000, 0x0000)
    operand = resolve_ea(ctx, mode, reg, Size.WORD)
    template, consumed = EA_RENDERINGS[mode]
    assert str(operand) == template.format(r=reg)
    assert isinstance(operand, RegisterEA)
    assert ctx.bytes_consumed() == consumed
    assert operand.mode == mode
    assert operand.register == reg
    assert operand.ext_bytes == consumed


@pytest.mark.parametrize("reg", range(5))
def test_mode7_submodes(reg: int) -> None:
    ctx = _ctx(0x0304, 0x0000, 0x0000)
    operand = resolve_ea(ctx, 7, reg, Size.WORD)
    text, consumed = MODE7_RENDERINGS[reg]
    assert str(operand) == text
    assert not isinstance(operand, RegisterEA)
    assert ctx.bytes_consumed() == consumed
    assert operand.mode == 7
    assert operand.register == reg
    assert operand.ext_bytes == consumed


@pytest.mark.parametrize("reg", [5, 6, 7])
def test_mode7_reserved_registers(reg: int) -> None:
    with pytest.raises(UnsupportedAddressingMode, match="mode 7, register"):
        resolve_ea(_ctx(0x0304, 0x0000, 0x0000), 7, reg, Size.WORD)


def test_absolute_short_is_sign_extended() -> None:
    operand = resolve_ea(_ctx(0xFFFE), 7, 0)
    assert operand == AbsShort(-2)
    assert str(operand) == "(-2).W"


def test_absolute_long_is_unsigned() -> None:
    operand = resolve_ea(_ctx(0xFFFF, 0xFFFE), 7, 1)
    assert operand == AbsLong(0xFFFFFFFE)
    assert str(operand) == "(4294967294).L"


def test_index_displacement_is_sign_extended() -> None:
    assert resolve_ea(_ctx(0x0780), 6, 2) == AddrIndex(2, -128, 7)
    assert resolve_ea(_ctx(0x01FF), 7, 3) == PCIndex(-1, 1)


def test_index_register_ignores_upper_bits() -> None:
    # D/A selector, register bit 3 and size bit are not rendered
    assert str(resolve_ea(_ctx(0xFA10), 6, 0)) == "(16,A0,X2)"


def test_immediate_needs_size() -> None:
    with pytest.raises(MissingOperandSize):
        resolve_ea(_ctx(0x0001), 7, 4)


def test_immediate_sizes() -> None:
    assert resolve_ea(_ctx(0x00FF), 7, 4, Size.BYTE) == Immediate(255, Size.BYTE)
    assert resolve_ea(_ctx(0x8000), 7, 4, Size.WORD) == Immediate(-32768, Size.WORD)
    ctx = _ctx(0xFFFF, 0xFFFF)
    assert resolve_ea(ctx, 7, 4, Size.LONG) == Immediate(-1, Size.LONG)
    assert ctx.bytes_consumed() == 4


def test_byte_immediate_rejects_high_byte() -> None:
    with pytest.raises(MalformedOperand, match="high byte"):
        read_immediate(_ctx(0x0101), Size.BYTE)


@pytest.mark.parametrize("size", [3, -1, None])
def test_immediate_rejects_bad_size(size) -> None:
    with pytest.raises(UnsupportedImmediateSize):
        read_immediate(_ctx(0x0001, 0x0000), size)


def test_immediate_records_layout() -> None:
    ctx = _ctx(0x1234, 0x5678)
    assert read_immediate(ctx, Size.LONG, "src") == 0x12345678
    (entry,) = ctx.snapshot_layout()
    assert entry.key == "src"
    assert entry.kind == "imm32"
    assert entry.meta["offset"] == 0
    assert entry.meta["length_bytes"] == 4
