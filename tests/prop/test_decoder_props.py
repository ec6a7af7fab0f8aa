from __future__ import annotations

import os

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from m68000 import BufferTooShort, Disassembler, InvalidInstruction, Memory, iter_listing
from m68000.decoding.tables import CONDITIONS, SIZES

from .strategies import (
    instruction_streams,
    short_branches,
    unassigned_words,
    word_lists,
)


FAST_MAX_EXAMPLES = int(os.getenv("M68K_PROP_EXAMPLES", "300"))
NIGHTLY_MAX_EXAMPLES = int(os.getenv("M68K_PROP_NIGHTLY_EXAMPLES", "20000"))


def _check_stream(data: bytes, base: int) -> None:
    dasm = Disassembler(Memory.from_bytes(data, base))
    try:
        decoded = dasm.decode_instruction(base)
    except InvalidInstruction:
        assert dasm.pointer == base
        return
    assert dasm.pointer == base + decoded.length
    assert 2 <= decoded.length <= len(data)
    assert decoded.length % 2 == 0
    assert sum(e.meta["length_bytes"] for e in decoded.layout) == decoded.length - 2
    assert decoded.render().startswith(decoded.full_mnemonic)


@given(data=instruction_streams())
@settings(
    max_examples=FAST_MAX_EXAMPLES,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
def test_prop_cursor_advances_by_length(data: bytes) -> None:
    _check_stream(data, 0x1000)


@pytest.mark.nightly
@given(data=instruction_streams())
@settings(
    max_examples=NIGHTLY_MAX_EXAMPLES,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
def test_prop_cursor_nightly(data: bytes) -> None:
    if not os.getenv("M68K_PROP_RUN_NIGHTLY"):
        pytest.skip("Nightly fuzzing disabled (set M68K_PROP_RUN_NIGHTLY=1 to enable)")
    _check_stream(data, 0x1000)


@given(word=short_branches())
@settings(max_examples=FAST_MAX_EXAMPLES, deadline=None)
def test_prop_short_branch_sign_extension(word: int) -> None:
    dasm = Disassembler(Memory.from_bytes(word.to_bytes(2, "big")))
    text = dasm.decode()
    disp = word & 0xFF
    expected = disp - 0x100 if disp & 0x80 else disp
    assert text.endswith(f"*{expected:+d}")
    assert dasm.pointer == 2


@given(disp=st.integers(min_value=-0x8000, max_value=0x7FFF))
@settings(max_examples=FAST_MAX_EXAMPLES, deadline=None)
def test_prop_word_branch_displacement(disp: int) -> None:
    data = (0x6000).to_bytes(2, "big") + disp.to_bytes(2, "big", signed=True)
    dasm = Disassembler(Memory.from_bytes(data))
    assert dasm.decode() == f"BRA *{disp:+d}"
    assert dasm.pointer == 4


@given(cond=st.integers(min_value=2, max_value=15))
@settings(deadline=None)
def test_prop_condition_table(cond: int) -> None:
    word = 0x6002 | (cond << 8)
    dasm = Disassembler(Memory.from_bytes(word.to_bytes(2, "big")))
    assert dasm.decode() == f"B{CONDITIONS[cond]} *+2"


@given(size=st.integers(min_value=0, max_value=2), reg=st.integers(0, 7))
@settings(deadline=None)
def test_prop_size_suffix(size: int, reg: int) -> None:
    # TST.<size> Dn
    word = 0x4A00 | (size << 6) | reg
    dasm = Disassembler(Memory.from_bytes(word.to_bytes(2, "big")))
    assert dasm.decode() == f"TST{SIZES[size]} D{reg}"


@given(word=unassigned_words())
@settings(max_examples=FAST_MAX_EXAMPLES, deadline=None)
def test_prop_unassigned_lines_raise(word: int) -> None:
    dasm = Disassembler(Memory.from_bytes(word.to_bytes(2, "big") + bytes(8)))
    with pytest.raises(InvalidInstruction):
        dasm.decode()
    assert dasm.pointer == 0


@given(words=word_lists())
@settings(max_examples=FAST_MAX_EXAMPLES, deadline=None)
def test_prop_listing_covers_range(words) -> None:
    data = b"".join(w.to_bytes(2, "big") for w in words)
    memory = Memory.from_bytes(data, 0x2000)
    lines = list(iter_listing(Disassembler(memory)))
    assert lines[0].address == 0x2000
    assert sum(line.length for line in lines) == len(data)
    for prev, line in zip(lines, lines[1:]):
        assert line.address == prev.address + prev.length
    for line in lines:
        if line.is_data:
            assert isinstance(line.error, (InvalidInstruction, BufferTooShort))
