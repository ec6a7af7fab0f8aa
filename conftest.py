"""Shared pytest fixtures for the 68000 disassembler tests."""

from __future__ import annotations

from typing import Callable, Sequence

import pytest

from m68000 import Disassembler, Memory


def words_to_bytes(words: Sequence[int]) -> bytes:
    return b"".join(w.to_bytes(2, "big") for w in words)


@pytest.fixture
def make_dasm() -> Callable[..., Disassembler]:
    """Build a disassembler over big-endian instruction words."""

    def _make(words: Sequence[int], address: int = 0) -> Disassembler:
        return Disassembler(Memory.from_bytes(words_to_bytes(words), address))

    return _make
