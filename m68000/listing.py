"""Sequential disassembly of a memory range with skip-on-error recovery."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .decoding.bind import DecodedInstr
from .decoding.errors import InvalidInstruction
from .disassembler import Disassembler
from .memory import BufferTooShort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListingLine:
    address: int
    words: Tuple[int, ...]
    text: str
    instr: Optional[DecodedInstr] = None
    error: Optional[Exception] = None

    @property
    def length(self) -> int:
        return 2 * len(self.words)

    @property
    def is_data(self) -> bool:
        return self.instr is None

    def format(self, show_words: bool = True) -> str:
        if not show_words:
            return f"{self.address:06X}  {self.text}"
        words = " ".join(f"{w:04X}" for w in self.words)
        return f"{self.address:06X}  {words:<24}  {self.text}"


def _data_line(dasm: Disassembler, address: int, error: Exception) -> ListingLine:
    word = dasm.memory.get_uint16(address)
    return ListingLine(address, (word,), f"DC.W ${word:04X}", error=error)


def iter_listing(
    dasm: Disassembler,
    start: Optional[int] = None,
    end: Optional[int] = None,
    count: Optional[int] = None,
) -> Iterator[ListingLine]:
    """
    Disassemble `[start, end)` one instruction at a time.

    The range is clipped to the memory region.

    Words that do not decode, or instructions that would extend past `end`,
    are emitted as `DC.W` data and scanning resumes at the next word.
    """
    memory = dasm.memory
    address = memory.start_address
    if start is not None:
        address = max(start, memory.start_address)
    limit = memory.end_address if end is None else min(end, memory.end_address)
    emitted = 0

    while address + 2 <= limit and (count is None or emitted < count):
        try:
            decoded = dasm.decode_instruction(address)
        except (InvalidInstruction, BufferTooShort) as exc:
            logger.warning("%06X: cannot disassemble: %s", address, exc)
            line = _data_line(dasm, address, exc)
        else:
            if decoded.end > limit:
                exc = BufferTooShort(
                    f"{decoded} at {address:#x} runs past end of range {limit:#x}"
                )
                logger.warning("%06X: %s", address, exc)
                line = _data_line(dasm, address, exc)
            else:
                words = tuple(
                    memory.get_uint16(a) for a in range(address, decoded.end, 2)
                )
                line = ListingLine(address, words, decoded.render(), instr=decoded)

        yield line
        emitted += 1
        address += line.length
