from __future__ import annotations

import logging
from typing import Optional

from .decoding.bind import DecodedInstr
from .decoding.decode_map import decode_at
from .decoding.reader import StreamCtx
from .memory import Memory

logger = logging.getLogger(__name__)


class Disassembler:
    """
    Cursor-based 68000 disassembler over a `Memory`.

    `pointer` is the address of the next instruction. `decode()` with an
    address jumps there first; without one it continues from the previous
    instruction, so repeated calls walk a code stream. A failed decode leaves
    `pointer` at the start of the offending instruction.

    Instances are not thread-safe; several instances may share one memory.
    """

    def __init__(self, memory: Memory) -> None:
        self.memory = memory
        self.pointer = memory.start_address

    def decode_instruction(self, address: Optional[int] = None) -> DecodedInstr:
        if address is not None:
            self.pointer = address
        ctx = StreamCtx(memory=self.memory, pc=self.pointer)
        decoded = decode_at(ctx)
        self.pointer = ctx.position
        logger.debug("%06X: %s (%d bytes)", decoded.address, decoded, decoded.length)
        return decoded

    def decode(self, address: Optional[int] = None) -> str:
        return self.decode_instruction(address).render()


def disassemble(data: bytes, address: int = 0) -> str:
    """Disassemble the first instruction of big-endian `data` mapped at `address`."""
    return Disassembler(Memory.from_bytes(data, address)).decode(address)
