from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..memory import Memory


def sign_extend(value: int, bits: int) -> int:
    sign_bit = 1 << (bits - 1)
    return (value & (sign_bit - 1)) - (value & sign_bit)


@dataclass(frozen=True)
class LayoutEntry:
    key: str
    kind: str
    meta: Dict[str, object]


@dataclass
class StreamCtx:
    """
    Sequential word reader over one instruction in memory.

    `pc` is the address of the instruction word; `idx` counts the bytes
    consumed so far (instruction word included), so `pc + idx` is always the
    address of the next word the hardware would fetch.
    """

    memory: Memory
    pc: int
    idx: int = 0
    _layout: List[LayoutEntry] = field(default_factory=list, init=False)

    @property
    def position(self) -> int:
        return self.pc + self.idx

    def record_operand(
        self, key: str, kind: str, *, start: Optional[int] = None, **meta
    ) -> None:
        if start is not None:
            meta.setdefault("offset", start)
            meta.setdefault("length_bytes", self.idx - start)
        self._layout.append(LayoutEntry(key=key, kind=kind, meta=dict(meta)))

    def read_u16(self) -> int:
        value = self.memory.get_uint16(self.position)
        self.idx += 2
        return value

    def read_s16(self) -> int:
        value = self.memory.get_int16(self.position)
        self.idx += 2
        return value

    def read_u32(self) -> int:
        value = self.memory.get_uint32(self.position)
        self.idx += 4
        return value

    def read_s32(self) -> int:
        value = self.memory.get_int32(self.position)
        self.idx += 4
        return value

    def bytes_consumed(self) -> int:
        return self.idx

    def snapshot_layout(self) -> tuple[LayoutEntry, ...]:
        return tuple(self._layout)
