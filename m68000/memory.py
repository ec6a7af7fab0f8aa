"""Byte-addressable memory with fixed-width, endian-aware accessors."""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Union


class BufferTooShort(Exception):
    """Raised when attempting to access outside the memory buffer."""


class Memory:
    """
    Linear memory region mapped at `start_address`.

    Addresses passed to the accessors are absolute; the offset into the
    backing buffer is `address - start_address`. Values are big-endian unless
    `little_endian` is set, matching the 68000's native byte order.
    """

    def __init__(
        self, size: int, start_address: int = 0, little_endian: bool = False
    ) -> None:
        self.buf = bytearray(size)
        self.start_address = start_address
        self.little_endian = little_endian

    @classmethod
    def from_bytes(
        cls, data: bytes, start_address: int = 0, little_endian: bool = False
    ) -> "Memory":
        mem = cls(len(data), start_address, little_endian)
        mem.buf[:] = data
        return mem

    @classmethod
    def load(
        cls,
        path: Union[str, Path],
        start_address: int = 0,
        little_endian: bool = False,
    ) -> "Memory":
        return cls.from_bytes(Path(path).read_bytes(), start_address, little_endian)

    def __len__(self) -> int:
        return len(self.buf)

    @property
    def end_address(self) -> int:
        return self.start_address + len(self.buf)

    def _offset(self, address: int, size: int) -> int:
        offset = address - self.start_address
        if offset < 0 or offset + size > len(self.buf):
            raise BufferTooShort(
                f"Access of {size} byte(s) at {address:#x} outside "
                f"[{self.start_address:#x}, {self.end_address:#x})"
            )
        return offset

    def _fmt(self, code: str) -> str:
        return ("<" if self.little_endian else ">") + code

    def _unpack(self, code: str, address: int) -> int:
        fmt = self._fmt(code)
        offset = self._offset(address, struct.calcsize(fmt))
        return struct.unpack_from(fmt, self.buf, offset)[0]

    def _pack(self, code: str, address: int, value: int) -> None:
        fmt = self._fmt(code)
        offset = self._offset(address, struct.calcsize(fmt))
        struct.pack_into(fmt, self.buf, offset, value)

    def get_int8(self, address: int) -> int:
        return self._unpack("b", address)

    def get_uint8(self, address: int) -> int:
        return self._unpack("B", address)

    def get_int16(self, address: int) -> int:
        return self._unpack("h", address)

    def get_uint16(self, address: int) -> int:
        return self._unpack("H", address)

    def get_int32(self, address: int) -> int:
        return self._unpack("i", address)

    def get_uint32(self, address: int) -> int:
        return self._unpack("I", address)

    def set_int8(self, address: int, value: int) -> None:
        self._pack("b", address, value)

    def set_uint8(self, address: int, value: int) -> None:
        self._pack("B", address, value)

    def set_int16(self, address: int, value: int) -> None:
        self._pack("h", address, value)

    def set_uint16(self, address: int, value: int) -> None:
        self._pack("H", address, value)

    def set_int32(self, address: int, value: int) -> None:
        self._pack("i", address, value)
