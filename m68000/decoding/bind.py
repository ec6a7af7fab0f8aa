from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar, List, Optional, Tuple

from ..tokens import TBegMem, TEndMem, TInstr, TInt, TReg, TRel, TSep, TText, Token, asm_str
from .reader import LayoutEntry
from .tables import SIZES


class Size(IntEnum):
    """Operand size as encoded by the 2-bit size field."""

    BYTE = 0
    WORD = 1
    LONG = 2

    @property
    def suffix(self) -> str:
        return SIZES[self]

    @property
    def immediate_bytes(self) -> int:
        return 4 if self is Size.LONG else 2


class Operand:
    __slots__ = ()

    def tokens(self) -> List[Token]:
        raise NotImplementedError(f"tokens() not implemented for {self.__class__.__name__}")

    def __str__(self) -> str:
        return asm_str(self.tokens())


class EffectiveAddress(Operand):
    """Operand encoded by a 6-bit mode/register effective-address field."""

    __slots__ = ()

    MODE: ClassVar[int]
    EXT_BYTES: ClassVar[int] = 0

    @property
    def mode(self) -> int:
        return self.MODE

    @property
    def register(self) -> int:
        raise NotImplementedError(
            f"register not implemented for {self.__class__.__name__}"
        )

    @property
    def ext_bytes(self) -> int:
        return self.EXT_BYTES


class RegisterEA(EffectiveAddress):
    """Modes 0-6, whose register field names an address or data register."""

    __slots__ = ()

    reg: int

    @property
    def register(self) -> int:
        return self.reg


@dataclass(frozen=True, slots=True)
class DataReg(RegisterEA):
    MODE: ClassVar[int] = 0
    reg: int

    def tokens(self) -> List[Token]:
        return [TReg(f"D{self.reg}")]


@dataclass(frozen=True, slots=True)
class AddrReg(RegisterEA):
    MODE: ClassVar[int] = 1
    reg: int

    def tokens(self) -> List[Token]:
        return [TReg(f"A{self.reg}")]


@dataclass(frozen=True, slots=True)
class AddrIndirect(RegisterEA):
    MODE: ClassVar[int] = 2
    reg: int

    def tokens(self) -> List[Token]:
        return [TBegMem(), TReg(f"A{self.reg}"), TEndMem()]


@dataclass(frozen=True, slots=True)
class PostIncrement(RegisterEA):
    MODE: ClassVar[int] = 3
    reg: int

    def tokens(self) -> List[Token]:
        return [TBegMem(), TReg(f"A{self.reg}"), TEndMem("+")]


@dataclass(frozen=True, slots=True)
class PreDecrement(RegisterEA):
    MODE: ClassVar[int] = 4
    reg: int

    def tokens(self) -> List[Token]:
        return [TText("-"), TBegMem(), TReg(f"A{self.reg}"), TEndMem()]


@dataclass(frozen=True, slots=True)
class AddrDisp(RegisterEA):
    MODE: ClassVar[int] = 5
    EXT_BYTES: ClassVar[int] = 2
    reg: int
    disp: int

    def tokens(self) -> List[Token]:
        return [TBegMem(), TInt(self.disp), TSep(","), TReg(f"A{self.reg}"), TEndMem()]


@dataclass(frozen=True, slots=True)
class AddrIndex(RegisterEA):
    MODE: ClassVar[int] = 6
    EXT_BYTES: ClassVar[int] = 2
    reg: int
    disp: int
    index: int

    def tokens(self) -> List[Token]:
        return [
            TBegMem(),
            TInt(self.disp),
            TSep(","),
            TReg(f"A{self.reg}"),
            TSep(","),
            TReg(f"X{self.index}"),
            TEndMem(),
        ]


@dataclass(frozen=True, slots=True)
class AbsShort(EffectiveAddress):
    MODE: ClassVar[int] = 7
    EXT_BYTES: ClassVar[int] = 2
    addr: int  # sign-extended

    @property
    def register(self) -> int:
        return 0

    def tokens(self) -> List[Token]:
        return [TBegMem(), TInt(self.addr), TEndMem(".W")]


@dataclass(frozen=True, slots=True)
class AbsLong(EffectiveAddress):
    MODE: ClassVar[int] = 7
    EXT_BYTES: ClassVar[int] = 4
    addr: int

    @property
    def register(self) -> int:
        return 1

    def tokens(self) -> List[Token]:
        return [TBegMem(), TInt(self.addr), TEndMem(".L")]


@dataclass(frozen=True, slots=True)
class PCDisp(EffectiveAddress):
    MODE: ClassVar[int] = 7
    EXT_BYTES: ClassVar[int] = 2
    disp: int

    @property
    def register(self) -> int:
        return 2

    def tokens(self) -> List[Token]:
        return [TBegMem(), TInt(self.disp), TSep(","), TReg("PC"), TEndMem()]


@dataclass(frozen=True, slots=True)
class PCIndex(EffectiveAddress):
    MODE: ClassVar[int] = 7
    EXT_BYTES: ClassVar[int] = 2
    disp: int
    index: int

    @property
    def register(self) -> int:
        return 3

    def tokens(self) -> List[Token]:
        return [
            TBegMem(),
            TInt(self.disp),
            TSep(","),
            TReg("PC"),
            TSep(","),
            TReg(f"X{self.index}"),
            TEndMem(),
        ]


@dataclass(frozen=True, slots=True)
class Immediate(EffectiveAddress):
    MODE: ClassVar[int] = 7
    value: int
    size: Size

    @property
    def register(self) -> int:
        return 4

    @property
    def ext_bytes(self) -> int:
        return self.size.immediate_bytes

    def tokens(self) -> List[Token]:
        return [TText("#"), TInt(self.value)]


@dataclass(frozen=True, slots=True)
class Quick(Operand):
    """Immediate value packed into the instruction word itself."""

    value: int

    def tokens(self) -> List[Token]:
        return [TText("#"), TInt(self.value)]


@dataclass(frozen=True, slots=True)
class SpecialReg(Operand):
    name: str  # CCR, SR or USP

    def tokens(self) -> List[Token]:
        return [TReg(self.name)]


@dataclass(frozen=True, slots=True)
class RegList(Operand):
    mask: int
    names: Tuple[str, ...]

    def tokens(self) -> List[Token]:
        if not self.names:
            return [TText("#"), TInt(0)]
        parts: List[Token] = []
        for i, name in enumerate(self.names):
            if i:
                parts.append(TSep("/"))
            parts.append(TReg(name))
        return parts


@dataclass(frozen=True, slots=True)
class BranchDisp(Operand):
    disp: int  # signed, relative to the program counter

    def tokens(self) -> List[Token]:
        return [TRel(self.disp)]


@dataclass(frozen=True, slots=True)
class DecodedInstr:
    address: int
    opcode: int
    mnemonic: str
    size: Optional[Size]
    operands: Tuple[Operand, ...]
    length: int
    layout: Tuple[LayoutEntry, ...] = field(default=(), compare=False)

    @property
    def end(self) -> int:
        return self.address + self.length

    @property
    def full_mnemonic(self) -> str:
        if self.size is None:
            return self.mnemonic
        return self.mnemonic + self.size.suffix

    def tokens(self) -> List[Token]:
        parts: List[Token] = [TInstr(self.full_mnemonic)]
        for i, operand in enumerate(self.operands):
            parts.append(TText(" ") if i == 0 else TSep(","))
            parts.extend(operand.tokens())
        return parts

    def render(self) -> str:
        return asm_str(self.tokens())

    def __str__(self) -> str:
        return self.render()
