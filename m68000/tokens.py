import enum
from typing import Iterable, List, Tuple


class TokenKind(enum.Enum):
    INSTRUCTION = "instruction"
    SEPARATOR = "separator"
    TEXT = "text"
    INTEGER = "integer"
    REGISTER = "register"
    BEGIN_MEMORY = "begin_memory"
    END_MEMORY = "end_memory"
    RELATIVE = "relative"


class Token:
    kind: TokenKind

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return False
        return self.__dict__ == getattr(other, "__dict__", {})

    def __hash__(self) -> int:
        return hash((type(self), str(self)))

    def typed(self) -> Tuple[TokenKind, str]:
        return (self.kind, str(self))


def asm_str(parts: Iterable[Token]) -> str:
    return "".join(str(part) for part in parts)


def typed_tokens(parts: Iterable[Token]) -> List[Tuple[TokenKind, str]]:
    return [part.typed() for part in parts]


class TInstr(Token):
    kind = TokenKind.INSTRUCTION

    def __init__(self, instr: str) -> None:
        self.instr = instr

    def __repr__(self) -> str:
        return f"TInstr({self.instr})"

    def __str__(self) -> str:
        return self.instr


class TSep(Token):
    kind = TokenKind.SEPARATOR

    def __init__(self, sep: str) -> None:
        self.sep = sep

    def __repr__(self) -> str:
        return f"TSep({self.sep})"

    def __str__(self) -> str:
        return self.sep


class TText(Token):
    kind = TokenKind.TEXT

    def __init__(self, text: str) -> None:
        self.text = text

    def __repr__(self) -> str:
        return f"TText({self.text})"

    def __str__(self) -> str:
        return self.text


class TInt(Token):
    kind = TokenKind.INTEGER

    def __init__(self, value: int) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"TInt({self.value})"

    def __str__(self) -> str:
        return str(self.value)


class TReg(Token):
    kind = TokenKind.REGISTER

    def __init__(self, reg: str) -> None:
        self.reg = reg

    def __repr__(self) -> str:
        return f"TReg({self.reg})"

    def __str__(self) -> str:
        return self.reg


class TBegMem(Token):
    kind = TokenKind.BEGIN_MEMORY

    def __repr__(self) -> str:
        return "TBegMem()"

    def __str__(self) -> str:
        return "("


class TEndMem(Token):
    kind = TokenKind.END_MEMORY

    def __init__(self, suffix: str = "") -> None:
        # ".W"/".L" for absolute addresses, "+" for postincrement
        self.suffix = suffix

    def __repr__(self) -> str:
        return f"TEndMem({self.suffix!r})"

    def __str__(self) -> str:
        return ")" + self.suffix


class TRel(Token):
    """PC-relative branch displacement, rendered as `*+N` / `*-N`."""

    kind = TokenKind.RELATIVE

    def __init__(self, disp: int) -> None:
        self.disp = disp

    def __repr__(self) -> str:
        return f"TRel({self.disp})"

    def __str__(self) -> str:
        return f"*{self.disp:+d}"
