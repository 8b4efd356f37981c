from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from stackscript.values import I32_MAX, I32_MIN


class TokenKind(str, Enum):
    COMMENT = "comment"
    STRING = "string"
    INT = "int"

    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    MOD = "mod"
    EQUAL = "equal"
    GREATER_THAN = "greater_than"

    DUP = "dup"
    SWAP = "swap"
    CJUMP = "cjump"

    PRINT = "print"
    NEWLINE = "newline"


# Source spelling of every operator token, longest first so that a symbol is
# never shadowed by one of its prefixes.
OPERATORS: dict[str, TokenKind] = dict(
    sorted(
        {
            ".+": TokenKind.ADD,
            ".-": TokenKind.SUB,
            ".*": TokenKind.MUL,
            "./": TokenKind.DIV,
            ".mod": TokenKind.MOD,
            ".=?": TokenKind.EQUAL,
            ".>?": TokenKind.GREATER_THAN,
            ".dup": TokenKind.DUP,
            ".swap": TokenKind.SWAP,
            ".cjump": TokenKind.CJUMP,
            ".print": TokenKind.PRINT,
            ".newline": TokenKind.NEWLINE,
        }.items(),
        key=lambda item: -len(item[0]),
    )
)

SPELLINGS: dict[TokenKind, str] = {kind: sym for sym, kind in OPERATORS.items()}

LITERAL_KINDS = frozenset({TokenKind.COMMENT, TokenKind.STRING, TokenKind.INT})


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    value: int | str | None = None
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)

    @property
    def is_comment(self) -> bool:
        return self.kind == TokenKind.COMMENT

    def spelling(self) -> str:
        """Render the token the way it would be written in a script."""
        if self.kind == TokenKind.COMMENT:
            return f"({self.value})"
        if self.kind == TokenKind.STRING:
            return f"~{self.value}~"
        if self.kind == TokenKind.INT:
            return str(self.value)
        return SPELLINGS[self.kind]

    def __str__(self) -> str:
        return self.spelling()


def comment(text: str) -> Token:
    return Token(TokenKind.COMMENT, text)


def string(text: str) -> Token:
    return Token(TokenKind.STRING, text)


def integer(value: int) -> Token:
    value = int(value)
    if not I32_MIN <= value <= I32_MAX:
        raise ValueError(f"integer literal out of 32-bit range: {value}")
    return Token(TokenKind.INT, value)


def op(kind: TokenKind) -> Token:
    if kind in LITERAL_KINDS:
        raise ValueError(f"not an operator kind: {kind.value}")
    return Token(kind)
