from __future__ import annotations

import bisect
import re
from collections.abc import Iterable

from stackscript.errors import ScriptSyntaxError
from stackscript.tokens import OPERATORS, Token, TokenKind
from stackscript.values import I32_MAX, I32_MIN

_SEPARATORS = " \t\r\n"
_INT_RE = re.compile(r"-?[0-9]+")
_WORD_RE = re.compile(r"[^ \t\r\n]+")


class _Source:
    """Source text plus offset -> (line, col) lookup."""

    def __init__(self, src: str) -> None:
        self.text = src
        self._line_starts = [0] + [m.end() for m in re.finditer(r"\n", src)]

    def location(self, offset: int) -> tuple[int, int]:
        idx = bisect.bisect_right(self._line_starts, offset) - 1
        return idx + 1, offset - self._line_starts[idx] + 1

    def error(self, message: str, offset: int) -> ScriptSyntaxError:
        line, col = self.location(offset)
        return ScriptSyntaxError(message, line=line, col=col)

    def token(self, kind: TokenKind, value: int | str | None, offset: int) -> Token:
        line, col = self.location(offset)
        return Token(kind, value, line=line, col=col)


def _delimited(
    source: _Source, pos: int, end: int, *, open_: str, close: str, kind: TokenKind, what: str
) -> tuple[Token, int]:
    text = source.text
    stop = text.find(close, pos + 1, end)
    if stop == -1:
        raise source.error(f"unterminated {what}", pos)
    if stop == pos + 1:
        raise source.error(f"empty {what} {open_}{close}", pos)
    return source.token(kind, text[pos + 1 : stop], pos), stop + 1


def _operator(source: _Source, pos: int, end: int) -> tuple[Token, int]:
    text = source.text
    for symbol, kind in OPERATORS.items():
        if text.startswith(symbol, pos, end):
            return source.token(kind, None, pos), pos + len(symbol)
    word = _WORD_RE.match(text, pos, end)
    raise source.error(f"unknown operator {word.group(0) if word else '.'!r}", pos)


def _integer(source: _Source, pos: int, end: int) -> tuple[Token, int]:
    m = _INT_RE.match(source.text, pos, end)
    if m is None:
        raise source.error("malformed integer literal", pos)
    value = int(m.group(0))
    if not I32_MIN <= value <= I32_MAX:
        raise source.error(f"integer literal out of 32-bit range: {m.group(0)}", pos)
    return source.token(TokenKind.INT, value, pos), m.end()


def _next_token(source: _Source, pos: int, end: int) -> tuple[Token, int]:
    ch = source.text[pos]
    if ch == "(":
        return _delimited(
            source, pos, end, open_="(", close=")", kind=TokenKind.COMMENT, what="comment"
        )
    if ch == "~":
        return _delimited(
            source, pos, end, open_="~", close="~", kind=TokenKind.STRING, what="string literal"
        )
    if ch == ".":
        return _operator(source, pos, end)
    if ch == "-" or "0" <= ch <= "9":
        return _integer(source, pos, end)
    raise source.error(f"unexpected character {ch!r}", pos)


def tokenize(src: str) -> list[Token]:
    """Split script source into tokens, comments included.

    Whitespace around the whole input is trimmed; whitespace after each token
    is skipped but never required, so `~a~~b~` is two strings. Raises
    ScriptSyntaxError at the first position where no token matches.
    """
    source = _Source(src)
    pos = len(src) - len(src.lstrip())
    end = len(src.rstrip())

    tokens: list[Token] = []
    while pos < end:
        tok, pos = _next_token(source, pos, end)
        tokens.append(tok)
        while pos < end and src[pos] in _SEPARATORS:
            pos += 1
    return tokens


def strip_comments(tokens: Iterable[Token]) -> list[Token]:
    return [t for t in tokens if not t.is_comment]


def tokenize_executable(src: str) -> list[Token]:
    return strip_comments(tokenize(src))
