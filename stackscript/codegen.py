from __future__ import annotations

from collections.abc import Sequence

from stackscript.errors import CodegenError
from stackscript.tokens import Token, TokenKind

INT = "int"
STR = "str"

# ( n1 n2 -- n3 ) words; scripts compare to 1/0 where Forth yields -1/0, and
# truncate like `sm/rem`.
_INT_WORDS: dict[TokenKind, str] = {
    TokenKind.ADD: "+",
    TokenKind.SUB: "-",
    TokenKind.MUL: "*",
    TokenKind.DIV: ">r s>d r> sm/rem nip",
    TokenKind.MOD: ">r s>d r> sm/rem drop",
    TokenKind.EQUAL: "= negate",
    TokenKind.GREATER_THAN: "> negate",
}

_SWAP_WORDS: dict[tuple[str, str], str] = {
    # (below, top)
    (INT, INT): "swap",
    (STR, STR): "2swap",
    (INT, STR): "rot",
    (STR, INT): "-rot",
}


class ForthCodegen:
    """Translates straight-line scripts into a Forth word named `main`.

    Strings become `c-addr u` pairs, so the generator tracks the kind of
    every stack slot to pick the right shuffle and print words. Programs
    that jump cannot be translated, since Forth has no computed goto.
    """

    def __init__(self, *, word: str = "main") -> None:
        self.word = word

    def generate(self, tokens: Sequence[Token]) -> str:
        kinds: list[str] = []
        body: list[str] = []
        for tok in tokens:
            body.append(self._emit(tok, kinds))
        lines = ["\\ generated by stackscript", f": {self.word}"]
        lines.extend(f"  {code}" for code in body)
        lines.extend([";", self.word, ""])
        return "\n".join(lines)

    def _emit(self, tok: Token, kinds: list[str]) -> str:
        kind = tok.kind
        if kind == TokenKind.COMMENT:
            return f"( {tok.value} )"
        if kind == TokenKind.STRING:
            text = str(tok.value)
            if '"' in text:
                raise self._error(tok, 'string literals containing `"` cannot be emitted')
            if "\n" in text or "\r" in text:
                # `s"` stops at the end of the Forth input line.
                raise self._error(tok, "string literals spanning lines cannot be emitted")
            kinds.append(STR)
            return f's" {text}"'
        if kind == TokenKind.INT:
            kinds.append(INT)
            return str(tok.value)
        if kind in _INT_WORDS:
            self._pop(tok, kinds, INT)
            self._pop(tok, kinds, INT)
            kinds.append(INT)
            return _INT_WORDS[kind]
        if kind == TokenKind.DUP:
            top = self._pop(tok, kinds)
            kinds.extend([top, top])
            return "dup" if top == INT else "2dup"
        if kind == TokenKind.SWAP:
            top = self._pop(tok, kinds)
            below = self._pop(tok, kinds)
            kinds.extend([top, below])
            return _SWAP_WORDS[(below, top)]
        if kind == TokenKind.PRINT:
            top = self._pop(tok, kinds)
            return "0 .r" if top == INT else "type"
        if kind == TokenKind.NEWLINE:
            return "cr"
        if kind == TokenKind.CJUMP:
            raise self._error(tok, "conditional jumps cannot be translated to Forth")
        raise AssertionError(f"unhandled token kind: {kind}")

    def _pop(self, tok: Token, kinds: list[str], want: str | None = None) -> str:
        if not kinds:
            raise self._error(tok, "stack underflow")
        got = kinds.pop()
        if want is not None and got != want:
            raise self._error(tok, f"expected {want} operand, got {got}")
        return got

    @staticmethod
    def _error(tok: Token, message: str) -> CodegenError:
        return CodegenError(f"{tok.spelling()}: {message}", line=tok.line or None, col=tok.col or None)


def emit_forth(tokens: Sequence[Token]) -> str:
    return ForthCodegen().generate(tokens)
