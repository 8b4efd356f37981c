from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, TextIO

from stackscript.errors import DivisionByZero, VMError
from stackscript.stack import OperandStack
from stackscript.tokens import Token, TokenKind
from stackscript.values import (
    I32_MAX,
    I32_MIN,
    Integer,
    Value,
    trunc_div,
    trunc_mod,
    wrap_i32,
)

if TYPE_CHECKING:
    from stackscript.trace import Tracer


class HaltReason(str, Enum):
    END = "end"
    JUMP_OUT_OF_RANGE = "jump_out_of_range"


@dataclass(frozen=True)
class ExecutionResult:
    stack: tuple[Value, ...]
    steps: int
    pc: int
    halt_reason: HaltReason

    @property
    def stack_values(self) -> list[int | str]:
        return [v.value for v in self.stack]


def _div(left: int, right: int) -> int:
    if right == 0:
        raise DivisionByZero("division by zero")
    return trunc_div(left, right)


def _mod(left: int, right: int) -> int:
    if right == 0:
        raise DivisionByZero("modulo by zero")
    return trunc_mod(left, right)


_BINARY_OPS: dict[TokenKind, Callable[[int, int], int]] = {
    TokenKind.ADD: lambda a, b: a + b,
    TokenKind.SUB: lambda a, b: a - b,
    TokenKind.MUL: lambda a, b: a * b,
    TokenKind.DIV: _div,
    TokenKind.MOD: _mod,
    TokenKind.EQUAL: lambda a, b: int(a == b),
    TokenKind.GREATER_THAN: lambda a, b: int(a > b),
}


class Interpreter:
    """Single-pass stack machine over a comment-free token sequence.

    The program counter indexes `tokens`; a taken `.cjump` moves it by the
    popped offset, every other token advances it by one. Execution ends when
    the pc leaves `[0, len(tokens))`.
    """

    def __init__(
        self,
        tokens: Sequence[Token],
        *,
        out: TextIO | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        self.tokens = tuple(tokens)
        self.stack = OperandStack()
        self.pc = 0
        self.steps = 0
        self._out = out
        self._tracer = tracer
        self._dispatch: dict[TokenKind, Callable[[Token], int | None]] = {
            TokenKind.COMMENT: self._noop,
            TokenKind.STRING: self._push_literal,
            TokenKind.INT: self._push_literal,
            TokenKind.DUP: self._dup,
            TokenKind.SWAP: self._swap,
            TokenKind.CJUMP: self._cjump,
            TokenKind.PRINT: self._print,
            TokenKind.NEWLINE: self._newline,
        }
        for kind in _BINARY_OPS:
            self._dispatch[kind] = self._binary

    @property
    def running(self) -> bool:
        return 0 <= self.pc < len(self.tokens)

    @property
    def halt_reason(self) -> HaltReason | None:
        if self.running:
            return None
        if self.pc == len(self.tokens):
            return HaltReason.END
        return HaltReason.JUMP_OUT_OF_RANGE

    def step(self) -> bool:
        """Execute the token at pc. Returns False once the program has halted."""
        if not self.running:
            return False
        pc = self.pc
        token = self.tokens[pc]
        if self._tracer is not None:
            self._tracer.before(step=self.steps, pc=pc, token=token)

        try:
            target = self._dispatch[token.kind](token)
        except VMError as exc:
            located = exc.locate(pc=pc, token=token)
            if located is exc:
                raise
            raise located from exc

        self.pc = pc + 1 if target is None else target
        if self._tracer is not None:
            self._tracer.after(
                step=self.steps,
                pc=pc,
                token=token,
                stack=self.stack,
                next_pc=self.pc,
                jumped=target is not None,
            )
        self.steps += 1
        return self.running

    def run(self) -> ExecutionResult:
        while self.step():
            pass
        reason = self.halt_reason
        assert reason is not None
        return ExecutionResult(
            stack=self.stack.snapshot(),
            steps=self.steps,
            pc=self.pc,
            halt_reason=reason,
        )

    def _noop(self, token: Token) -> None:
        return None

    def _push_literal(self, token: Token) -> None:
        if token.kind == TokenKind.INT:
            value = int(token.value)
            if not I32_MIN <= value <= I32_MAX:
                raise VMError(f"integer literal out of 32-bit range: {value}")
            self.stack.push_int(value)
        else:
            self.stack.push_text(str(token.value))

    def _binary(self, token: Token) -> None:
        right = self.stack.pop_int(role="right operand")
        left = self.stack.pop_int(role="left operand")
        self.stack.push(Integer(wrap_i32(_BINARY_OPS[token.kind](left, right))))

    def _dup(self, token: Token) -> None:
        value = self.stack.pop()
        self.stack.push(value)
        self.stack.push(value)

    def _swap(self, token: Token) -> None:
        top = self.stack.pop()
        below = self.stack.pop()
        self.stack.push(top)
        self.stack.push(below)

    def _cjump(self, token: Token) -> int | None:
        offset = self.stack.pop_int(role="jump offset")
        condition = self.stack.pop_int(role="jump condition")
        if condition != 0:
            return self.pc + offset
        return None

    def _print(self, token: Token) -> None:
        print(self.stack.pop().render(), end="", file=self._out)

    def _newline(self, token: Token) -> None:
        print(file=self._out)


def execute(
    tokens: Sequence[Token],
    *,
    out: TextIO | None = None,
    tracer: Tracer | None = None,
) -> ExecutionResult:
    return Interpreter(tokens, out=out, tracer=tracer).run()
