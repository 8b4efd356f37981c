from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stackscript.tokens import Token


class ScriptError(Exception):
    """Base class for every error raised while tokenizing, running or translating a script."""

    kind = "error"

    def __init__(self, message: str, *, line: int | None = None, col: int | None = None) -> None:
        self.message = str(message)
        self.line = line
        self.col = col
        super().__init__(self._prefix() + self.message)

    def _prefix(self) -> str:
        if self.line is not None and self.col is not None:
            return f"line {self.line} col {self.col}: "
        return ""


class ScriptSyntaxError(ScriptError):
    kind = "syntax error"


class VMError(ScriptError):
    """Fatal runtime condition.

    Raised without a location by the stack helpers; the interpreter attaches
    the pc and token of the instruction that failed via `locate()`.
    """

    kind = "runtime error"

    def __init__(
        self,
        message: str,
        *,
        pc: int | None = None,
        token: Token | None = None,
    ) -> None:
        self.pc = pc
        self.token = token
        line = token.line if token is not None else None
        col = token.col if token is not None else None
        super().__init__(message, line=line, col=col)

    def _prefix(self) -> str:
        if self.pc is None:
            return ""
        where = f"pc {self.pc}"
        if self.token is not None:
            where += f" ({self.token.spelling()}"
            if self.line is not None and self.col is not None:
                where += f" at line {self.line} col {self.col}"
            where += ")"
        return where + ": "

    def locate(self, *, pc: int, token: Token) -> VMError:
        if self.pc is not None:
            return self
        return type(self)(self.message, pc=pc, token=token)


class StackUnderflow(VMError):
    kind = "stack underflow"


class TypeMismatch(VMError):
    kind = "type mismatch"


class DivisionByZero(VMError):
    kind = "division by zero"


class CodegenError(ScriptError):
    kind = "codegen error"
