from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from stackscript.engine import ExecutionResult, HaltReason
from stackscript.tokens import Token, TokenKind
from stackscript.values import Value


def stable_json_dumps(obj: Any) -> str:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class TraceEventType(str, Enum):
    BEFORE = "before"
    AFTER = "after"


class ValueRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str
    value: int | str

    @classmethod
    def from_value(cls, value: Value) -> ValueRecord:
        return cls(kind=value.kind, value=value.value)


class TokenRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: TokenKind
    value: int | str | None = None
    text: str
    line: int = Field(ge=0)
    col: int = Field(ge=0)

    @classmethod
    def from_token(cls, token: Token) -> TokenRecord:
        return cls(
            kind=token.kind,
            value=token.value,
            text=token.spelling(),
            line=token.line,
            col=token.col,
        )


class TraceEvent(BaseModel):
    event: TraceEventType
    step: int = Field(ge=0)
    pc: int = Field(ge=0)
    token: str
    line: int = Field(ge=0)
    col: int = Field(ge=0)
    # Only set on AFTER events.
    stack: list[int | str] | None = None
    next_pc: int | None = None
    # Only set on AFTER events of `.cjump`.
    jumped: bool | None = None

    def to_json_line(self) -> str:
        return stable_json_dumps(self.model_dump(mode="json", exclude_none=True))


class RunReport(BaseModel):
    script: str | None = None
    steps: int = Field(ge=0)
    pc: int
    halt_reason: HaltReason
    stack: list[ValueRecord] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: ExecutionResult, *, script: str | None = None) -> RunReport:
        return cls(
            script=script,
            steps=result.steps,
            pc=result.pc,
            halt_reason=result.halt_reason,
            stack=[ValueRecord.from_value(v) for v in result.stack],
        )

    def to_json(self) -> str:
        return stable_json_dumps(self.model_dump(mode="json"))
