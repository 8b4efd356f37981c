from __future__ import annotations

import json
import sys
from typing import Protocol, TextIO, runtime_checkable

from stackscript.schemas import TraceEvent, TraceEventType
from stackscript.stack import OperandStack
from stackscript.tokens import Token, TokenKind

TRACE_FORMATS = ("text", "jsonl")


@runtime_checkable
class Tracer(Protocol):
    """Diagnostic hook called around every executed token. Must not touch the stack."""

    def before(self, *, step: int, pc: int, token: Token) -> None: ...

    def after(
        self,
        *,
        step: int,
        pc: int,
        token: Token,
        stack: OperandStack,
        next_pc: int,
        jumped: bool,
    ) -> None: ...


class TextTracer:
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def before(self, *, step: int, pc: int, token: Token) -> None:
        # Escape quotes and line breaks so each event stays on one line.
        spelling = json.dumps(token.spelling(), ensure_ascii=False)[1:-1]
        print(f"[pc {pc}] {spelling}", file=self.stream)

    def after(
        self,
        *,
        step: int,
        pc: int,
        token: Token,
        stack: OperandStack,
        next_pc: int,
        jumped: bool,
    ) -> None:
        print(stack.format(), file=self.stream)


class RecordingTracer:
    """Keeps trace events in memory."""

    def __init__(self) -> None:
        self.events: list[TraceEvent] = []

    def _emit(self, event: TraceEvent) -> None:
        self.events.append(event)

    def before(self, *, step: int, pc: int, token: Token) -> None:
        self._emit(
            TraceEvent(
                event=TraceEventType.BEFORE,
                step=step,
                pc=pc,
                token=token.spelling(),
                line=token.line,
                col=token.col,
            )
        )

    def after(
        self,
        *,
        step: int,
        pc: int,
        token: Token,
        stack: OperandStack,
        next_pc: int,
        jumped: bool,
    ) -> None:
        self._emit(
            TraceEvent(
                event=TraceEventType.AFTER,
                step=step,
                pc=pc,
                token=token.spelling(),
                line=token.line,
                col=token.col,
                stack=[v.value for v in stack],
                next_pc=next_pc,
                jumped=jumped if token.kind == TokenKind.CJUMP else None,
            )
        )


class JsonlTracer(RecordingTracer):
    """Writes one event per line; `scripts/summarize_trace.py` reads these back."""

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def _emit(self, event: TraceEvent) -> None:
        self.stream.write(event.to_json_line() + "\n")


def make_tracer(fmt: str, stream: TextIO | None = None) -> Tracer:
    if fmt == "text":
        return TextTracer(stream)
    if fmt == "jsonl":
        return JsonlTracer(stream)
    raise ValueError(f"unknown trace format: {fmt!r} (expected one of {', '.join(TRACE_FORMATS)})")
