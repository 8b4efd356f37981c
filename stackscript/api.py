from __future__ import annotations

from pathlib import Path
from typing import TextIO

from stackscript.codegen import emit_forth
from stackscript.engine import ExecutionResult, execute
from stackscript.errors import ScriptSyntaxError
from stackscript.lexer import tokenize, tokenize_executable
from stackscript.tokens import Token
from stackscript.trace import Tracer


def read_script(path: Path) -> str:
    data = Path(path).read_bytes()
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        # Everything before the bad byte decoded fine; locate it in characters.
        prefix = data[: exc.start].decode("utf-8")
        line = prefix.count("\n") + 1
        col = len(prefix) - (prefix.rfind("\n") + 1) + 1
        bad = data[exc.start : exc.start + 1].hex()
        raise ScriptSyntaxError(f"invalid UTF-8 byte 0x{bad}", line=line, col=col) from exc
    # Same newline handling as text-mode reads.
    return text.replace("\r\n", "\n").replace("\r", "\n")


def tokenize_source(*, src: str, keep_comments: bool = False) -> list[Token]:
    return tokenize(src) if keep_comments else tokenize_executable(src)


def run_source(
    *,
    src: str,
    out: TextIO | None = None,
    tracer: Tracer | None = None,
) -> ExecutionResult:
    tokens = tokenize_executable(src)
    return execute(tokens, out=out, tracer=tracer)


def run_file(
    path: Path,
    *,
    out: TextIO | None = None,
    tracer: Tracer | None = None,
) -> ExecutionResult:
    return run_source(src=read_script(path), out=out, tracer=tracer)


def compile_source(*, src: str, lang: str = "forth") -> str:
    if lang != "forth":
        raise ValueError(f"unsupported target language: {lang!r}")
    # Comments survive into the generated Forth.
    return emit_forth(tokenize(src))
