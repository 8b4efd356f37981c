from __future__ import annotations

import argparse
import sys
from pathlib import Path

from stackscript.api import compile_source, read_script, run_source, tokenize_source
from stackscript.config import InterpreterSettings, load_settings
from stackscript.errors import CodegenError, ScriptError, ScriptSyntaxError, VMError
from stackscript.schemas import RunReport, TokenRecord, stable_json_dumps
from stackscript.trace import TRACE_FORMATS, Tracer, make_tracer

EXIT_OK = 0
EXIT_RUNTIME_ERROR = 1
EXIT_SYNTAX_ERROR = 2


def _existing_path(value: str) -> Path:
    p = Path(value)
    if not p.is_file():
        raise argparse.ArgumentTypeError(f"script not found: {value}")
    return p


def _report_error(exc: ScriptError) -> int:
    # Program output written so far must land before the diagnostic.
    sys.stdout.flush()
    print(f"error: {exc.kind}: {exc}", file=sys.stderr)
    if isinstance(exc, ScriptSyntaxError):
        return EXIT_SYNTAX_ERROR
    return EXIT_RUNTIME_ERROR


def _cmd_run(args: argparse.Namespace, *, settings: InterpreterSettings) -> int:
    trace_file = args.trace_file or settings.trace_file
    debug = bool(args.debug or settings.debug or args.trace_file is not None)
    trace_format = args.trace_format or settings.trace_format

    src = read_script(args.script)
    trace_fh = None
    tracer: Tracer | None = None
    try:
        if debug:
            if trace_file is not None:
                trace_fh = Path(trace_file).open("w", encoding="utf-8")
            tracer = make_tracer(trace_format, trace_fh)
        result = run_source(src=src, tracer=tracer)
    finally:
        if trace_fh is not None:
            trace_fh.close()

    if args.report is not None:
        report = RunReport.from_result(result, script=str(args.script))
        Path(args.report).write_text(report.to_json() + "\n", encoding="utf-8")
    return EXIT_OK


def _cmd_tokens(args: argparse.Namespace) -> int:
    tokens = tokenize_source(src=read_script(args.script), keep_comments=args.keep_comments)
    for tok in tokens:
        if args.json:
            print(stable_json_dumps(TokenRecord.from_token(tok).model_dump(mode="json")))
        else:
            print(f"{tok.line}:{tok.col}\t{tok.kind.value}\t{tok.spelling()}")
    return EXIT_OK


def _cmd_emit(args: argparse.Namespace) -> int:
    code = compile_source(src=read_script(args.script), lang=args.lang)
    if args.output is None:
        sys.stdout.write(code)
    else:
        Path(args.output).write_text(code, encoding="utf-8")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="stackscript")
    sub = parser.add_subparsers(dest="cmd", required=True)

    run_p = sub.add_parser("run", help="execute a script")
    run_p.add_argument("script", type=_existing_path)
    run_p.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="trace every token and the stack after it (default: STACKSCRIPT_DEBUG)",
    )
    run_p.add_argument("--trace-format", choices=TRACE_FORMATS, default=None)
    run_p.add_argument(
        "--trace-file",
        type=Path,
        default=None,
        help="write the trace here instead of stderr (implies --debug)",
    )
    run_p.add_argument("--report", type=Path, default=None, help="write a JSON run report")

    tokens_p = sub.add_parser("tokens", help="print the token sequence of a script")
    tokens_p.add_argument("script", type=_existing_path)
    tokens_p.add_argument("--keep-comments", action="store_true")
    tokens_p.add_argument("--json", action="store_true", help="one JSON record per token")

    emit_p = sub.add_parser("emit", help="translate a script to another language")
    emit_p.add_argument("script", type=_existing_path)
    emit_p.add_argument("--lang", choices=["forth"], default="forth")
    emit_p.add_argument("-o", "--output", type=Path, default=None)

    args = parser.parse_args(argv)

    try:
        if args.cmd == "run":
            return _cmd_run(args, settings=load_settings())
        if args.cmd == "tokens":
            return _cmd_tokens(args)
        if args.cmd == "emit":
            return _cmd_emit(args)
    except (ScriptSyntaxError, VMError, CodegenError) as exc:
        return _report_error(exc)

    raise AssertionError(f"unhandled cmd: {args.cmd}")
