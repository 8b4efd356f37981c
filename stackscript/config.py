from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from stackscript.trace import TRACE_FORMATS

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"", "0", "false", "no", "off"}


def repo_root() -> Path:
    # Project root is the directory that contains the `stackscript/` package.
    return Path(__file__).resolve().parents[1]


def load_env() -> None:
    # A project-local `.env` wins; otherwise search upward from the working directory.
    root_env = repo_root() / ".env"
    env_path = str(root_env) if root_env.exists() else (find_dotenv(usecwd=True) or str(root_env))
    load_dotenv(env_path)


@dataclass(frozen=True)
class InterpreterSettings:
    debug: bool = False
    trace_format: str = "text"
    trace_file: Path | None = None


def _env_flag(name: str) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise SystemExit(f"{name} must be one of {sorted(_TRUTHY | _FALSY - {''})}, got {raw!r}")


def load_settings() -> InterpreterSettings:
    load_env()
    trace_format = (os.getenv("STACKSCRIPT_TRACE_FORMAT") or "text").strip().lower()
    if trace_format not in TRACE_FORMATS:
        raise SystemExit(
            f"STACKSCRIPT_TRACE_FORMAT must be one of {list(TRACE_FORMATS)}, got {trace_format!r}"
        )
    trace_file = (os.getenv("STACKSCRIPT_TRACE_FILE") or "").strip()
    return InterpreterSettings(
        debug=_env_flag("STACKSCRIPT_DEBUG"),
        trace_format=trace_format,
        trace_file=Path(trace_file) if trace_file else None,
    )
