from __future__ import annotations

from pathlib import Path

import pytest

from stackscript import config
from stackscript.config import InterpreterSettings, load_settings


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "load_env", lambda: None)


def test_defaults() -> None:
    assert load_settings() == InterpreterSettings(debug=False, trace_format="text", trace_file=None)


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("STACKSCRIPT_DEBUG", "Yes")
    monkeypatch.setenv("STACKSCRIPT_TRACE_FORMAT", " JSONL ")
    monkeypatch.setenv("STACKSCRIPT_TRACE_FILE", str(tmp_path / "t.jsonl"))

    settings = load_settings()
    assert settings.debug is True
    assert settings.trace_format == "jsonl"
    assert settings.trace_file == tmp_path / "t.jsonl"


def test_debug_off_values(monkeypatch: pytest.MonkeyPatch) -> None:
    for raw in ("0", "false", "off", ""):
        monkeypatch.setenv("STACKSCRIPT_DEBUG", raw)
        assert load_settings().debug is False


def test_invalid_debug_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STACKSCRIPT_DEBUG", "maybe")
    with pytest.raises(SystemExit, match="STACKSCRIPT_DEBUG"):
        load_settings()


def test_invalid_trace_format(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STACKSCRIPT_TRACE_FORMAT", "xml")
    with pytest.raises(SystemExit, match="STACKSCRIPT_TRACE_FORMAT must be one of"):
        load_settings()


def test_repo_root_contains_package() -> None:
    assert (config.repo_root() / "stackscript" / "config.py").is_file()
