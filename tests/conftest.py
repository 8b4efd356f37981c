from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def pytest_configure() -> None:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def samples_dir() -> Path:
    return PROJECT_ROOT / "samples"


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("STACKSCRIPT_DEBUG", "STACKSCRIPT_TRACE_FORMAT", "STACKSCRIPT_TRACE_FILE"):
        monkeypatch.delenv(name, raising=False)
