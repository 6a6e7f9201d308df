"""Pytest configuration for test isolation.

Settings and logging read ``STATEMENT_REPORT_*`` environment variables, and the
CLI loads a ``.env`` from the working directory. To keep tests hermetic, each
test starts with those variables unset and runs from its own temporary
directory.

The workspace ``packages/`` dir is put on ``sys.path`` so the package imports
without an editable install.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
if str(_PKG_DIR) not in sys.path:
    sys.path.insert(0, str(_PKG_DIR))

_ENV_VARS = (
    "STATEMENT_REPORT_HAS_HEADERS",
    "STATEMENT_REPORT_ENCODING",
    "STATEMENT_REPORT_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
