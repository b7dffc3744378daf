"""Pytest configuration shared by the test suite.

- Puts ``packages/`` and the repo root on ``sys.path`` so ``personal_ledger``
  and ``tests.helpers`` import without an editable install.
- Isolates every test from the developer's environment: ``PERSONAL_LEDGER_*``
  variables are cleared and the working directory is a fresh temporary
  directory, so relative ledger file names and ``.env`` lookups stay hermetic.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
sys.path[:0] = [p for p in [str(_PKG_DIR), str(_ROOT)] if p not in sys.path]


@pytest.fixture(autouse=True)
def _isolate_env(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> None:
    for name in list(os.environ):
        if name.startswith("PERSONAL_LEDGER_"):
            monkeypatch.delenv(name, raising=False)
    work = tmp_path_factory.mktemp("work")
    monkeypatch.chdir(work)
