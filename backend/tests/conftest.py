from __future__ import annotations

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from backend.core import db, services  # noqa: E402


@pytest.fixture()
def console_db(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    monkeypatch.setattr(db, "DATA_DIR", data_dir)
    monkeypatch.setattr(db, "CONSOLE_DB_PATH", data_dir / "console.db")
    monkeypatch.setattr(services, "_db_initialized", False)
    services.ensure_database_ready()
    return data_dir
