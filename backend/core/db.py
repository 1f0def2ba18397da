"""Gestion basique des connexions SQLite."""
from __future__ import annotations

import logging
import os
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import ContextManager

from backend.core.config import settings

DATA_DIR = settings.DATA_DIR
CONSOLE_DB_PATH = DATA_DIR / "console.db"

logger = logging.getLogger(__name__)

_db_lock = RLock()


def _connect(path: Path) -> sqlite3.Connection:
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def _managed_connection(path: Path) -> Iterator[sqlite3.Connection]:
    """Yield a SQLite connection that is always closed on exit."""

    conn = _connect(path)
    try:
        yield conn
        conn.commit()
    except Exception:
        if conn.in_transaction:
            conn.rollback()
        raise
    finally:
        conn.close()


def get_console_connection() -> ContextManager[sqlite3.Connection]:
    return _managed_connection(CONSOLE_DB_PATH)


def init_databases() -> None:
    with _db_lock:
        logger.debug("[DB] pid=%s CONSOLE_DB_PATH=%s", os.getpid(), CONSOLE_DB_PATH)
        with get_console_connection() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS menus (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    key TEXT UNIQUE NOT NULL,
                    label TEXT NOT NULL,
                    route TEXT,
                    icon TEXT,
                    parent_id INTEGER REFERENCES menus(id),
                    sort_order INTEGER NOT NULL DEFAULT 0,
                    is_visible INTEGER NOT NULL DEFAULT 1,
                    menu_type TEXT NOT NULL DEFAULT 'MENU'
                );
                CREATE INDEX IF NOT EXISTS idx_menus_parent
                ON menus(parent_id);
                CREATE TABLE IF NOT EXISTS roles (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    code TEXT UNIQUE NOT NULL,
                    name TEXT NOT NULL
                );
                CREATE TABLE IF NOT EXISTS role_menus (
                    role_id INTEGER NOT NULL REFERENCES roles(id) ON DELETE CASCADE,
                    menu_id INTEGER NOT NULL REFERENCES menus(id) ON DELETE CASCADE,
                    PRIMARY KEY (role_id, menu_id)
                );
                """
            )
