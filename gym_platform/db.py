from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from gym_platform.schema import get_schema_sql


def _debug(msg: str) -> None:
    print(f"[db] {msg}")


def _sqlite_path(db_dsn: str) -> str:
    dsn = (db_dsn or "").strip()
    # Support sqlite:///path style
    if dsn.lower().startswith("sqlite:///"):
        dsn = dsn[len("sqlite:///") :]
    if not dsn:
        raise ValueError("db_dsn_blank")
    return dsn


@contextmanager
def connect(db_dsn: str) -> Iterator[sqlite3.Connection]:
    """Open a SQLite connection for one unit of work.

    Rows are sqlite3.Row (dict(row) works). Commits on success, rolls back on error.
    """
    path = _sqlite_path(db_dsn)
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path, timeout=30, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    # API handlers run in a threadpool; WAL lets readers proceed during writes.
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    conn.execute("PRAGMA busy_timeout=5000;")  # 5s
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_dsn: str) -> None:
    """Create all tables (idempotent)."""
    _debug(f"Initializing DB at {db_dsn}")
    with connect(db_dsn) as conn:
        conn.executescript(get_schema_sql())


def row_to_dict(row: Any) -> dict | None:
    if row is None:
        return None
    return dict(row)
