"""SQLite storage for the impact run ledger.

Two tables, neither holding program content:

    impact_runs     one row per participation/estimate tool call, with the
                    record key, the record's SHA-256, the adherence used and
                    the headline figures returned
    record_changes  one row per record saved, section cleared or session
                    cleared

The schema version lives in ``PRAGMA user_version``.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Sequence

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

RUN_OUTCOMES = ("ok", "no_record", "error")
RECORD_CHANGES = ("saved", "section_cleared", "session_cleared")

_DDL = f"""
CREATE TABLE IF NOT EXISTS impact_runs (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    run_at          TEXT NOT NULL,
    tool_name       TEXT NOT NULL,
    record_key      TEXT,
    record_sha256   TEXT,
    adherence       REAL CHECK (adherence IS NULL OR adherence BETWEEN 0 AND 1),
    enrolled        INTEGER,
    active          INTEGER,
    qalys_gained    REAL,
    outcome         TEXT NOT NULL CHECK (outcome IN {RUN_OUTCOMES!r}),
    error_message   TEXT,
    duration_ms     REAL
);

CREATE TABLE IF NOT EXISTS record_changes (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    changed_at      TEXT NOT NULL,
    change          TEXT NOT NULL CHECK (change IN {RECORD_CHANGES!r}),
    record_key      TEXT,
    section         TEXT CHECK (section IS NULL OR section IN ('sports', 'pa', 'inclusive')),
    records_removed INTEGER
);

CREATE INDEX IF NOT EXISTS idx_runs_run_at ON impact_runs(run_at);
CREATE INDEX IF NOT EXISTS idx_changes_changed_at ON record_changes(changed_at);
"""


class DatabaseError(Exception):
    """Raised when the ledger database is used before it is opened."""


class LedgerDatabase:
    """Owns the SQLite connection behind the run ledger.

    ``":memory:"`` (the default) keeps the ledger to the life of the process.
    """

    def __init__(self, path: str = ":memory:") -> None:
        self.path = path
        self._conn: sqlite3.Connection | None = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> LedgerDatabase:
        if self._conn is not None:
            return self

        target = self.path
        if target != ":memory:":
            file = Path(target).expanduser()
            file.parent.mkdir(parents=True, exist_ok=True)
            target = str(file)

        conn = sqlite3.connect(target, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.executescript(_DDL)
        if conn.execute("PRAGMA user_version").fetchone()[0] < SCHEMA_VERSION:
            conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
        conn.commit()
        self._conn = conn
        logger.info("Run ledger opened at %s", self.path)
        return self

    def _require(self) -> sqlite3.Connection:
        if self._conn is None:
            raise DatabaseError("Run ledger database is not open")
        return self._conn

    def insert(self, table: str, row: dict[str, Any]) -> int:
        """Insert one row and return its id."""
        conn = self._require()
        columns = ", ".join(row)
        marks = ", ".join("?" for _ in row)
        cursor = conn.execute(
            f"INSERT INTO {table} ({columns}) VALUES ({marks})", tuple(row.values())
        )
        conn.commit()
        return cursor.lastrowid

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[sqlite3.Row]:
        return self._require().execute(sql, params).fetchall()

    def schema_version(self) -> int:
        return self._require().execute("PRAGMA user_version").fetchone()[0]

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> LedgerDatabase:
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()
