"""Run ledger: which estimates were made, from which record, with what result.

A program record can describe participants with a disability, so it is
identified only by the SHA-256 of its canonical JSON. Ledger writes never
fail a tool call: a write error is logged and the call carries on.
"""

from __future__ import annotations

import hashlib
import json
import logging
import sqlite3
from datetime import datetime, timezone
from typing import Any

from disport.core.storage.database import (
    RECORD_CHANGES,
    RUN_OUTCOMES,
    DatabaseError,
    LedgerDatabase,
)

logger = logging.getLogger(__name__)


def record_fingerprint(record: Any) -> str | None:
    """SHA-256 of a record's canonical JSON; ``None`` for no record."""
    if record is None:
        return None
    try:
        canonical = json.dumps(record, sort_keys=True, separators=(",", ":"), default=str)
    except ValueError:
        # Circular references
        return None
    return hashlib.sha256(canonical.encode()).hexdigest()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


class RunLedger:
    """Writes and summarises ``impact_runs`` and ``record_changes`` rows."""

    def __init__(self, database: LedgerDatabase) -> None:
        self._db = database

    def _write(self, table: str, row: dict[str, Any]) -> int | None:
        try:
            return self._db.insert(table, row)
        except (sqlite3.Error, DatabaseError):
            logger.exception("Run ledger write to %s failed", table)
            return None

    def log_run(
        self,
        tool_name: str,
        *,
        record: Any = None,
        record_key: str | None = None,
        outcome: str = "ok",
        adherence: float | None = None,
        enrolled: int | None = None,
        active: int | None = None,
        qalys_gained: float | None = None,
        error_message: str | None = None,
        duration_ms: float | None = None,
    ) -> int | None:
        """Record one participation or estimate call. Returns the row id."""
        if outcome not in RUN_OUTCOMES:
            raise ValueError(f"Unknown run outcome {outcome!r}")
        return self._write("impact_runs", {
            "run_at": _now(),
            "tool_name": tool_name,
            "record_key": record_key,
            "record_sha256": record_fingerprint(record),
            "adherence": adherence,
            "enrolled": enrolled,
            "active": active,
            "qalys_gained": qalys_gained,
            "outcome": outcome,
            "error_message": error_message,
            "duration_ms": duration_ms,
        })

    def log_change(
        self,
        change: str,
        *,
        record_key: str | None = None,
        section: str | None = None,
        records_removed: int | None = None,
    ) -> int | None:
        """Record a session record being saved or cleared."""
        if change not in RECORD_CHANGES:
            raise ValueError(f"Unknown record change {change!r}")
        return self._write("record_changes", {
            "changed_at": _now(),
            "change": change,
            "record_key": record_key,
            "section": section,
            "records_removed": records_removed,
        })

    def summary(self, since: str) -> dict[str, int]:
        """Run counts by outcome and the number of record changes since ``since``."""
        counts = {outcome: 0 for outcome in RUN_OUTCOMES}
        for row in self._db.query(
            "SELECT outcome, COUNT(*) AS n FROM impact_runs WHERE run_at >= ? GROUP BY outcome",
            (since,),
        ):
            counts[row["outcome"]] = row["n"]
        changes = self._db.query(
            "SELECT COUNT(*) AS n FROM record_changes WHERE changed_at >= ?", (since,)
        )[0]["n"]
        return {"runs": sum(counts.values()), **counts, "record_changes": changes}

    def recent_runs(self, since: str, limit: int = 20) -> list[dict[str, Any]]:
        """Newest runs first, without the record fingerprint."""
        rows = self._db.query(
            "SELECT run_at, tool_name, record_key, adherence, enrolled, active,"
            " qalys_gained, outcome, duration_ms"
            " FROM impact_runs WHERE run_at >= ? ORDER BY id DESC LIMIT ?",
            (since, limit),
        )
        return [dict(row) for row in rows]
