"""In-memory session store for raw program records.

Holds the form layer's saved state for the life of the process only.
Records are keyed the way the form saves them; the results view reads the
first key that holds a record.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Iterable

from disport.domains.impact.domain_logic.aggregator import is_one_on_one

logger = logging.getLogger(__name__)

DEFAULT_RECORD_KEYS = ("programsPage", "programForm", "programs")

# Fields reset by each of the form's "clear section" actions
SECTION_RESETS: dict[str, dict[str, Any]] = {
    "sports": {"sportsEnabled": False, "sportsCount": 0, "sports": []},
    "pa": {"paEnabled": False, "paCount": 0, "pa": []},
    "inclusive": {
        "inclusiveEnabled": False,
        "schoolParticipantsDisability": 0,
        "specialNeedsParticipants": 0,
    },
}


def normalise_record(record: dict[str, Any]) -> dict[str, Any]:
    """Copy of ``record`` with one-on-one PA items stored as one participant."""
    snapshot = copy.deepcopy(record)
    items = snapshot.get("pa")
    if isinstance(items, list):
        for item in items:
            if isinstance(item, dict) and is_one_on_one(item.get("mode")):
                item["participants"] = 1
    return snapshot


class RecordStore:
    """Per-process program record store.

    Usage::

        store = RecordStore()
        store.save("programsPage", record)
        key, record = store.read_first()
        store.clear_section("programsPage", "sports")
    """

    def __init__(self) -> None:
        self._records: dict[str, dict[str, Any]] = {}

    def save(self, key: str, record: dict[str, Any]) -> None:
        """Store a normalised copy of ``record`` under ``key``."""
        self._records[key] = normalise_record(record)
        logger.debug("Program record saved under %r", key)

    def get(self, key: str) -> dict[str, Any] | None:
        """Return a copy of the record under ``key``."""
        record = self._records.get(key)
        return copy.deepcopy(record) if record is not None else None

    def read_first(
        self, keys: Iterable[str] = DEFAULT_RECORD_KEYS
    ) -> tuple[str | None, dict[str, Any] | None]:
        """First ``(key, record)`` present among ``keys``, else ``(None, None)``."""
        for key in keys:
            record = self.get(key)
            if record is not None:
                return key, record
        return None, None

    def clear_section(self, key: str, section: str) -> dict[str, Any]:
        """Reset one form section of a stored record and return the result.

        Raises:
            ValueError: If ``section`` is not 'sports', 'pa' or 'inclusive'.
            KeyError: If no record is stored under ``key``.
        """
        if section not in SECTION_RESETS:
            raise ValueError(
                f"Unknown section {section!r}; expected one of {sorted(SECTION_RESETS)}"
            )
        record = self._records[key]
        record.update(copy.deepcopy(SECTION_RESETS[section]))
        logger.info("Cleared section %r of record %r", section, key)
        return copy.deepcopy(record)

    def delete(self, key: str) -> bool:
        """Remove a stored record; returns whether one existed."""
        return self._records.pop(key, None) is not None

    def clear(self) -> int:
        """Remove all records and return how many were held."""
        count = len(self._records)
        self._records.clear()
        return count

    def keys(self) -> list[str]:
        return list(self._records)
