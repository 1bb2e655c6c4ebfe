"""Shared test fixtures for disport tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUDIT_ENABLED", "true")
    monkeypatch.setenv("AUDIT_DB_PATH", ":memory:")
    monkeypatch.setenv("DISEASE_TABLE_PATH", "")
    monkeypatch.setenv("QALY_VALUE_AUD", "28000")
    monkeypatch.setenv("DEFAULT_ADHERENCE", "1.0")

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))


# ---------------------------------------------------------------------------
# Program records
# ---------------------------------------------------------------------------

@pytest.fixture
def two_sports_record() -> dict[str, Any]:
    """One sports item meeting 150 min/week (180) and one that does not (80)."""
    return {
        "sportsEnabled": True,
        "sports": [
            {"typeOfSport": "Boccia", "participants": 100, "location": "Brisbane",
             "sessionsPerWeek": 3, "minutesPerSession": 60},
            {"typeOfSport": "Goalball", "participants": 50, "location": "Cairns",
             "sessionsPerWeek": 2, "minutesPerSession": 40},
        ],
    }


@pytest.fixture
def full_record() -> dict[str, Any]:
    """Sports, PA and inclusive sections all filled in, as the form saves them."""
    return {
        "sportsEnabled": True,
        "sportsCount": 3,
        "sports": [
            {"typeOfSport": "Boccia", "participants": 20, "location": "Brisbane",
             "sessionsPerWeekOpt": "3", "sessionsPerWeek": 3, "minutesPerSession": 60},
            {"typeOfSport": " Goalball ", "participants": 10, "location": "Cairns",
             "sessionsPerWeekOpt": "1", "sessionsPerWeek": 1, "minutesPerSession": 60},
            {"typeOfSport": "", "participants": 5, "location": "",
             "sessionsPerWeekOpt": "5", "sessionsPerWeek": 5, "minutesPerSession": 30},
        ],
        "paEnabled": True,
        "paCount": 2,
        "pa": [
            {"name": "Walking group", "mode": "Group", "participants": 12,
             "location": "Brisbane", "sessionsPerWeek": 2, "minutesPerSession": 90},
            {"name": "Physio", "mode": "1 on 1", "participants": 7,
             "location": "Logan", "sessionsPerWeek": 1, "minutesPerSession": 45},
        ],
        "inclusiveEnabled": True,
        "schoolParticipantsDisability": 8,
        "specialNeedsParticipants": 4,
    }


@pytest.fixture
def legacy_record() -> dict[str, Any]:
    """Older form version with only top-level participant counts."""
    return {"enrolledParticipants": 200, "participantsMeeting150": 120}
