"""Program record aggregation: enrolled/active totals and composition.

Sports programs and structured physical-activity (PA) programs are kept as
two item types because they count participants differently: a one-on-one
PA program always counts as a single participant.

Aggregation order:
    1. Enabled sports items -> enrolled (+ active when >= 150 min/week)
    2. Enabled PA items     -> enrolled (+ active when >= 150 min/week)
    3. Both totals still 0  -> legacy top-level fields
    4. Inclusion headcount  -> enrolled only
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, TypeVar

from disport.domains.impact.domain_logic.field_reconciler import (
    as_flag,
    deep_get,
    first_number,
    resolve_number,
    scan_for_tokens,
    to_number,
)
from disport.domains.impact.domain_logic.impact_models import (
    GENERIC_PROGRAM,
    GENERIC_SPORT,
    UNKNOWN_CATEGORY,
    AggregateResult,
    InclusionSummary,
)
from disport.domains.impact.domain_logic.participation import meets_threshold

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Field names across form versions
# ---------------------------------------------------------------------------

LEGACY_ENROLLED_PATHS = ("enrolledParticipants", "participantsEnrolled")
LEGACY_ACTIVE_PATHS = ("participantsMeeting150", "activeParticipants")

SCHOOL_PATHS = (
    "inclusive.school",
    "inclusiveSchool",
    "inclusion.school",
    "inclusivePrograms.school",
    "inclusive.schoolParticipants",
    "schoolDisabilityParticipants",
    "schoolParticipantsDisability",
)
SCHOOL_TOKENS = (("school", "disab"), ("school",))

SPECIAL_NEEDS_PATHS = (
    "inclusive.specialNeeds",
    "inclusiveSpecialNeeds",
    "inclusion.specialNeeds",
    "inclusivePrograms.specialNeeds",
    "inclusive.specialNeedsParticipants",
    "specialNeedsParticipants",
)
SPECIAL_NEEDS_TOKENS = (("special", "needs"), ("special",))

INCLUSION_TOGGLE_PATHS = ("inclusiveEnabled", "inclusion.enabled", "inclusiveProgramsEnabled")

_ONE_ON_ONE_MODES = {"1on1", "oneonone", "onetoone", "1to1", "individual"}


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _first_text(item: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        text = _text(item.get(key))
        if text:
            return text
    return ""


def is_one_on_one(mode: Any) -> bool:
    """Whether a PA mode string means one-on-one delivery ("1 on 1", "One-on-one", ...)."""
    return re.sub(r"[^a-z0-9]", "", _text(mode).lower()) in _ONE_ON_ONE_MODES


# ---------------------------------------------------------------------------
# Item types
# ---------------------------------------------------------------------------

@dataclass
class SportProgram:
    type_of_sport: str
    participants: float
    location: str
    sessions_per_week: float
    minutes_per_session: float

    @classmethod
    def from_mapping(cls, item: Any) -> SportProgram:
        item = item if isinstance(item, Mapping) else {}
        return cls(
            type_of_sport=_first_text(item, "typeOfSport", "sport", "type"),
            participants=to_number(item.get("participants")),
            location=_text(item.get("location")),
            sessions_per_week=to_number(item.get("sessionsPerWeek")),
            minutes_per_session=to_number(item.get("minutesPerSession")),
        )

    @property
    def counted_participants(self) -> float:
        return max(0.0, self.participants)

    @property
    def is_active(self) -> bool:
        return meets_threshold(self.sessions_per_week, self.minutes_per_session)


@dataclass
class PAProgram:
    name: str
    mode: str
    participants: float
    location: str
    sessions_per_week: float
    minutes_per_session: float

    @classmethod
    def from_mapping(cls, item: Any) -> PAProgram:
        item = item if isinstance(item, Mapping) else {}
        return cls(
            name=_first_text(item, "programName", "name"),
            mode=_text(item.get("mode")),
            participants=to_number(item.get("participants")),
            location=_text(item.get("location")),
            sessions_per_week=to_number(item.get("sessionsPerWeek")),
            minutes_per_session=to_number(item.get("minutesPerSession")),
        )

    @property
    def counted_participants(self) -> float:
        # One-on-one sessions count one participant whatever was stored
        if is_one_on_one(self.mode):
            return 1.0
        return max(0.0, self.participants)

    @property
    def is_active(self) -> bool:
        return meets_threshold(self.sessions_per_week, self.minutes_per_session)


def _enabled_items(record: Mapping[str, Any], toggle: str, collection: str) -> list:
    if as_flag(record.get(toggle)) is not True:
        return []
    items = record.get(collection)
    return items if isinstance(items, list) else []


def sport_programs(record: Any) -> list[SportProgram]:
    """Sports items of an enabled sports collection (empty otherwise)."""
    if not isinstance(record, Mapping):
        return []
    return [SportProgram.from_mapping(i) for i in _enabled_items(record, "sportsEnabled", "sports")]


def pa_programs(record: Any) -> list[PAProgram]:
    """PA items of an enabled PA collection (empty otherwise)."""
    if not isinstance(record, Mapping):
        return []
    return [PAProgram.from_mapping(i) for i in _enabled_items(record, "paEnabled", "pa")]


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

def group_sum(
    items: Iterable[T],
    key_fn: Callable[[T], str],
    value_fn: Callable[[T], float],
) -> dict[str, float]:
    """Sum positive contributions per trimmed category, in discovery order."""
    groups: dict[str, float] = {}
    for item in items:
        name = (key_fn(item) or "").strip() or UNKNOWN_CATEGORY
        value = value_fn(item)
        if value > 0:
            groups[name] = groups.get(name, 0.0) + value
    return groups


# ---------------------------------------------------------------------------
# Inclusion
# ---------------------------------------------------------------------------

def resolve_inclusion(record: Any) -> InclusionSummary:
    """Resolve inclusive-program headcounts: exact paths first, then token scans."""
    school = first_number(
        resolve_number(record, SCHOOL_PATHS),
        *(scan_for_tokens(record, tokens) for tokens in SCHOOL_TOKENS),
    )
    special = first_number(
        resolve_number(record, SPECIAL_NEEDS_PATHS),
        *(scan_for_tokens(record, tokens) for tokens in SPECIAL_NEEDS_TOKENS),
    )

    summary = InclusionSummary(school=max(0.0, school), special_needs=max(0.0, special))
    toggle = _inclusion_toggle(record)
    # An explicit "off" toggle is how the form clears the section
    summary.enabled = toggle if toggle is not None else summary.total > 0
    return summary


def _inclusion_toggle(record: Any) -> bool | None:
    """First explicitly set inclusion toggle, or ``None`` when none is set."""
    for path in INCLUSION_TOGGLE_PATHS:
        flag = as_flag(deep_get(record, path))
        if flag is not None:
            return flag
    return None


def inclusion_share(aggregate: AggregateResult, count: float) -> float:
    """Percentage of enrolled participants, clamped to [0, 100]."""
    if aggregate.enrolled_participants <= 0:
        return 0.0
    return min(100.0, max(0.0, count / aggregate.enrolled_participants * 100))


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def aggregate(record: Any) -> AggregateResult:
    """Reduce a program record to enrolled/active totals and breakdowns.

    Never raises and never mutates ``record``: malformed collections count
    as empty. ``active > enrolled`` is reported as a warning, not clamped.
    """
    result = AggregateResult()
    if not isinstance(record, Mapping):
        return result

    sports = sport_programs(record)
    pa = pa_programs(record)

    enrolled = 0.0
    active = 0.0
    for program in (*sports, *pa):
        counted = program.counted_participants
        enrolled += counted
        if program.is_active:
            active += counted

    if enrolled == 0 and active == 0:
        legacy_enrolled = resolve_number(record, LEGACY_ENROLLED_PATHS)
        legacy_active = resolve_number(record, LEGACY_ACTIVE_PATHS)
        if legacy_enrolled is not None or legacy_active is not None:
            result.used_legacy_fallback = True
            enrolled = max(0.0, first_number(legacy_enrolled))
            active = max(0.0, first_number(legacy_active))
            logger.debug("Using legacy participant fields: enrolled=%s active=%s", enrolled, active)

    inclusion = resolve_inclusion(record)
    if inclusion.enabled:
        enrolled += inclusion.total

    result.enrolled_participants = enrolled
    result.active_participants = active
    result.inclusion = inclusion

    result.sports_by_type = group_sum(
        sports, lambda s: s.type_of_sport or GENERIC_SPORT, lambda s: s.participants
    )
    result.sports_by_location = group_sum(sports, lambda s: s.location, lambda s: s.participants)
    result.pa_by_name = group_sum(
        pa, lambda p: p.name or GENERIC_PROGRAM, lambda p: p.counted_participants
    )
    result.pa_by_location = group_sum(pa, lambda p: p.location, lambda p: p.counted_participants)

    if not (math.isfinite(enrolled) and math.isfinite(active)):
        message = "Participant totals are too large to compute; check the participant counts."
        result.warnings.append(message)
        logger.warning(message)
    elif active > enrolled:
        message = (
            f"Active participants ({active:g}) exceed enrolled participants "
            f"({enrolled:g}); check the legacy participant fields."
        )
        result.warnings.append(message)
        logger.warning(message)

    return result
