"""Results-dashboard payload built from a program record.

The presentation layer (tables, charts, PDF export) only reads this
payload. Figures that cannot be computed are ``None`` so they serialize to
JSON ``null``; NaN and Infinity never appear. Participant counts are summed
as floats (forms may carry fractional counts) and rounded to whole people
here.
"""

from __future__ import annotations

import math
from typing import Any, Iterable

from disport.domains.impact.domain_logic.aggregator import aggregate, inclusion_share
from disport.domains.impact.domain_logic.impact_calculator import compute_impact
from disport.domains.impact.domain_logic.impact_models import DiseaseParameter
from disport.domains.impact.domain_logic.monetisation import (
    QALY_VALUE_AUD,
    QALY_VALUE_AUD_RANGE,
    monetise,
)

NOT_AVAILABLE = "—"


# ---------------------------------------------------------------------------
# Display formatting
# ---------------------------------------------------------------------------

def _usable(value: float | None) -> bool:
    return value is not None and math.isfinite(value)


def format_number(value: float | None, digits: int = 2) -> str:
    if not _usable(value):
        return NOT_AVAILABLE
    return f"{value:,.{digits}f}"


def format_int(value: float | None) -> str:
    if not _usable(value):
        return NOT_AVAILABLE
    return f"{round(value):,}"


def format_money(value: float | None, currency: str = "A$") -> str:
    if not _usable(value):
        return NOT_AVAILABLE
    sign = "-" if value < 0 else ""
    return f"{sign}{currency}{abs(round(value)):,}"


def as_count(value: float | None) -> int | None:
    """Whole-person count for output; ``None`` when the total is unusable."""
    if not _usable(value):
        return None
    return int(round(value))


def count_groups(groups: dict[str, float]) -> dict[str, int | None]:
    return {name: as_count(value) for name, value in groups.items()}


def json_safe(value: Any) -> Any:
    """Copy of ``value`` with NaN and infinities replaced by ``None``."""
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        return {k: json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(v) for v in value]
    return value


def _chart_series(groups: dict[str, float]) -> list[dict[str, Any]]:
    return [{"name": name, "value": as_count(value)} for name, value in groups.items()]


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

def build_impact_report(
    record: Any,
    *,
    diseases: Iterable[DiseaseParameter] | None = None,
    adherence: float = 1.0,
    value_per_qaly: float = QALY_VALUE_AUD,
    value_range: tuple[float, float] = QALY_VALUE_AUD_RANGE,
) -> dict[str, Any]:
    """Aggregate, estimate and monetise a program record in one pass."""
    agg = aggregate(record)
    impact = compute_impact(agg, diseases, adherence=adherence)
    money = monetise(impact.totals, value_per_qaly, value_range)
    inclusion = agg.inclusion

    report = {
        "participants": {
            "enrolled": as_count(agg.enrolled_participants),
            "active": as_count(agg.active_participants),
            "used_legacy_fallback": agg.used_legacy_fallback,
        },
        "adherence": adherence,
        "diseases": [row.as_dict() for row in impact.rows],
        "totals": {
            "cases_prevented": impact.totals.cases_prevented,
            "qalys_gained": impact.totals.qalys_gained,
            "dalys_avoided": impact.totals.dalys_avoided,
            "baseline_cases": impact.totals.baseline_cases,
        },
        "monetisation": {
            "value_per_qaly": money.value_per_qaly,
            "value_range": list(money.value_range),
            "dollars_from_qalys": money.dollars_from_qalys,
            "dollars_from_dalys": money.dollars_from_dalys,
            "dollars_from_qalys_range": list(money.dollars_from_qalys_range),
            "dollars_from_dalys_range": list(money.dollars_from_dalys_range),
            "note": "One DALY avoided is valued as one QALY gained.",
        },
        "composition": {
            "sports_by_type": _chart_series(agg.sports_by_type),
            "sports_by_location": _chart_series(agg.sports_by_location),
            "pa_by_name": _chart_series(agg.pa_by_name),
            "pa_by_location": _chart_series(agg.pa_by_location),
        },
        "inclusion": {
            "enabled": inclusion.enabled,
            "school": as_count(inclusion.school),
            "special_needs": as_count(inclusion.special_needs),
            "total": as_count(inclusion.total),
            "school_pct_of_enrolled": inclusion_share(agg, inclusion.school),
            "special_needs_pct_of_enrolled": inclusion_share(agg, inclusion.special_needs),
        },
        "warnings": list(agg.warnings),
    }
    return json_safe(report)


def summary_lines(report: dict[str, Any]) -> list[str]:
    """Short human-readable headline figures for a report."""
    participants = report["participants"]
    totals = report["totals"]
    money = report["monetisation"]
    return [
        f"Enrolled: {format_int(participants['enrolled'])}",
        f"Active (>=150 min/week): {format_int(participants['active'])}",
        f"Cases prevented / yr: {format_number(totals['cases_prevented'])}",
        f"QALYs gained / yr: {format_number(totals['qalys_gained'])}",
        f"DALYs avoided / yr: {format_number(totals['dalys_avoided'])}",
        f"Dollars saved (from QALYs): {format_money(money['dollars_from_qalys'])}",
        f"Dollars saved (from DALYs): {format_money(money['dollars_from_dalys'])}",
    ]
