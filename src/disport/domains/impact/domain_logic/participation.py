"""Weekly activity threshold classification."""

from __future__ import annotations

from disport.domains.impact.domain_logic.field_reconciler import as_number
from disport.domains.impact.domain_logic.impact_models import ACTIVITY_THRESHOLD_MINUTES


def weekly_minutes(sessions_per_week, minutes_per_session) -> float:
    """Minutes of activity per week; 0 when either input is unusable."""
    sessions = as_number(sessions_per_week)
    minutes = as_number(minutes_per_session)
    if sessions is None or minutes is None or sessions <= 0 or minutes <= 0:
        return 0.0
    return sessions * minutes


def meets_threshold(sessions_per_week, minutes_per_session) -> bool:
    """True iff both inputs are positive and give >= 150 minutes a week.

    Never raises: missing, non-numeric or non-positive inputs simply do not
    meet the threshold.
    """
    return weekly_minutes(sessions_per_week, minutes_per_session) >= ACTIVITY_THRESHOLD_MINUTES
