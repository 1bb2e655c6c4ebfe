"""Tests for the weekly activity threshold classifier."""

from __future__ import annotations

import pytest

from disport.domains.impact.domain_logic.participation import meets_threshold, weekly_minutes


@pytest.mark.parametrize(
    "sessions, minutes, expected",
    [
        (3, 50, True),      # exactly 150
        (2, 74, False),     # 148
        (0, 500, False),
        (500, 0, False),
        (1, 150, True),
        (6, 180, True),
        (2.5, 60, True),
        (-3, -50, False),   # product is 150 but both negative
    ],
)
def test_threshold_boundaries(sessions, minutes, expected):
    assert meets_threshold(sessions, minutes) is expected


@pytest.mark.parametrize(
    "sessions, minutes",
    [
        (None, 200),
        (3, None),
        ("", 60),
        ("abc", 60),
        (float("nan"), 200),
        ([3], 60),
        (True, 150),
    ],
)
def test_unusable_inputs_do_not_raise(sessions, minutes):
    assert meets_threshold(sessions, minutes) is False


def test_numeric_strings_are_accepted():
    assert meets_threshold("3", "50") is True


def test_weekly_minutes():
    assert weekly_minutes(3, 60) == 180
    assert weekly_minutes(0, 60) == 0
    assert weekly_minutes(None, 60) == 0
