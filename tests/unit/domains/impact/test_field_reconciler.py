"""Tests for schema-tolerant numeric lookup."""

from __future__ import annotations

import math

import pytest

from disport.domains.impact.domain_logic.field_reconciler import (
    as_flag,
    as_number,
    deep_get,
    first_number,
    resolve_number,
    scan_for_tokens,
    to_number,
)


class TestAsNumber:
    @pytest.mark.parametrize("value, expected", [
        (5, 5.0),
        (2.5, 2.5),
        ("12", 12.0),
        (" 3.5 ", 3.5),
        (0, 0.0),
    ])
    def test_numeric_values(self, value, expected):
        assert as_number(value) == expected

    @pytest.mark.parametrize("value", [
        None, "", "   ", "abc", True, False, [1], {"a": 1},
        float("nan"), float("inf"), "nan", "-inf",
    ])
    def test_absent_values(self, value):
        assert as_number(value) is None

    def test_to_number_defaults_to_zero(self):
        assert to_number(None) == 0.0
        assert to_number("x") == 0.0
        assert to_number("7") == 7.0


class TestDeepGet:
    def test_nested_mapping(self):
        assert deep_get({"a": {"b": {"c": 1}}}, "a.b.c") == 1

    def test_missing_segment(self):
        assert deep_get({"a": {"b": 1}}, "a.x") is None
        assert deep_get({"a": 1}, "a.b") is None
        assert deep_get(None, "a") is None

    def test_list_index(self):
        record = {"sports": [{"participants": 4}]}
        assert deep_get(record, "sports.0.participants") == 4
        assert deep_get(record, "sports.3.participants") is None


class TestResolveNumber:
    def test_exact_path_wins_over_nested_match(self):
        record = {"inclusive": {"school": 5}, "schoolThings": {"disabilityCount": 9}}
        assert resolve_number(record, ["inclusive.school"]) == 5

    def test_paths_tried_in_order(self):
        record = {"b": 2, "a": 1}
        assert resolve_number(record, ["missing", "a", "b"]) == 1

    def test_non_numeric_path_is_skipped(self):
        record = {"a": "n/a", "b": "4"}
        assert resolve_number(record, ["a", "b"]) == 4

    def test_zero_is_a_present_value(self):
        assert resolve_number({"a": 0, "b": 3}, ["a", "b"]) == 0

    def test_nothing_resolves(self):
        assert resolve_number({"a": None}, ["a", "b.c"]) is None


class TestScanForTokens:
    def test_nested_key_found_when_exact_path_absent(self):
        record = {"schoolThings": {"disabilityCount": 9}}
        assert scan_for_tokens(record, ["school", "disab"]) == 9

    def test_matches_key_name_case_insensitively(self):
        record = {"form": {"SchoolDisabilityParticipants": "6"}}
        assert scan_for_tokens(record, ["school", "disab"]) == 6

    def test_all_tokens_required(self):
        record = {"schoolCount": 3}
        assert scan_for_tokens(record, ["school", "disab"]) is None
        assert scan_for_tokens(record, ["school"]) == 3

    def test_breadth_first(self):
        record = {"outer": {"schoolDisab": 1}, "schoolDisabCount": 2}
        assert scan_for_tokens(record, ["school", "disab"]) == 2

    def test_descends_into_lists(self):
        record = {"blocks": [{"label": "x"}, {"specialNeedsParticipants": 4}]}
        assert scan_for_tokens(record, ["special", "needs"]) == 4

    def test_skips_non_numeric_match(self):
        record = {"specialNeeds": "lots", "nested": {"specialNeedsTotal": 3}}
        assert scan_for_tokens(record, ["special", "needs"]) == 3

    def test_cyclic_structure_terminates(self):
        record: dict = {"a": {}}
        record["a"]["back"] = record
        record["a"]["items"] = [record]
        assert scan_for_tokens(record, ["missing"]) is None

    def test_cyclic_structure_still_finds_match(self):
        record: dict = {"a": {"schoolDisab": 7}}
        record["a"]["self"] = record["a"]
        assert scan_for_tokens(record, ["school", "disab"]) == 7

    def test_empty_inputs(self):
        assert scan_for_tokens(None, ["school"]) is None
        assert scan_for_tokens({}, ["school"]) is None
        assert scan_for_tokens({"school": 1}, []) is None


def test_first_number():
    assert first_number(None, 4, 5) == 4
    assert first_number(None, 0.0, 5) == 0.0
    assert first_number(None, None) == 0.0
    assert not math.isnan(first_number())


class TestScanLeafKey:
    def test_number_under_unrelated_key_not_matched(self):
        record = {"schoolVisit": {"sessionsPerWeek": 3}}
        assert scan_for_tokens(record, ["school"]) is None

    def test_parent_supplies_a_token_leaf_the_other(self):
        record = {"schoolThings": {"sessionsPerWeek": 3, "disabilityCount": 9}}
        assert scan_for_tokens(record, ["school", "disab"]) == 9


class TestAsFlag:
    @pytest.mark.parametrize("value", [True, "true", " TRUE ", "yes", "on", "1", 1, 2.0])
    def test_on(self, value):
        assert as_flag(value) is True

    @pytest.mark.parametrize("value", [False, "false", "False", "no", "off", "0", "", 0])
    def test_off(self, value):
        assert as_flag(value) is False

    @pytest.mark.parametrize("value", [None, "maybe", [True], {"a": 1}, float("nan")])
    def test_unknown(self, value):
        assert as_flag(value) is None
