"""Tests for the in-memory session record store."""

from __future__ import annotations

import pytest

from disport.core.session.store import RecordStore, normalise_record


@pytest.fixture
def store(full_record):
    s = RecordStore()
    s.save("programsPage", full_record)
    return s


class TestSaveAndRead:
    def test_get_returns_copy(self, store):
        record = store.get("programsPage")
        record["sportsEnabled"] = False
        assert store.get("programsPage")["sportsEnabled"] is True

    def test_save_copies_input(self, full_record):
        s = RecordStore()
        s.save("programsPage", full_record)
        full_record["sports"].clear()
        assert len(s.get("programsPage")["sports"]) == 3

    def test_missing_key(self):
        assert RecordStore().get("programsPage") is None

    def test_read_first_follows_key_order(self):
        s = RecordStore()
        s.save("programs", {"a": 1})
        s.save("programForm", {"b": 2})
        key, record = s.read_first()
        assert key == "programForm"
        assert record == {"b": 2}

    def test_read_first_nothing_saved(self):
        assert RecordStore().read_first() == (None, None)


class TestNormalise:
    def test_one_on_one_stored_as_single_participant(self, full_record):
        snapshot = normalise_record(full_record)
        assert snapshot["pa"][1]["participants"] == 1
        assert full_record["pa"][1]["participants"] == 7

    def test_tolerates_malformed_pa(self):
        assert normalise_record({"pa": "junk"}) == {"pa": "junk"}
        assert normalise_record({"pa": [None, 3]}) == {"pa": [None, 3]}


class TestClearSection:
    def test_clear_sports(self, store):
        record = store.clear_section("programsPage", "sports")
        assert record["sportsEnabled"] is False
        assert record["sportsCount"] == 0
        assert record["sports"] == []
        assert record["paEnabled"] is True

    def test_clear_inclusive(self, store):
        record = store.clear_section("programsPage", "inclusive")
        assert record["inclusiveEnabled"] is False
        assert record["schoolParticipantsDisability"] == 0
        assert record["specialNeedsParticipants"] == 0

    def test_clear_is_persisted(self, store):
        store.clear_section("programsPage", "pa")
        assert store.get("programsPage")["pa"] == []

    def test_unknown_section(self, store):
        with pytest.raises(ValueError, match="Unknown section"):
            store.clear_section("programsPage", "golf")

    def test_unknown_record(self):
        with pytest.raises(KeyError):
            RecordStore().clear_section("programsPage", "sports")


def test_delete_and_clear(store):
    store.save("programs", {})
    assert store.delete("programs") is True
    assert store.delete("programs") is False
    assert store.clear() == 1
    assert store.keys() == []
