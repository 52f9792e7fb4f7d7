"""Tests for the reservation conflict gate."""

from datetime import datetime, timezone

import pytest

from roombook.errors import InvalidInterval, ReservationConflict
from roombook.scheduling.conflicts import ensure_no_conflict, find_conflict, find_conflicts


def _at(hour, minute=0):
    return datetime(2024, 6, 10, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def ten_to_eleven(make_reservation):
    return make_reservation(_at(10), _at(11), title="Planning")


def test_overlapping_proposal_rejected(test_db_session, ten_to_eleven):
    with pytest.raises(ReservationConflict) as exc:
        ensure_no_conflict(test_db_session, "r-1", _at(10, 30), _at(11, 30))

    assert exc.value.conflict["id"] == ten_to_eleven.id
    assert exc.value.conflict["title"] == "Planning"
    assert exc.value.conflict["startTime"] == "2024-06-10T10:00:00Z"
    assert exc.value.status_code == 409


def test_adjacent_after_accepted(test_db_session, ten_to_eleven):
    ensure_no_conflict(test_db_session, "r-1", _at(11), _at(12))


def test_adjacent_before_accepted(test_db_session, ten_to_eleven):
    ensure_no_conflict(test_db_session, "r-1", _at(9), _at(10))


def test_other_room_not_considered(test_db_session, ten_to_eleven, make_room):
    make_room(room_id="r-2", name="Beta")
    assert find_conflict(test_db_session, "r-2", _at(10), _at(11)) is None


def test_editing_does_not_conflict_with_itself(test_db_session, ten_to_eleven):
    assert find_conflict(test_db_session, "r-1", _at(10, 15), _at(11, 15), exclude_id=ten_to_eleven.id) is None


def test_first_conflict_is_earliest(test_db_session, make_reservation):
    make_reservation(_at(12), _at(13), title="Lunch")
    make_reservation(_at(10), _at(11), title="Planning")

    conflict = find_conflict(test_db_session, "r-1", _at(9), _at(14))
    assert conflict.title == "Planning"


@pytest.mark.parametrize("start,end", [(_at(11), _at(10)), (_at(10), _at(10))])
def test_malformed_interval_is_not_a_conflict(test_db_session, start, end):
    with pytest.raises(InvalidInterval):
        find_conflict(test_db_session, "r-1", start, end)


def test_naive_datetimes_are_read_as_utc(test_db_session, ten_to_eleven):
    conflict = find_conflict(test_db_session, "r-1", datetime(2024, 6, 10, 10, 30), datetime(2024, 6, 10, 10, 45))
    assert conflict is not None


def test_in_memory_variant_respects_exclusion(ten_to_eleven):
    assert find_conflicts(_at(10), _at(11), [ten_to_eleven]) == [ten_to_eleven]
    assert find_conflicts(_at(10), _at(11), [ten_to_eleven], exclude_id=ten_to_eleven.id) == []
