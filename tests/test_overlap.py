"""Tests for the half-open interval overlap primitive."""

from datetime import datetime, timedelta, timezone

import pytest

from roombook.scheduling.overlap import overlaps


def _at(hour, minute=0):
    return datetime(2024, 6, 10, hour, minute, tzinfo=timezone.utc)


INTERVALS = [
    (_at(9), _at(10)),
    (_at(9, 30), _at(10, 30)),
    (_at(10), _at(11)),
    (_at(8), _at(12)),
    (_at(10), _at(10)),
    (_at(11), _at(11, 30)),
]


@pytest.mark.parametrize("a", INTERVALS)
@pytest.mark.parametrize("b", INTERVALS)
def test_symmetric(a, b):
    assert overlaps(*a, *b) == overlaps(*b, *a)


@pytest.mark.parametrize("a", INTERVALS)
def test_self_overlap_iff_non_empty(a):
    assert overlaps(*a, *a) == (a[0] < a[1])


def test_contained_interval_overlaps():
    assert overlaps(_at(8), _at(12), _at(10), _at(10, 30))
    assert overlaps(_at(10), _at(10, 30), _at(8), _at(12))


def test_adjacent_intervals_do_not_overlap():
    """Sharing a boundary instant is not a collision."""
    assert not overlaps(_at(9), _at(10), _at(10), _at(11))
    assert not overlaps(_at(10), _at(11), _at(9), _at(10))


def test_partial_overlap():
    assert overlaps(_at(10), _at(11), _at(10, 30), _at(11, 30))


def test_empty_interval_never_overlaps():
    assert not overlaps(_at(10, 30), _at(10, 30), _at(10), _at(11))
    assert not overlaps(_at(10), _at(11), _at(10, 30), _at(10, 30))


def test_mixed_timezones_compare_as_instants():
    lisbon_summer = timezone(timedelta(hours=1))
    a_start = datetime(2024, 6, 10, 10, 0, tzinfo=lisbon_summer)  # 09:00Z
    assert overlaps(a_start, a_start + timedelta(hours=1), _at(9, 30), _at(9, 45))
    assert not overlaps(a_start, a_start + timedelta(hours=1), _at(10), _at(11))
