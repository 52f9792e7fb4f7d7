"""Tests for projecting reservations onto the slot grid."""

from datetime import date, datetime
from types import SimpleNamespace
from zoneinfo import ZoneInfo

from roombook.scheduling.availability import project_availability
from roombook.scheduling.slots import slot_grid

LISBON = ZoneInfo("Europe/Lisbon")
DAY = date(2024, 6, 10)


def _res(res_id, start, end):
    return SimpleNamespace(
        id=res_id,
        start_time=datetime(2024, 6, 10, *start, tzinfo=LISBON),
        end_time=datetime(2024, 6, 10, *end, tzinfo=LISBON),
    )


def _by_label(projection):
    return {p.slot.label: p for p in projection}


def test_empty_day_is_fully_available():
    projection = project_availability(slot_grid(DAY, LISBON), [])
    assert all(p.is_available and p.reservation is None for p in projection)


def test_reservation_blocks_covered_slots_only():
    standup = _res("a", (9, 30), (10, 30))
    projection = _by_label(project_availability(slot_grid(DAY, LISBON), [standup]))

    assert not projection["09:30"].is_available
    assert not projection["10:00"].is_available
    assert projection["10:00"].reservation is standup
    # half-open: the slot starting at 10:30 is free
    assert projection["10:30"].is_available


def test_partial_slot_overlap_blocks_slot():
    short = _res("a", (11, 10), (11, 20))
    projection = _by_label(project_availability(slot_grid(DAY, LISBON), [short]))
    assert not projection["11:00"].is_available
    assert projection["11:30"].is_available


def test_earliest_start_wins_regardless_of_input_order():
    late = _res("late", (12, 15), (13, 0))
    early = _res("early", (12, 0), (12, 30))
    projection = _by_label(project_availability(slot_grid(DAY, LISBON), [late, early]))

    assert projection["12:00"].reservation is early
    assert projection["12:30"].reservation is late


def test_output_parallel_to_grid():
    grid = slot_grid(DAY, LISBON)
    projection = project_availability(grid, [_res("a", (9, 30), (19, 0))])
    assert [p.slot for p in projection] == grid
    assert not any(p.is_available for p in projection)


def test_free_slots_offer_durations_up_to_next_reservation():
    lunch = _res("a", (12, 0), (13, 0))
    projection = _by_label(project_availability(slot_grid(DAY, LISBON), [lunch]))

    assert projection["10:30"].durations == (30, 60, 90)
    assert projection["11:30"].durations == (30,)
    assert projection["12:00"].durations == ()
    assert projection["13:00"].durations == (30, 60, 90, 120, 150, 180, 210, 240)
