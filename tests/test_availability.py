from datetime import date, time

from scheduling.availability import AvailabilityResolver, reconcile_selection
from scheduling.slots import SlotCatalog

SLOTS = SlotCatalog().slots()


class StubRepository:
    def __init__(self, occupied):
        self.occupied = occupied
        self.calls = []

    def occupied_times(self, salon_id, booking_date):
        self.calls.append((salon_id, booking_date))
        return list(self.occupied)


def test_free_selection_is_kept():
    assert reconcile_selection(time(11, 0), {time(10, 0)}, SLOTS) == time(11, 0)


def test_taken_selection_moves_to_first_free_slot():
    occupied = {time(10, 0), time(10, 30)}

    assert reconcile_selection(time(10, 30), occupied, SLOTS) == time(11, 0)


def test_taken_selection_cleared_when_day_is_full():
    assert reconcile_selection(time(12, 0), set(SLOTS), SLOTS) is None


def test_no_selection_stays_empty():
    assert reconcile_selection(None, {time(10, 0)}, SLOTS) is None


def test_list_occupied_slots_returns_a_set():
    repo = StubRepository([time(10, 0), time(14, 30)])
    resolver = AvailabilityResolver(repo, SlotCatalog())

    occupied = resolver.list_occupied_slots(7, date(2026, 3, 1))

    assert occupied == {time(10, 0), time(14, 30)}
    assert repo.calls == [(7, date(2026, 3, 1))]


def test_snapshot_marks_slots_and_reconciles_selection():
    repo = StubRepository([time(10, 0)])
    resolver = AvailabilityResolver(repo, SlotCatalog(), poll_interval_seconds=10)

    snap = resolver.snapshot(7, date(2026, 3, 1), selected=time(10, 0))

    assert snap["date"] == "2026-03-01"
    assert len(snap["slots"]) == 16
    assert snap["slots"][0] == {"time": "10:00", "label": "10:00 AM", "available": False}
    assert snap["slots"][1]["available"] is True
    assert snap["occupied"] == ["10:00"]
    assert snap["selected"] == "10:30"
    assert snap["poll_interval_seconds"] == 10
    assert snap["buffer_minutes"] == 15


def test_buffer_does_not_block_adjacent_slots():
    resolver = AvailabilityResolver(StubRepository([time(12, 0)]), SlotCatalog())

    snap = resolver.snapshot(1, date(2026, 3, 1))
    free = {s["time"] for s in snap["slots"] if s["available"]}

    assert "11:30" in free
    assert "12:30" in free
    assert snap["selected"] is None
