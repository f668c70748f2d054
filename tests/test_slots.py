from datetime import time

import pytest

from scheduling.slots import (
    SlotCatalog, generate_slots, to_12h, to_24h, parse_wire, format_wire,
)

EXPECTED_LABELS = [
    "10:00 AM", "10:30 AM", "11:00 AM", "11:30 AM",
    "12:00 PM", "12:30 PM", "1:00 PM", "1:30 PM",
    "2:00 PM", "2:30 PM", "3:00 PM", "3:30 PM",
    "4:00 PM", "4:30 PM", "5:00 PM", "5:30 PM",
]


def test_default_catalog_is_sixteen_half_hour_slots():
    catalog = SlotCatalog()

    slots = catalog.slots()

    assert len(slots) == 16
    assert slots[0] == time(10, 0)
    assert slots[-1] == time(17, 30)
    assert catalog.labels() == EXPECTED_LABELS


def test_catalog_from_config_reads_grid_settings():
    catalog = SlotCatalog.from_config({
        "SLOT_DAY_START": "09:00",
        "SLOT_DAY_END": "10:00",
        "SLOT_INTERVAL_MINUTES": 20,
        "SLOT_BUFFER_MINUTES": 5,
    })

    assert catalog.slots() == [time(9, 0), time(9, 20), time(9, 40), time(10, 0)]
    assert catalog.buffer_minutes == 5


def test_contains_only_grid_times():
    catalog = SlotCatalog()

    assert catalog.contains(time(13, 30))
    assert not catalog.contains(time(13, 15))
    assert not catalog.contains(time(18, 0))
    assert not catalog.contains(time(9, 30))


def test_round_trip_over_every_slot():
    catalog = SlotCatalog()

    for label in catalog.labels():
        assert to_12h(to_24h(label)) == label
    for t in catalog.slots():
        wire = format_wire(t)
        assert to_24h(to_12h(wire)) == wire


@pytest.mark.parametrize("wire,label", [
    ("17:00", "5:00 PM"),
    ("17:00:00", "5:00 PM"),
    ("12:00", "12:00 PM"),
    ("00:30", "12:30 AM"),
    ("10:00", "10:00 AM"),
])
def test_to_12h(wire, label):
    assert to_12h(wire) == label


@pytest.mark.parametrize("label,wire", [
    ("5:30 PM", "17:30"),
    ("12:00 PM", "12:00"),
    ("12:15 AM", "00:15"),
    ("11:00 AM", "11:00"),
])
def test_to_24h(label, wire):
    assert to_24h(label) == wire


@pytest.mark.parametrize("bad", ["", "5:00", "25:00", "10:60", "10:00:30", "1000", None])
def test_parse_wire_rejects_malformed(bad):
    with pytest.raises(ValueError):
        parse_wire(bad)


@pytest.mark.parametrize("bad", ["17:00", "13:00 PM", "0:30 AM", "05:00 PM", "5:00 pm", "5:00PM"])
def test_to_24h_rejects_malformed(bad):
    with pytest.raises(ValueError):
        to_24h(bad)


def test_generate_slots_validates_arguments():
    with pytest.raises(ValueError):
        generate_slots(time(10, 0), time(12, 0), 0)
    with pytest.raises(ValueError):
        generate_slots(time(12, 0), time(10, 0), 30)


def test_generate_slots_stops_at_inclusive_end():
    assert generate_slots(time(10, 0), time(11, 15), 30) == [time(10, 0), time(10, 30), time(11, 0)]
