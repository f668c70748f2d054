"""
Slot grid and the two time formats used around it.

Wire format is 24-hour ``HH:MM`` (``HH:MM:SS`` accepted on input, as the
database hands it back). Display format is 12-hour ``H:MM AM|PM``.
``to_12h`` and ``to_24h`` are the only conversions between the two.
"""
import re
from datetime import datetime, time, timedelta

_WIRE_RE = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?$")
_DISPLAY_RE = re.compile(r"^(\d{1,2}):(\d{2}) (AM|PM)$")


def parse_wire(value: str) -> time:
    m = _WIRE_RE.match(value.strip()) if isinstance(value, str) else None
    if not m:
        raise ValueError(f"Invalid time {value!r}. Use HH:MM")
    hour, minute, second = int(m.group(1)), int(m.group(2)), int(m.group(3) or 0)
    if hour > 23 or minute > 59:
        raise ValueError(f"Invalid time {value!r}. Use HH:MM")
    if second:
        # grid times never carry seconds; dropping them would not round-trip
        raise ValueError(f"Invalid time {value!r}. Seconds must be 00")
    return time(hour, minute)


def format_wire(t: time) -> str:
    return f"{t.hour:02d}:{t.minute:02d}"


def parse_display(value: str) -> time:
    m = _DISPLAY_RE.match(value.strip()) if isinstance(value, str) else None
    if not m:
        raise ValueError(f"Invalid time {value!r}. Use H:MM AM or H:MM PM")
    hour, minute, period = int(m.group(1)), int(m.group(2)), m.group(3)
    if not 1 <= hour <= 12 or minute > 59 or m.group(1).startswith("0"):
        raise ValueError(f"Invalid time {value!r}. Use H:MM AM or H:MM PM")
    if period == "AM":
        hour = 0 if hour == 12 else hour
    else:
        hour = hour if hour == 12 else hour + 12
    return time(hour, minute)


def format_display(t: time) -> str:
    hour = t.hour % 12 or 12
    suffix = "PM" if t.hour >= 12 else "AM"
    return f"{hour}:{t.minute:02d} {suffix}"


def to_12h(value: str) -> str:
    """"17:00" or "17:00:00" -> "5:00 PM"."""
    return format_display(parse_wire(value))


def to_24h(value: str) -> str:
    """"5:00 PM" -> "17:00"."""
    return format_wire(parse_display(value))


def generate_slots(day_start: time, day_end: time, step_minutes: int) -> list[time]:
    """Start times from day_start to day_end inclusive, step_minutes apart."""
    if step_minutes <= 0:
        raise ValueError("step_minutes must be positive")
    if day_end < day_start:
        raise ValueError("day_end must not be before day_start")

    anchor = datetime.combine(datetime.min.date(), day_start)
    last = datetime.combine(datetime.min.date(), day_end)
    step = timedelta(minutes=step_minutes)

    slots = []
    current = anchor
    while current <= last:
        slots.append(current.time())
        current += step
    return slots


class SlotCatalog:
    """The bookable start times; the same for every salon and every day."""

    def __init__(self, day_start="10:00", day_end="17:30", step_minutes=30, buffer_minutes=15):
        self.day_start = parse_wire(day_start)
        self.day_end = parse_wire(day_end)
        self.step_minutes = step_minutes
        # advertised to customers only; adjacent slots are not blocked
        self.buffer_minutes = buffer_minutes
        self._slots = tuple(generate_slots(self.day_start, self.day_end, step_minutes))
        self._members = frozenset(self._slots)

    @classmethod
    def from_config(cls, config):
        return cls(
            day_start=config.get("SLOT_DAY_START", "10:00"),
            day_end=config.get("SLOT_DAY_END", "17:30"),
            step_minutes=config.get("SLOT_INTERVAL_MINUTES", 30),
            buffer_minutes=config.get("SLOT_BUFFER_MINUTES", 15),
        )

    def slots(self) -> list[time]:
        return list(self._slots)

    def labels(self) -> list[str]:
        return [format_display(t) for t in self._slots]

    def contains(self, t: time) -> bool:
        return t in self._members

    def __len__(self):
        return len(self._slots)

    def __iter__(self):
        return iter(self._slots)
