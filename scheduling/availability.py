from scheduling.slots import format_display, format_wire


def reconcile_selection(selected, occupied, slots):
    """
    Keep the customer's highlighted slot unless it has been taken.

    A taken selection moves to the first free slot in catalog order, or to
    None when the day is full.
    """
    if selected is None or selected not in occupied:
        return selected
    for t in slots:
        if t not in occupied:
            return t
    return None


class AvailabilityResolver:
    """Read-only view of which slots are held. Advisory; admission never reads it."""

    def __init__(self, repository, catalog, poll_interval_seconds=10):
        self.repository = repository
        self.catalog = catalog
        self.poll_interval_seconds = poll_interval_seconds

    def list_occupied_slots(self, salon_id, booking_date):
        return set(self.repository.occupied_times(salon_id, booking_date))

    def snapshot(self, salon_id, booking_date, selected=None):
        occupied = self.list_occupied_slots(salon_id, booking_date)
        slots = self.catalog.slots()
        chosen = reconcile_selection(selected, occupied, slots)

        return {
            "date": booking_date.isoformat(),
            "slots": [
                {
                    "time": format_wire(t),
                    "label": format_display(t),
                    "available": t not in occupied,
                }
                for t in slots
            ],
            # off-grid times can only come from legacy rows; report them anyway
            "occupied": [format_wire(t) for t in sorted(occupied)],
            "selected": format_wire(chosen) if chosen is not None else None,
            "buffer_minutes": self.catalog.buffer_minutes,
            "poll_interval_seconds": self.poll_interval_seconds,
        }
