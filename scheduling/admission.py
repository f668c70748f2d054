from datetime import datetime
from zoneinfo import ZoneInfo

from sqlalchemy.exc import OperationalError

from models.booking import (
    UPCOMING, COMPLETED, CANCELLED, NO_SHOW, ACTIVE_STATUSES,
    PAYMENT_PENDING, PAY_AT_SALON,
)
from scheduling.errors import (
    BookingRejected, InvalidSlot, InvalidDate, BookingLimitExceeded, SlotTaken,
    NotFound, AlreadyCompleted, InvalidTransition, StorageUnavailable,
)

CUSTOMER = "customer"
SALON = "salon"


def today_in(tz_name):
    return datetime.now(ZoneInfo(tz_name)).date()


class AdmissionController:
    """
    The only writer of booking rows.

    place_booking validates and inserts in one transaction: the customer's
    row lock serializes that customer's concurrent attempts (booking cap) and
    the partial unique index on active slots decides races between
    customers. A rejection or storage failure rolls the whole attempt back.
    """

    def __init__(self, repository, catalog, max_active_bookings=2, today=None, on_customer_cancel=None):
        self.repository = repository
        self.catalog = catalog
        self.max_active_bookings = max_active_bookings
        self._today = today or (lambda: datetime.now().date())
        self.on_customer_cancel = on_customer_cancel

    @classmethod
    def from_config(cls, config, repository, catalog, on_customer_cancel=None):
        tz_name = config.get("BOOKING_TIMEZONE", "Asia/Kolkata")
        return cls(
            repository,
            catalog,
            max_active_bookings=config.get("MAX_ACTIVE_BOOKINGS", 2),
            today=lambda: today_in(tz_name),
            on_customer_cancel=on_customer_cancel,
        )

    def place_booking(self, salon_id, booking_date, booking_time, customer_id, service_id):
        if not self.catalog.contains(booking_time):
            raise InvalidSlot()
        if booking_date < self._today():
            raise InvalidDate()

        def admit():
            if not self.repository.lock_customer(customer_id):
                raise ValueError(f"Unknown customer {customer_id}")

            active = self.repository.count_active_for(customer_id)
            if active >= self.max_active_bookings:
                raise BookingLimitExceeded(
                    f"Maximum {self.max_active_bookings} active bookings allowed.",
                    limit=self.max_active_bookings,
                )

            if self.repository.find_active(salon_id, booking_date, booking_time) is not None:
                raise SlotTaken()

            booking = self.repository.insert_if_absent(
                user_id=customer_id,
                salon_id=salon_id,
                service_ref=str(service_id),
                booking_date=booking_date,
                booking_time=booking_time,
                status=UPCOMING,
                payment_status=PAYMENT_PENDING,
                payment_method=PAY_AT_SALON,
            )
            if booking is None:
                # lost the race between our check and the insert
                raise SlotTaken()
            return booking

        return self._in_transaction(admit)

    def cancel_booking(self, booking_id, actor, reason=None):
        if actor not in (CUSTOMER, SALON):
            raise ValueError(f"Unknown cancellation actor {actor!r}")

        def cancel():
            changed = self.repository.transition(
                booking_id, ACTIVE_STATUSES, CANCELLED,
                cancelled_at=datetime.utcnow(),
                cancelled_by=actor,
                cancel_reason=reason,
            )
            if not changed:
                self._reject_transition(booking_id, CANCELLED)
            booking = self.repository.get(booking_id)
            if actor == CUSTOMER and self.on_customer_cancel is not None:
                self.on_customer_cancel(booking)
            return booking

        return self._in_transaction(cancel)

    def complete_booking(self, booking_id):
        def complete():
            changed = self.repository.transition(
                booking_id, ACTIVE_STATUSES, COMPLETED, completed_at=datetime.utcnow(),
            )
            if not changed:
                self._reject_transition(booking_id, COMPLETED)
            return self.repository.get(booking_id)

        return self._in_transaction(complete)

    def mark_no_show(self, booking_id):
        def no_show():
            if not self.repository.transition(booking_id, ACTIVE_STATUSES, NO_SHOW):
                self._reject_transition(booking_id, NO_SHOW)
            return self.repository.get(booking_id)

        return self._in_transaction(no_show)

    def _reject_transition(self, booking_id, target):
        booking = self.repository.get(booking_id)
        if booking is None:
            raise NotFound()
        if booking.status == COMPLETED:
            raise AlreadyCompleted()
        raise InvalidTransition(
            f"Booking is {booking.status} and cannot be marked {target}",
            status=booking.status,
        )

    def _in_transaction(self, work):
        try:
            result = work()
            self.repository.commit()
        except BookingRejected:
            self.repository.rollback()
            raise
        except OperationalError as exc:
            self.repository.rollback()
            raise StorageUnavailable() from exc
        except Exception:
            self.repository.rollback()
            raise
        return result
