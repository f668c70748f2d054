from datetime import datetime

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError

from models.booking import Booking, ACTIVE_STATUSES
from models.user import User

ACTIVE_SLOT_INDEX = "uq_bookings_active_slot"
# SQLite reports the indexed columns instead of the index name
_SQLITE_ACTIVE_SLOT = "UNIQUE constraint failed: bookings.salon_id, bookings.booking_date, bookings.booking_time"


def _is_active_slot_conflict(exc):
    diag = getattr(exc.orig, "diag", None)
    if diag is not None and getattr(diag, "constraint_name", None):
        return diag.constraint_name == ACTIVE_SLOT_INDEX
    message = str(exc.orig)
    return ACTIVE_SLOT_INDEX in message or _SQLITE_ACTIVE_SLOT in message


class BookingRepository:
    """
    Booking storage used by the scheduling services.

    All methods run on the caller's session and never commit on their own,
    except where noted, so the admission controller decides where a unit of
    work begins and ends.
    """

    def __init__(self, session):
        self.session = session

    def find_active(self, salon_id, booking_date, booking_time):
        """The active booking holding (salon, date, time), or None."""
        return (
            self.session.query(Booking)
            .filter(
                Booking.salon_id == salon_id,
                Booking.booking_date == booking_date,
                Booking.booking_time == booking_time,
                Booking.status.in_(ACTIVE_STATUSES),
            )
            .first()
        )

    def occupied_times(self, salon_id, booking_date):
        rows = (
            self.session.query(Booking.booking_time)
            .filter(
                Booking.salon_id == salon_id,
                Booking.booking_date == booking_date,
                Booking.status.in_(ACTIVE_STATUSES),
            )
            .all()
        )
        return [r.booking_time for r in rows]

    def count_active_for(self, customer_id) -> int:
        return (
            self.session.query(func.count(Booking.id))
            .filter(Booking.user_id == customer_id, Booking.status.in_(ACTIVE_STATUSES))
            .scalar()
        )

    def lock_customer(self, customer_id) -> bool:
        """
        Take the customer's row lock for the rest of the transaction.
        Returns False when the customer does not exist.
        """
        result = self.session.execute(
            update(User)
            .where(User.id == customer_id)
            .values(booking_guard=User.booking_guard + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def insert_if_absent(self, **fields):
        """
        Insert a booking unless its slot is already held.

        The partial unique index on active (salon, date, time) is the arbiter.
        On conflict the whole unit of work is rolled back and None is returned.
        Any other integrity failure (foreign key, NOT NULL) is re-raised.
        """
        booking = Booking(**fields)
        self.session.add(booking)
        try:
            self.session.flush()
        except IntegrityError as exc:
            if not _is_active_slot_conflict(exc):
                raise
            self.session.rollback()
            return None
        return booking

    def get(self, booking_id):
        return self.session.get(Booking, booking_id, populate_existing=True)

    def transition(self, booking_id, from_statuses, to_status, **fields) -> bool:
        """Conditional status update. True when the row was in one of from_statuses."""
        values = dict(fields, status=to_status, updated_at=datetime.utcnow())
        result = self.session.execute(
            update(Booking)
            .where(Booking.id == booking_id, Booking.status.in_(from_statuses))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def list_for_customer(self, customer_id):
        return (
            self.session.query(Booking)
            .filter(Booking.user_id == customer_id)
            .order_by(Booking.booking_date.asc(), Booking.booking_time.asc())
            .all()
        )

    def list_for_salon(self, salon_id, booking_date=None, status=None):
        """Bookings of one salon, or of every salon when salon_id is None."""
        q = self.session.query(Booking)
        if salon_id is not None:
            q = q.filter(Booking.salon_id == salon_id)
        if booking_date is not None:
            q = q.filter(Booking.booking_date == booking_date)
        if status:
            q = q.filter(Booking.status == status)
        return q.order_by(Booking.booking_date.asc(), Booking.booking_time.asc()).all()

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()
