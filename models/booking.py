from datetime import datetime
from models.db import db

UPCOMING = "upcoming"
COMPLETED = "completed"
CANCELLED = "cancelled"
NO_SHOW = "no-show"

# statuses that occupy a slot and count toward the customer's cap
ACTIVE_STATUSES = (UPCOMING,)
TERMINAL_STATUSES = (COMPLETED, CANCELLED, NO_SHOW)

PAYMENT_PENDING = "pending"
PAY_AT_SALON = "pay_at_salon"

_ACTIVE_ONLY = db.text("status = 'upcoming'")


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    salon_id = db.Column(db.Integer, db.ForeignKey("salons.id"), nullable=False, index=True)
    # opaque: may name a default service that has no row
    service_ref = db.Column(db.String(64), nullable=False)

    booking_date = db.Column(db.Date, nullable=False)
    booking_time = db.Column(db.Time, nullable=False)

    status = db.Column(db.String(20), nullable=False, default=UPCOMING)
    # status values: upcoming, completed, cancelled, no-show

    payment_status = db.Column(db.String(20), nullable=False, default=PAYMENT_PENDING)
    payment_method = db.Column(db.String(30), nullable=False, default=PAY_AT_SALON)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    cancelled_at = db.Column(db.DateTime, nullable=True)
    cancelled_by = db.Column(db.String(20), nullable=True)  # customer, salon
    cancel_reason = db.Column(db.String(120), nullable=True)
    completed_at = db.Column(db.DateTime, nullable=True)

    __table_args__ = (
        # Hard business-rule: one active booking per salon slot (prevents double booking)
        db.Index(
            "uq_bookings_active_slot",
            "salon_id", "booking_date", "booking_time",
            unique=True,
            sqlite_where=_ACTIVE_ONLY,
            postgresql_where=_ACTIVE_ONLY,
        ),
        db.Index("ix_bookings_salon_date", "salon_id", "booking_date"),
    )

    @property
    def is_active(self):
        return self.status in ACTIVE_STATUSES
