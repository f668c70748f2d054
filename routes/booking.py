from datetime import date

from flask import Blueprint, request, jsonify, g

from models import db
from models.booking import Booking
from models.salon import Salon
from models.service import services_for_salon
from scheduling.admission import CUSTOMER
from scheduling.errors import BookingRejected
from scheduling.repository import BookingRepository
from scheduling.slots import parse_wire, format_wire, format_display
from security.session import login_required
from utils.audit import log_event
from utils.request_data import json_object, text_field
from utils.booking_services import booking_controller, availability_resolver, with_retry

booking_bp = Blueprint("booking", __name__)

SERVICE_REF_MAX = Booking.service_ref.type.length

def parse_day(date_str):
    # Expect "YYYY-MM-DD"
    if not isinstance(date_str, str):
        raise ValueError("date required")
    return date.fromisoformat(date_str.strip())

def serialize_booking(b, salon=None):
    out = {
        "id": b.id,
        "user_id": b.user_id,
        "salon_id": b.salon_id,
        "service_id": b.service_ref,
        "booking_date": b.booking_date.isoformat(),
        "booking_time": format_wire(b.booking_time),
        "time_label": format_display(b.booking_time),
        "status": b.status,
        "payment_status": b.payment_status,
        "payment_method": b.payment_method,
        "created_at": b.created_at.isoformat(),
        "cancelled_at": b.cancelled_at.isoformat() if b.cancelled_at else None,
        "completed_at": b.completed_at.isoformat() if b.completed_at else None,
    }
    if salon is not None:
        out["salon"] = {"id": salon.id, "name": salon.name, "address": salon.address}
    return out

def parse_service_ref(value):
    """Service ids are opaque strings (ints are accepted and stringified)."""
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not value.strip() or len(value.strip()) > SERVICE_REF_MAX:
        raise ValueError(f"service_id must be a string of at most {SERVICE_REF_MAX} characters")
    return value.strip()

def rejection_response(exc, action, booking_id=None, **metadata):
    log_event(
        action,
        user_id=g.user.id if getattr(g, "user", None) else None,
        entity="booking",
        entity_id=booking_id,
        metadata=dict(metadata, code=exc.code),
    )
    return jsonify(exc.to_dict()), exc.http_status


# ---------- PUBLIC: browse salons ----------
@booking_bp.get("/salons")
def list_salons():
    salons = Salon.query.order_by(Salon.rating.desc(), Salon.name.asc()).all()
    return jsonify([s.to_dict() for s in salons]), 200


@booking_bp.get("/salons/<int:salon_id>/services")
def list_services(salon_id: int):
    salon = db.session.get(Salon, salon_id)
    if not salon:
        return jsonify(error="Salon not found"), 404
    return jsonify(services_for_salon(salon)), 200


# ---------- PUBLIC: polled slot availability ----------
@booking_bp.get("/salons/<int:salon_id>/availability")
def salon_availability(salon_id: int):
    salon = db.session.get(Salon, salon_id)
    if not salon:
        return jsonify(error="Salon not found"), 404

    try:
        day = parse_day(request.args.get("date"))
    except ValueError:
        return jsonify(error="Invalid date. Use YYYY-MM-DD"), 400

    selected = request.args.get("selected")
    if selected:
        try:
            selected = parse_wire(selected)
        except ValueError as exc:
            return jsonify(error=str(exc)), 400
    else:
        selected = None

    return jsonify(availability_resolver().snapshot(salon.id, day, selected=selected)), 200


# ---------- CUSTOMERS: place booking (DOUBLE-BOOKING SAFE) ----------
@booking_bp.post("/bookings")
@login_required
def create_booking():
    data = json_object()
    salon_id = data.get("salon_id")
    if not salon_id or not data.get("service_id") or not data.get("date") or not data.get("time"):
        return jsonify(error="salon_id, service_id, date and time are required"), 400

    try:
        service_ref = parse_service_ref(data.get("service_id"))
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    try:
        day = parse_day(data.get("date"))
    except ValueError:
        return jsonify(error="Invalid date. Use YYYY-MM-DD"), 400
    try:
        slot_time = parse_wire(data.get("time"))
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    try:
        salon = db.session.get(Salon, int(salon_id))
    except (TypeError, ValueError):
        return jsonify(error="salon_id must be an integer"), 400
    if not salon:
        return jsonify(error="Salon not found"), 404

    controller = booking_controller()
    try:
        booking = with_retry(lambda: controller.place_booking(
            salon.id, day, slot_time, g.user.id, service_ref,
        ))
    except BookingRejected as exc:
        return rejection_response(
            exc, "BOOKING_REJECTED",
            salon_id=salon.id, date=day.isoformat(), time=format_wire(slot_time),
        )

    log_event(
        "BOOKING_CREATE", user_id=g.user.id, entity="booking", entity_id=booking.id,
        metadata={"salon_id": salon.id, "date": day.isoformat(), "time": format_wire(slot_time)},
    )
    return jsonify(serialize_booking(booking, salon)), 201


# ---------- CUSTOMERS: view my bookings ----------
@booking_bp.get("/bookings/me")
@login_required
def my_bookings():
    rows = BookingRepository(db.session).list_for_customer(g.user.id)
    salons = {s.id: s for s in Salon.query.filter(Salon.id.in_(sorted({b.salon_id for b in rows}))).all()}

    upcoming, history = [], []
    for b in rows:
        item = serialize_booking(b, salons.get(b.salon_id))
        (upcoming if b.is_active else history).append(item)
    return jsonify(upcoming=upcoming, history=history), 200


# ---------- CUSTOMERS: cancel own booking ----------
@booking_bp.post("/bookings/<int:booking_id>/cancel")
@login_required
def cancel_booking(booking_id: int):
    reason = text_field(json_object(), "reason")[:120] or None

    booking = BookingRepository(db.session).get(booking_id)
    if not booking or booking.user_id != g.user.id:
        return jsonify(error="Booking not found"), 404

    controller = booking_controller()
    try:
        booking = with_retry(lambda: controller.cancel_booking(booking_id, CUSTOMER, reason=reason))
    except BookingRejected as exc:
        return rejection_response(exc, "BOOKING_CANCEL_REJECTED", booking_id=booking_id)

    log_event("BOOKING_CANCEL", user_id=g.user.id, entity="booking", entity_id=booking_id, metadata={"reason": reason})
    return jsonify(serialize_booking(booking)), 200
