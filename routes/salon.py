from flask import Blueprint, jsonify, g, request

from models import db
from models.salon import Salon
from models.user import User
from scheduling.admission import SALON
from scheduling.errors import BookingRejected
from scheduling.repository import BookingRepository
from security.rbac import SALON_OWNER, require_roles, is_super_admin
from utils.audit import log_event
from utils.request_data import json_object, text_field
from utils.booking_services import booking_controller, with_retry
from routes.booking import parse_day, serialize_booking, rejection_response

salon_bp = Blueprint("salon", __name__, url_prefix="/salon")

def _get_salon_for_owner(user):
    if not user:
        return None
    return Salon.query.filter_by(owner_user_id=user.id).order_by(Salon.id.asc()).first()

def _owned_booking(booking_id: int):
    """The booking if it belongs to the caller's salon (SUPER_ADMIN sees all)."""
    booking = BookingRepository(db.session).get(booking_id)
    if not booking:
        return None
    if is_super_admin():
        return booking
    salon = db.session.get(Salon, booking.salon_id)
    if not salon or salon.owner_user_id != g.user.id:
        return None
    return booking


@salon_bp.get("/bookings")
@require_roles(SALON_OWNER)
def salon_bookings():
    if is_super_admin():
        # admins see every salon unless they narrow it down
        salon = None
        salon_id = request.args.get("salon_id", type=int)
        if salon_id is not None:
            salon = db.session.get(Salon, salon_id)
            if not salon:
                return jsonify(error="Salon not found"), 404
    else:
        salon = _get_salon_for_owner(g.user)
        if not salon:
            return jsonify(error="You are not registered as a salon owner."), 404

    day = None
    date_str = request.args.get("date")
    if date_str:
        try:
            day = parse_day(date_str)
        except ValueError:
            return jsonify(error="Invalid date. Use YYYY-MM-DD"), 400

    rows = BookingRepository(db.session).list_for_salon(
        salon.id if salon else None, booking_date=day, status=request.args.get("status"),
    )
    customers = {u.id: u for u in User.query.filter(User.id.in_(sorted({b.user_id for b in rows}))).all()}

    out = []
    for b in rows:
        item = serialize_booking(b)
        customer = customers.get(b.user_id)
        item["customer_name"] = (customer.full_name if customer else None) or "Unknown"
        item["customer_phone"] = customer.phone_number if customer else None
        out.append(item)

    return jsonify(salon=salon.to_dict() if salon else None, bookings=out), 200


# ---------- SALON: check-in (QR scan or manual) ----------
@salon_bp.post("/bookings/<int:booking_id>/complete")
@require_roles(SALON_OWNER)
def complete_booking(booking_id: int):
    if not _owned_booking(booking_id):
        return jsonify(error="Booking not found"), 404

    controller = booking_controller()
    try:
        booking = with_retry(lambda: controller.complete_booking(booking_id))
    except BookingRejected as exc:
        return rejection_response(exc, "BOOKING_CHECK_IN_REJECTED", booking_id=booking_id)

    log_event("BOOKING_CHECK_IN", user_id=g.user.id, entity="booking", entity_id=booking_id)
    return jsonify(serialize_booking(booking)), 200


@salon_bp.post("/bookings/<int:booking_id>/cancel")
@require_roles(SALON_OWNER)
def cancel_booking(booking_id: int):
    reason = text_field(json_object(), "reason")[:120] or "Cancelled by salon"

    if not _owned_booking(booking_id):
        return jsonify(error="Booking not found"), 404

    controller = booking_controller()
    try:
        booking = with_retry(lambda: controller.cancel_booking(booking_id, SALON, reason=reason))
    except BookingRejected as exc:
        return rejection_response(exc, "SALON_BOOKING_CANCEL_REJECTED", booking_id=booking_id)

    log_event("SALON_BOOKING_CANCEL", user_id=g.user.id, entity="booking", entity_id=booking_id, metadata={"reason": reason})
    return jsonify(serialize_booking(booking)), 200


@salon_bp.post("/bookings/<int:booking_id>/no-show")
@require_roles(SALON_OWNER)
def mark_no_show(booking_id: int):
    if not _owned_booking(booking_id):
        return jsonify(error="Booking not found"), 404

    controller = booking_controller()
    try:
        booking = with_retry(lambda: controller.mark_no_show(booking_id))
    except BookingRejected as exc:
        return rejection_response(exc, "BOOKING_NO_SHOW_REJECTED", booking_id=booking_id)

    log_event("BOOKING_NO_SHOW", user_id=g.user.id, entity="booking", entity_id=booking_id)
    return jsonify(serialize_booking(booking)), 200
