from flask import Blueprint, jsonify, g

from models import db
from models.user import User, Role
from security.rbac import CUSTOMER
from security.password import hash_password, verify_password, MIN_PASSWORD_LENGTH
from security.session import start_session, end_session, login_required
from utils.audit import log_event
from utils.request_data import json_object, text_field


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _is_valid_email(email: str) -> bool:
    return isinstance(email, str) and "@" in email and len(email) <= 255


@auth_bp.post("/register")
def register():
    data = json_object()
    email = text_field(data, "email").lower()
    password = data.get("password")
    if not isinstance(password, str):
        password = ""

    if not _is_valid_email(email):
        return jsonify(error="Invalid email"), 400
    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify(error=f"Password must be at least {MIN_PASSWORD_LENGTH} characters"), 400

    if User.query.filter_by(email=email).first():
        return jsonify(error="Email already registered"), 409

    user = User(
        email=email,
        password_hash=hash_password(password),
        full_name=text_field(data, "full_name") or None,
        phone_number=text_field(data, "phone_number") or None,
    )
    db.session.add(user)
    db.session.flush()

    customer_role = Role.query.filter_by(name=CUSTOMER).first()
    if customer_role:
        user.roles.append(customer_role)

    db.session.commit()
    log_event("REGISTER_SUCCESS", user_id=user.id)

    return jsonify(message="Registered successfully", id=user.id), 201


@auth_bp.post("/login")
def login():
    data = json_object()
    email = text_field(data, "email").lower()
    password = data.get("password")
    if not isinstance(password, str):
        password = ""

    user = User.query.filter_by(email=email).first()
    if not user or not verify_password(password, user.password_hash):
        log_event("LOGIN_FAIL", user_id=user.id if user else None, metadata={"email": email})
        return jsonify(error="Invalid credentials"), 401

    resp = start_session(jsonify(message="Login OK"), user.id)

    log_event("LOGIN_SUCCESS", user_id=user.id)
    return resp, 200


@auth_bp.get("/me")
@login_required
def me():
    u = g.user
    return jsonify(
        id=u.id,
        email=u.email,
        full_name=u.full_name,
        phone_number=u.phone_number,
        trust_score=u.trust_score,
        roles=[r.name for r in u.roles],
    ), 200


@auth_bp.post("/logout")
@login_required
def logout():
    log_event("LOGOUT", user_id=g.user.id)
    return end_session(jsonify(message="Logged out")), 200
