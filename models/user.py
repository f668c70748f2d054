from datetime import datetime

from flask import current_app, has_app_context

from models.db import db


def _default_trust_score():
    if has_app_context():
        return current_app.config.get("TRUST_SCORE_DEFAULT", 100)
    return 100

# association table for many-to-many User <-> Role
user_roles = db.Table(
    "user_roles",
    db.Column("user_id", db.Integer, db.ForeignKey("users.id"), primary_key=True),
    db.Column("role_id", db.Integer, db.ForeignKey("roles.id"), primary_key=True),
)

class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)

    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(120), nullable=True)
    phone_number = db.Column(db.String(30), nullable=True)

    # lowered on customer cancellations
    trust_score = db.Column(db.Integer, nullable=False, default=_default_trust_score)

    # bumped at the start of every admission so one customer's requests serialize
    booking_guard = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    roles = db.relationship("Role", secondary=user_roles, back_populates="users")

class Role(db.Model):
    __tablename__ = "roles"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False)  # CUSTOMER, SALON_OWNER, SUPER_ADMIN

    users = db.relationship("User", secondary=user_roles, back_populates="roles")
