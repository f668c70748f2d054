import hashlib
import secrets
from datetime import datetime, timedelta
from functools import wraps

from flask import request, current_app, g, jsonify

from models import db
from models.session import Session
from models.user import User

CSRF_COOKIE = "csrf_token"
CSRF_HEADER = "X-CSRF-Token"


def _hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()

def _cookie_name():
    return current_app.config.get("AUTH_COOKIE_NAME", "salonslot_session")


def start_session(resp, user_id: int):
    """
    Store a new server-side session for user_id and set its cookies on resp:
    the httponly auth token (only its hash is kept) and a readable
    double-submit CSRF token the client echoes back in CSRF_HEADER.
    """
    cfg = current_app.config
    raw_token = secrets.token_urlsafe(32)
    lifetime = cfg.get("SESSION_LIFETIME_SECONDS", 28800)

    db.session.add(Session(
        user_id=user_id,
        token_hash=_hash_token(raw_token),
        expires_at=datetime.utcnow() + timedelta(seconds=lifetime),
        user_agent=(request.headers.get("User-Agent") or "")[:255],
    ))
    db.session.commit()

    secure = cfg.get("SESSION_COOKIE_SECURE", False)
    samesite = cfg.get("SESSION_COOKIE_SAMESITE", "Lax")
    resp.set_cookie(_cookie_name(), raw_token, httponly=True, secure=secure,
                    samesite=samesite, max_age=lifetime, path="/")
    resp.set_cookie(CSRF_COOKIE, secrets.token_urlsafe(32), httponly=False,
                    secure=secure, samesite=samesite, path="/")
    return resp


def end_session(resp):
    raw_token = request.cookies.get(_cookie_name())
    if raw_token:
        Session.query.filter_by(token_hash=_hash_token(raw_token)).update({"revoked": True})
        db.session.commit()
    resp.delete_cookie(_cookie_name(), path="/")
    resp.delete_cookie(CSRF_COOKIE, path="/")
    return resp


def _active_session():
    raw_token = request.cookies.get(_cookie_name())
    if not raw_token:
        return None

    now = datetime.utcnow()
    sess = Session.query.filter_by(token_hash=_hash_token(raw_token), revoked=False).first()
    if not sess or sess.expires_at <= now:
        return None

    idle_seconds = current_app.config.get("IDLE_TIMEOUT_SECONDS", 1200)
    if (sess.last_seen_at or sess.created_at) + timedelta(seconds=idle_seconds) <= now:
        return None

    sess.last_seen_at = now
    db.session.commit()
    return sess


def load_current_user():
    sess = _active_session()
    g.session = sess
    g.user = db.session.get(User, sess.user_id) if sess else None


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "user", None) is None:
            return jsonify(error="Authentication required"), 401
        return fn(*args, **kwargs)
    return wrapper


def require_csrf():
    cookie_token = request.cookies.get(CSRF_COOKIE)
    header_token = request.headers.get(CSRF_HEADER)
    if not cookie_token or not header_token or not secrets.compare_digest(cookie_token, header_token):
        return jsonify(error="CSRF validation failed"), 403
    return None
