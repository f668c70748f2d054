from functools import wraps
from flask import g, jsonify

CUSTOMER = "CUSTOMER"
SALON_OWNER = "SALON_OWNER"
SUPER_ADMIN = "SUPER_ADMIN"


def _role_names():
    user = getattr(g, "user", None)
    return {r.name for r in user.roles} if user else set()

def is_super_admin() -> bool:
    return SUPER_ADMIN in _role_names()


def require_roles(*role_names: str):
    """
    Usage: @require_roles(SALON_OWNER)

    SUPER_ADMIN passes every check, so views behind this decorator must
    also handle an admin who owns nothing (see is_super_admin).
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if getattr(g, "user", None) is None:
                return jsonify(error="Authentication required"), 401

            names = _role_names()
            if SUPER_ADMIN not in names and not names.intersection(role_names):
                return jsonify(error="Forbidden"), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator
