from flask import Flask, request, g, jsonify
from config import Config
from routes import health_bp, auth_bp, booking_bp, salon_bp

from models import db
from models.db import use_immediate_transactions
from flask_migrate import Migrate
from scheduling.errors import StorageUnavailable
from utils.seed import seed_roles
from security.session import load_current_user, require_csrf


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(salon_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    with app.app_context():
        use_immediate_transactions(db.engine)
        if app.config.get("CREATE_TABLES"):
            db.create_all()
        # Seed default roles at startup (safe & idempotent)
        seed_roles()

    @app.before_request
    def _load_user():
        load_current_user()

    CSRF_EXEMPT_PATHS = {
        "/auth/login",
        "/auth/register",
        "/health",
    }

    @app.before_request
    def _csrf_protect():
        # Only protect state-changing requests
        if request.method in ("POST", "PUT", "PATCH", "DELETE"):
            if request.path in CSRF_EXEMPT_PATHS:
                return None

            # Only enforce CSRF once the cookie session exists
            if getattr(g, "user", None) is not None:
                failure = require_csrf()
                if failure:
                    return failure

    @app.errorhandler(StorageUnavailable)
    def _storage_unavailable(exc):
        app.logger.error("booking storage unavailable after retries: %s", exc.__cause__ or exc)
        db.session.rollback()
        return jsonify(exc.to_dict()), exc.http_status

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app

#-------------------------
import click
from models.user import User, Role
from models.salon import Salon
from security.rbac import SALON_OWNER

def _promote(user, role_name):
    role = Role.query.filter_by(name=role_name).first()
    if not role:
        role = Role(name=role_name)
        db.session.add(role)
    if role not in user.roles:
        user.roles.append(role)

def register_cli(app):
    @app.cli.command("make-salon-owner")
    @click.argument("email")
    def make_salon_owner(email):
        """Give an existing user the SALON_OWNER role."""
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            click.echo("User not found")
            return

        _promote(user, SALON_OWNER)
        db.session.commit()
        click.echo(f"{user.email} is now a salon owner")

    @app.cli.command("create-salon")
    @click.argument("email")
    @click.argument("name")
    @click.option("--address", default=None, help="Street address shown to customers")
    @click.option("--rating", type=float, default=None)
    def create_salon(email, name, address, rating):
        """Register a salon owned by EMAIL (promotes the owner if needed)."""
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            click.echo("User not found")
            return

        _promote(user, SALON_OWNER)
        salon = Salon(name=name.strip(), address=address, rating=rating, owner_user_id=user.id)
        db.session.add(salon)
        db.session.commit()
        click.echo(f"Salon {salon.id} '{salon.name}' created for {user.email}")

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
