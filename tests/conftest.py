import pytest

from app import create_app
from config import Config
from models import db
from models.user import User, Role
from models.salon import Salon
from scheduling.admission import AdmissionController
from scheduling.repository import BookingRepository
from scheduling.slots import SlotCatalog
from security.password import hash_password
from tests.helpers import PASSWORD, BOOKING_DAY


@pytest.fixture
def app(tmp_path):
    class TestConfig(Config):
        TESTING = True
        SQLALCHEMY_DATABASE_URI = "sqlite:///" + str(tmp_path / "test.db")
        SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"check_same_thread": False, "timeout": 30}}
        CREATE_TABLES = True
        BCRYPT_ROUNDS = 4
        BOOKING_RETRY_DELAY_SECONDS = 0

    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def factory(email, role="CUSTOMER", full_name=None):
        with app.app_context():
            user = User(email=email, password_hash=hash_password(PASSWORD), full_name=full_name)
            user.roles.append(Role.query.filter_by(name=role).one())
            db.session.add(user)
            db.session.commit()
            return user.id
    return factory


@pytest.fixture
def owner_id(make_user):
    return make_user("owner@example.com", role="SALON_OWNER", full_name="Ravi Owner")


@pytest.fixture
def make_salon(app, owner_id):
    def factory(name="Fade Street", owner=None):
        with app.app_context():
            salon = Salon(name=name, address="12 MG Road", rating=4.6, owner_user_id=owner or owner_id)
            db.session.add(salon)
            db.session.commit()
            return salon.id
    return factory


@pytest.fixture
def salon_id(make_salon):
    return make_salon()


@pytest.fixture
def ctx(app):
    """App context for tests that drive the scheduling services directly."""
    with app.app_context():
        yield
        db.session.rollback()


@pytest.fixture
def make_controller():
    def factory(today=BOOKING_DAY, cap=2, on_customer_cancel=None, repository=None):
        return AdmissionController(
            repository or BookingRepository(db.session),
            SlotCatalog(),
            max_active_bookings=cap,
            today=lambda: today,
            on_customer_cancel=on_customer_cancel,
        )
    return factory

