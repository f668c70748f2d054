import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to the app as salonslot.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "salonslot.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # Only for local/dev runs; production schema comes from `flask db upgrade`
    CREATE_TABLES = os.getenv("CREATE_TABLES", "false").lower() == "true"

    # Session cookie name for our auth token
    AUTH_COOKIE_NAME = "salonslot_session"

    # 8 hours session lifetime
    SESSION_LIFETIME_SECONDS = 8 * 60 * 60

    # Idle timeout: 20 minutes
    IDLE_TIMEOUT_SECONDS = 20 * 60

    # Session/cookie security defaults
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = False  # set True when using HTTPS

    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Slot grid (same for every salon and day)
    SLOT_DAY_START = os.getenv("SLOT_DAY_START", "10:00")
    SLOT_DAY_END = os.getenv("SLOT_DAY_END", "17:30")   # last bookable start, inclusive
    SLOT_INTERVAL_MINUTES = int(os.getenv("SLOT_INTERVAL_MINUTES", "30"))
    SLOT_BUFFER_MINUTES = int(os.getenv("SLOT_BUFFER_MINUTES", "15"))  # shown to users, not enforced

    # Admission policy
    MAX_ACTIVE_BOOKINGS = int(os.getenv("MAX_ACTIVE_BOOKINGS", "2"))
    BOOKING_TIMEZONE = os.getenv("BOOKING_TIMEZONE", "Asia/Kolkata")
    BOOKING_TRANSIENT_RETRIES = int(os.getenv("BOOKING_TRANSIENT_RETRIES", "2"))
    BOOKING_RETRY_DELAY_SECONDS = 0.05

    # Clients poll availability at this interval
    AVAILABILITY_POLL_SECONDS = 10

    # Customer reliability score
    TRUST_SCORE_DEFAULT = 100
    TRUST_SCORE_CANCEL_PENALTY = int(os.getenv("TRUST_SCORE_CANCEL_PENALTY", "5"))

    # Basic app settings
    DEBUG = False
