from datetime import date, timedelta

PASSWORD = "correct-horse-1"
BOOKING_DAY = date(2026, 3, 1)


def future_day(days=5):
    return (date.today() + timedelta(days=days)).isoformat()


def login(client, email):
    """Log in through the API and return the CSRF header for later writes."""
    resp = client.post("/auth/login", json={"email": email, "password": PASSWORD})
    assert resp.status_code == 200
    return {"X-CSRF-Token": client.get_cookie("csrf_token").value}


class FlakyRepository:
    """Wraps a BookingRepository and raises a storage error from one method."""

    def __init__(self, inner, method, error, times=1):
        self._inner = inner
        self._method = method
        self._error = error
        self.remaining = times

    def __getattr__(self, name):
        target = getattr(self._inner, name)
        if name != self._method:
            return target

        def flaky(*args, **kwargs):
            if self.remaining > 0:
                self.remaining -= 1
                raise self._error
            return target(*args, **kwargs)
        return flaky
