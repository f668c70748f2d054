class BookingError(Exception):
    code = "BOOKING_ERROR"
    message = "Booking could not be processed"
    http_status = 400

    def __init__(self, message=None, **details):
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.details = details

    def to_dict(self):
        out = {"error": self.message, "code": self.code}
        out.update(self.details)
        return out


class BookingRejected(BookingError):
    """An admission or transition rule said no. Expected; never retried."""


class InvalidSlot(BookingRejected):
    code = "INVALID_SLOT"
    message = "That time is not one of the bookable slots."


class InvalidDate(BookingRejected):
    code = "INVALID_DATE"
    message = "Cannot book appointments in the past."


class BookingLimitExceeded(BookingRejected):
    code = "BOOKING_LIMIT"
    message = "Booking limit reached. Cancel an upcoming booking first."
    http_status = 409


class SlotTaken(BookingRejected):
    code = "SLOT_TAKEN"
    message = "Sorry, this time slot has already been booked."
    http_status = 409


class NotFound(BookingRejected):
    code = "NOT_FOUND"
    message = "Booking not found"
    http_status = 404


class AlreadyCompleted(BookingRejected):
    code = "ALREADY_COMPLETED"
    message = "This booking has already been marked as completed."
    http_status = 409


class InvalidTransition(BookingRejected):
    code = "INVALID_TRANSITION"
    message = "Booking can no longer be changed"
    http_status = 409


class StorageUnavailable(BookingError):
    """Lock timeout or lost connection. The only error callers may retry."""
    code = "STORAGE_UNAVAILABLE"
    message = "Booking service is busy. Please try again."
    http_status = 503
