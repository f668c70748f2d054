from flask import current_app

from models import db
from scheduling.admission import AdmissionController
from scheduling.availability import AvailabilityResolver
from scheduling.repository import BookingRepository
from scheduling.retry import call_with_retry
from scheduling.slots import SlotCatalog
from utils.trust import decrement_trust_on_cancel


def slot_catalog():
    catalog = current_app.extensions.get("slot_catalog")
    if catalog is None:
        catalog = SlotCatalog.from_config(current_app.config)
        current_app.extensions["slot_catalog"] = catalog
    return catalog


def booking_controller():
    return AdmissionController.from_config(
        current_app.config,
        BookingRepository(db.session),
        slot_catalog(),
        on_customer_cancel=decrement_trust_on_cancel,
    )


def availability_resolver():
    return AvailabilityResolver(
        BookingRepository(db.session),
        slot_catalog(),
        poll_interval_seconds=current_app.config.get("AVAILABILITY_POLL_SECONDS", 10),
    )


def with_retry(fn):
    """Bounded retry for transient storage errors, sized from config."""
    return call_with_retry(
        fn,
        retries=current_app.config.get("BOOKING_TRANSIENT_RETRIES", 2),
        delay_seconds=current_app.config.get("BOOKING_RETRY_DELAY_SECONDS", 0.05),
        logger=current_app.logger,
    )
