from .slots import SlotCatalog, generate_slots, to_12h, to_24h
from .availability import AvailabilityResolver, reconcile_selection
from .admission import AdmissionController
from .repository import BookingRepository
from .retry import call_with_retry
