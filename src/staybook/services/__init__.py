"""Booking services: availability, pricing, validation and the ledger."""

from .availability import AvailabilityChecker, bookings_for_listing
from .pricing import PriceCalculator
from .validator import BookingRequestValidator

__all__ = [
    "AvailabilityChecker",
    "BookingRequestValidator",
    "PriceCalculator",
    "bookings_for_listing",
]
