"""Pydantic models for staybook data entities."""

from .booking import BLOCKING_STATUSES, Booking
from .dates import AvailabilityWindow, CandidateRange, DateRange
from .enums import BookingStatus, RejectionReason
from .errors import (
    BookingError,
    BookingRejection,
    ErrorCode,
    ErrorResponse,
)
from .listing import DiscountConfig, DiscountTier, Listing
from .pricing import PricingResult, round_currency
from .review import Review

__all__ = [
    # Enums
    "BookingStatus",
    "RejectionReason",
    # Dates
    "AvailabilityWindow",
    "CandidateRange",
    "DateRange",
    # Listing
    "DiscountConfig",
    "DiscountTier",
    "Listing",
    # Booking
    "BLOCKING_STATUSES",
    "Booking",
    # Review
    "Review",
    # Pricing
    "PricingResult",
    "round_currency",
    # Errors
    "BookingError",
    "BookingRejection",
    "ErrorCode",
    "ErrorResponse",
]
