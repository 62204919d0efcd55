"""Enumeration types for staybook data models."""

from enum import Enum


class BookingStatus(str, Enum):
    """Status of a booking request.

    pending -> accepted and pending -> declined are the only transitions.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class RejectionReason(str, Enum):
    """Why a booking request was refused."""

    MISSING_DATES = "missing_dates"
    INVERTED_OR_EQUAL_RANGE = "inverted_or_equal_range"
    PAST_CHECK_IN = "past_check_in"
    OUTSIDE_AVAILABILITY_WINDOW = "outside_availability_window"
    OVERLAPS_EXISTING_BOOKING = "overlaps_existing_booking"
