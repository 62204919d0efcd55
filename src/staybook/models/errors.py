"""Rejection reasons and error codes for booking operations.

Rejections are expected business outcomes and are returned as values.
Error codes cover faults around the pure core (unknown bookings, illegal
status changes, lost commit races, bad listing configuration) and are
raised as BookingError.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .enums import RejectionReason


# Messages shown next to the booking form
REJECTION_MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.MISSING_DATES: "Please select both check-in and check-out dates",
    RejectionReason.INVERTED_OR_EQUAL_RANGE: "Check-out date must be after check-in date",
    RejectionReason.PAST_CHECK_IN: "Check-in date cannot be in the past",
    RejectionReason.OUTSIDE_AVAILABILITY_WINDOW: (
        "The selected dates are outside the host's availability"
    ),
    RejectionReason.OVERLAPS_EXISTING_BOOKING: (
        "The selected dates overlap an existing booking"
    ),
}

REJECTION_RECOVERY: dict[RejectionReason, str] = {
    RejectionReason.MISSING_DATES: "Select a check-in and a check-out date",
    RejectionReason.INVERTED_OR_EQUAL_RANGE: "Choose a check-out date after check-in",
    RejectionReason.PAST_CHECK_IN: "Choose a check-in date from today onwards",
    RejectionReason.OUTSIDE_AVAILABILITY_WINDOW: "Pick dates inside an availability range",
    RejectionReason.OVERLAPS_EXISTING_BOOKING: "Pick dates that are not already booked",
}


class BookingRejection(BaseModel):
    """A booking request that failed one of the eligibility checks."""

    model_config = ConfigDict(frozen=True)

    reason: RejectionReason
    message: str
    recovery: str

    @classmethod
    def from_reason(cls, reason: RejectionReason) -> "BookingRejection":
        return cls(
            reason=reason,
            message=REJECTION_MESSAGES[reason],
            recovery=REJECTION_RECOVERY[reason],
        )


class ErrorCode(str, Enum):
    """Error codes for faults raised around the booking core."""

    BOOKING_NOT_FOUND = "ERR_BOOKING_001"
    INVALID_STATUS_TRANSITION = "ERR_BOOKING_002"
    CONCURRENT_MODIFICATION = "ERR_BOOKING_003"
    INVALID_LISTING_CONFIG = "ERR_LISTING_001"


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.BOOKING_NOT_FOUND: "Booking not found",
    ErrorCode.INVALID_STATUS_TRANSITION: "Only pending bookings can be accepted or declined",
    ErrorCode.CONCURRENT_MODIFICATION: "The listing's bookings changed while saving",
    ErrorCode.INVALID_LISTING_CONFIG: "Listing configuration is invalid",
}

ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.BOOKING_NOT_FOUND: "Check the booking ID",
    ErrorCode.INVALID_STATUS_TRANSITION: "Reload the booking to see its current status",
    ErrorCode.CONCURRENT_MODIFICATION: "Retry the booking request",
    ErrorCode.INVALID_LISTING_CONFIG: "Fix the highlighted availability or discount entries",
}


class ErrorResponse(BaseModel):
    """Serialisable form of a BookingError."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ) -> "ErrorResponse":
        return cls(
            error_code=code,
            message=ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )


class BookingError(Exception):
    """Exception raised by booking ledger and configuration operations."""

    def __init__(
        self,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ):
        self.code = code
        self.message = ERROR_MESSAGES[code]
        self.recovery = ERROR_RECOVERY[code]
        self.details = details
        super().__init__(self.message)

    def to_response(self) -> ErrorResponse:
        """Convert this exception to an ErrorResponse."""
        return ErrorResponse.from_code(self.code, self.details)
