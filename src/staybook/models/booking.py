"""Booking model and its status lifecycle."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .dates import DateRange
from .enums import BookingStatus
from .errors import BookingError, ErrorCode
from .listing import to_decimal

# Statuses that hold dates on the calendar
BLOCKING_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.ACCEPTED})


class Booking(BaseModel):
    """A guest's booking request for one listing.

    The date range and total price are fixed at creation; only the
    status moves, and only out of pending.
    """

    model_config = ConfigDict(frozen=True)

    booking_id: str
    listing_id: str
    owner: str | None = Field(default=None, description="Requesting guest identity")
    date_range: DateRange
    status: BookingStatus = BookingStatus.PENDING
    total_price: Decimal | None = None

    @field_validator("total_price", mode="before")
    @classmethod
    def coerce_total(cls, v: Any) -> Decimal | None:
        return None if v is None else to_decimal(v)

    @property
    def blocks_dates(self) -> bool:
        return self.status in BLOCKING_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.status != BookingStatus.PENDING

    def accept(self) -> "Booking":
        """Return this booking accepted by the host."""
        return self._transition(BookingStatus.ACCEPTED)

    def decline(self) -> "Booking":
        """Return this booking declined by the host."""
        return self._transition(BookingStatus.DECLINED)

    def _transition(self, target: BookingStatus) -> "Booking":
        if self.is_terminal:
            raise BookingError(
                ErrorCode.INVALID_STATUS_TRANSITION,
                details={
                    "booking_id": self.booking_id,
                    "current_status": self.status.value,
                    "requested_status": target.value,
                },
            )
        return self.model_copy(update={"status": target})

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Booking":
        """Parse the booking JSON returned by the bookings API."""
        from staybook.services.dates import parse_date

        date_range = data["dateRange"]
        return cls(
            booking_id=str(data.get("id", "")),
            listing_id=str(data["listingId"]),
            owner=data.get("owner"),
            date_range=DateRange(
                start=parse_date(date_range["start"]),
                end=parse_date(date_range["end"]),
            ),
            status=BookingStatus(data.get("status", BookingStatus.PENDING.value)),
            total_price=data.get("totalPrice"),
        )
