"""Date range models.

All ranges are calendar dates; time of day never takes part in a comparison.
"""

import datetime as dt
from typing import Self

from pydantic import BaseModel, ConfigDict, model_validator


class DateRange(BaseModel):
    """A check-in/check-out pair with at least one night in it."""

    model_config = ConfigDict(frozen=True)

    start: dt.date
    end: dt.date

    @model_validator(mode="after")
    def check_order(self) -> Self:
        """Reject zero-night and inverted ranges."""
        if self.start >= self.end:
            raise ValueError(
                f"end ({self.end.isoformat()}) must be after start ({self.start.isoformat()})"
            )
        return self

    @property
    def nights(self) -> int:
        return (self.end - self.start).days


class AvailabilityWindow(DateRange):
    """Dates a host accepts bookings for (both bounds inclusive)."""


class CandidateRange(BaseModel):
    """Guest-proposed dates, not yet validated.

    Either bound may be missing and the order is unchecked; the booking
    validator turns those cases into rejections.
    """

    model_config = ConfigDict(frozen=True)

    start: dt.date | None = None
    end: dt.date | None = None

    @classmethod
    def from_strings(cls, start: str | None, end: str | None) -> "CandidateRange":
        """Build a candidate from form or JSON date strings."""
        from staybook.services.dates import parse_date

        return cls(start=parse_date(start), end=parse_date(end))

    def to_date_range(self) -> DateRange:
        """Promote to a DateRange.

        Raises:
            ValueError: If a bound is missing or the range is empty/inverted.
        """
        if self.start is None or self.end is None:
            raise ValueError("both start and end are required")
        return DateRange(start=self.start, end=self.end)
