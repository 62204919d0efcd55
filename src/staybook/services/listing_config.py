"""Edit-time checks for a listing's availability and discount settings.

Booking-time code tolerates odd configuration (inactive tiers are simply
skipped); these checks run when a host publishes or edits a listing so
that bad entries are reported back with their position.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from staybook.models import AvailabilityWindow, BookingError, DiscountTier, ErrorCode

from .dates import parse_date


def validate_availability_windows(
    ranges: Sequence[dict[str, Any]],
    require_one: bool = True,
) -> list[AvailabilityWindow]:
    """Check publish-time availability ranges and parse them.

    Args:
        ranges: Raw ``{"start": ..., "end": ...}`` entries
        require_one: Whether an empty list is an error (publishing)

    Returns:
        Parsed AvailabilityWindow list, in the given order

    Raises:
        BookingError: INVALID_LISTING_CONFIG naming the 1-based range
    """
    if require_one and not ranges:
        raise BookingError(
            ErrorCode.INVALID_LISTING_CONFIG,
            details={"availability": "Please add at least one availability range"},
        )

    windows = []
    for index, entry in enumerate(ranges, start=1):
        try:
            start = parse_date(entry.get("start"))
            end = parse_date(entry.get("end"))
        except ValueError:
            raise BookingError(
                ErrorCode.INVALID_LISTING_CONFIG,
                details={"availability": f"Invalid date in availability {index}"},
            ) from None

        if start is None or end is None:
            raise BookingError(
                ErrorCode.INVALID_LISTING_CONFIG,
                details={
                    "availability": (
                        f"Please fill in both start and end dates for availability {index}"
                    )
                },
            )
        if start >= end:
            raise BookingError(
                ErrorCode.INVALID_LISTING_CONFIG,
                details={
                    "availability": f"End date must be after start date for availability {index}"
                },
            )
        windows.append(AvailabilityWindow(start=start, end=end))

    return windows


def validate_discount_tiers(tiers: Iterable[DiscountTier]) -> None:
    """Reject tiers that could never apply or make no sense.

    Raises:
        BookingError: INVALID_LISTING_CONFIG naming the 1-based tier
    """
    for index, tier in enumerate(tiers, start=1):
        problem = None
        if tier.min_nights < 1:
            problem = "minimum nights must be at least 1"
        elif tier.max_nights is not None and tier.max_nights < tier.min_nights:
            problem = "maximum nights must not be below minimum nights"
        elif not 0 < tier.discount_percent <= 100:
            problem = "discount must be above 0 and at most 100 percent"

        if problem:
            raise BookingError(
                ErrorCode.INVALID_LISTING_CONFIG,
                details={"discount": f"Discount tier {index}: {problem}"},
            )
