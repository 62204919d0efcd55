"""Booking request validation.

Runs the eligibility checks in a fixed order and either prices the stay
or reports the first failed check. Pure and synchronous: the caller
supplies "today", the listing and its bookings, and persists the result.

The overlap check is only as fresh as the bookings snapshot passed in.
Callers that persist bookings must make validate-then-commit atomic per
listing; BookingLedger does this with a versioned commit.
"""

import datetime as dt
from collections.abc import Iterable

from staybook.models import (
    Booking,
    BookingRejection,
    CandidateRange,
    DateRange,
    Listing,
    PricingResult,
    RejectionReason,
)

from .availability import AvailabilityChecker, bookings_for_listing
from .pricing import PriceCalculator


class BookingRequestValidator:
    """Accept/reject decision plus quote for a booking request."""

    def __init__(
        self,
        checker: AvailabilityChecker | None = None,
        calculator: PriceCalculator | None = None,
    ) -> None:
        self.checker = checker or AvailabilityChecker()
        self.calculator = calculator or PriceCalculator()

    def validate(
        self,
        candidate: CandidateRange,
        today: dt.date,
        listing: Listing,
        existing_bookings: Iterable[Booking],
    ) -> PricingResult | BookingRejection:
        """Validate a candidate range against a listing snapshot.

        Checks, stopping at the first failure:
        1. both dates present
        2. check-out strictly after check-in
        3. check-in not before today
        4. inside an availability window (if the listing has any)
        5. no overlap with a pending or accepted booking

        Args:
            candidate: Guest-proposed dates
            today: The guest's current calendar day
            listing: Listing snapshot
            existing_bookings: Bookings snapshot; entries for other
                listings are ignored

        Returns:
            PricingResult for the stay, or the BookingRejection
        """
        if candidate.start is None or candidate.end is None:
            return BookingRejection.from_reason(RejectionReason.MISSING_DATES)

        if candidate.start >= candidate.end:
            return BookingRejection.from_reason(RejectionReason.INVERTED_OR_EQUAL_RANGE)

        if candidate.start < today:
            return BookingRejection.from_reason(RejectionReason.PAST_CHECK_IN)

        stay = DateRange(start=candidate.start, end=candidate.end)

        if not self.checker.is_within_windows(stay, listing.availability_windows):
            return BookingRejection.from_reason(RejectionReason.OUTSIDE_AVAILABILITY_WINDOW)

        listing_bookings = bookings_for_listing(listing.listing_id, existing_bookings)
        if self.checker.has_overlap(stay, listing_bookings):
            return BookingRejection.from_reason(RejectionReason.OVERLAPS_EXISTING_BOOKING)

        nights = self.calculator.compute_nights(stay)
        return self.calculator.quote(
            nights,
            listing.price_per_night,
            listing.discount_config.active_tiers,
        )
