"""Availability checks for a candidate stay on one listing."""

from collections.abc import Iterable, Sequence

from staybook.models import AvailabilityWindow, Booking, DateRange

from .dates import contains, overlaps


def bookings_for_listing(listing_id: str, bookings: Iterable[Booking]) -> list[Booking]:
    """Select the bookings that reference a listing.

    Listings do not point at their bookings; the relationship is found by
    scanning for a matching listing_id.
    """
    return [b for b in bookings if b.listing_id == listing_id]


class AvailabilityChecker:
    """Decides whether a date range can be booked.

    Two independent conditions must both hold:
    - the range sits inside one of the host's availability windows
      (or the host declared none, which leaves the listing unrestricted)
    - no pending or accepted booking overlaps the range
    """

    def is_within_windows(
        self,
        candidate: DateRange,
        windows: Sequence[AvailabilityWindow],
    ) -> bool:
        """Check window containment.

        An empty window list means the host has not restricted dates, so
        every range passes.
        """
        if not windows:
            return True
        return any(contains(window, candidate) for window in windows)

    def find_conflicts(
        self,
        candidate: DateRange,
        existing_bookings: Iterable[Booking],
    ) -> list[Booking]:
        """Return the blocking bookings that overlap the candidate.

        Declined bookings never block.
        """
        return [
            booking
            for booking in existing_bookings
            if booking.blocks_dates and overlaps(candidate, booking.date_range)
        ]

    def has_overlap(
        self,
        candidate: DateRange,
        existing_bookings: Iterable[Booking],
    ) -> bool:
        return bool(self.find_conflicts(candidate, existing_bookings))

    def is_bookable(
        self,
        candidate: DateRange,
        windows: Sequence[AvailabilityWindow],
        existing_bookings: Iterable[Booking],
    ) -> bool:
        """Both window containment and no overlap."""
        return self.is_within_windows(candidate, windows) and not self.has_overlap(
            candidate, existing_bookings
        )
