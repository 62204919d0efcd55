"""Booking statistics for a host's listings.

All functions are pure; the reference day or year is always passed in.
"""

import datetime as dt
from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict

from staybook.models import Booking, BookingStatus, Listing, round_currency

from .dates import iter_nights, nights_in_year


class BookingStatistics(BaseModel):
    """Counts and earnings over the bookings for a set of listings."""

    model_config = ConfigDict(frozen=True)

    pending: int = 0
    accepted: int = 0
    declined: int = 0
    total: int = 0
    acceptance_rate: Decimal = Decimal("0.0")  # percent, one decimal place
    total_earnings: Decimal = Decimal("0.00")


def summarize_bookings(
    bookings: Iterable[Booking],
    listings: Iterable[Listing],
) -> BookingStatistics:
    """Summarise the bookings made against the given listings.

    Earnings are the stored totals of accepted bookings; a booking
    without a stored total contributes nothing.
    """
    listing_ids = {listing.listing_id for listing in listings}
    mine = [b for b in bookings if b.listing_id in listing_ids]

    counts = {status: 0 for status in BookingStatus}
    earnings = Decimal(0)
    for booking in mine:
        counts[booking.status] += 1
        if booking.status == BookingStatus.ACCEPTED and booking.total_price is not None:
            earnings += booking.total_price

    total = len(mine)
    rate = Decimal(0)
    if total:
        rate = (Decimal(counts[BookingStatus.ACCEPTED]) * 100 / total).quantize(
            Decimal("0.1"), rounding=ROUND_HALF_UP
        )

    return BookingStatistics(
        pending=counts[BookingStatus.PENDING],
        accepted=counts[BookingStatus.ACCEPTED],
        declined=counts[BookingStatus.DECLINED],
        total=total,
        acceptance_rate=rate,
        total_earnings=round_currency(earnings),
    )


def _accepted_for(listing: Listing, bookings: Iterable[Booking]) -> list[Booking]:
    return [
        b
        for b in bookings
        if b.listing_id == listing.listing_id and b.status == BookingStatus.ACCEPTED
    ]


def days_booked_in_year(listing: Listing, bookings: Iterable[Booking], year: int) -> int:
    """Nights of accepted bookings on this listing that fall in a year."""
    return sum(nights_in_year(b.date_range, year) for b in _accepted_for(listing, bookings))


def profit_in_year(listing: Listing, bookings: Iterable[Booking], year: int) -> Decimal:
    """Income from accepted bookings for the nights that fall in a year.

    A booking's stored total is spread evenly over its nights; bookings
    without a stored total are priced at the listing's nightly rate.
    """
    profit = Decimal(0)
    for booking in _accepted_for(listing, bookings):
        in_year = nights_in_year(booking.date_range, year)
        if not in_year:
            continue
        if booking.total_price is None:
            profit += listing.price_per_night * in_year
        else:
            profit += booking.total_price * in_year / booking.date_range.nights
    return round_currency(profit)


def daily_profits(
    bookings: Iterable[Booking],
    listings: Sequence[Listing],
    today: dt.date,
    days: int = 30,
) -> dict[int, Decimal]:
    """Nightly income per day for the last ``days`` days.

    Returns:
        Mapping of days-ago (0 is today) to the summed nightly rate of
        accepted stays occupying that night
    """
    by_id = {listing.listing_id: listing for listing in listings}
    profits = {offset: Decimal(0) for offset in range(days + 1)}

    for booking in bookings:
        if booking.status != BookingStatus.ACCEPTED:
            continue
        listing = by_id.get(booking.listing_id)
        if listing is None:
            continue
        for night in iter_nights(booking.date_range):
            days_ago = (today - night).days
            if 0 <= days_ago <= days:
                profits[days_ago] += listing.price_per_night

    return profits


def days_online(listing: Listing, today: dt.date) -> int:
    """Days since the listing was posted; 0 if never posted."""
    if listing.posted_on is None:
        return 0
    return max((today - listing.posted_on).days, 0)


def split_guest_bookings(
    bookings: Iterable[Booking],
    today: dt.date,
) -> tuple[list[Booking], list[Booking]]:
    """Split a guest's accepted bookings into (upcoming, past).

    A stay whose check-out is today or later still counts as upcoming.
    """
    upcoming: list[Booking] = []
    past: list[Booking] = []
    for booking in bookings:
        if booking.status != BookingStatus.ACCEPTED:
            continue
        if booking.date_range.end >= today:
            upcoming.append(booking)
        else:
            past.append(booking)
    return upcoming, past
