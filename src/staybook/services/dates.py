"""Calendar-date arithmetic shared by availability, pricing and stats.

Ranges are half-open for occupancy: a stay occupies every night from
check-in up to, but not including, the check-out day.
"""

import datetime as dt
from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from staybook.models import DateRange


def parse_date(value: str | dt.date | None) -> dt.date | None:
    """Parse a calendar date, discarding any time or offset.

    Accepts date and datetime objects and ISO strings such as
    ``2024-06-10`` or ``2024-06-10T00:00:00.000Z``. Only the calendar
    part of a timestamp is kept; the offset is not applied.

    Returns:
        The date, or None for None/empty input.

    Raises:
        ValueError: If the string is not an ISO date.
    """
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    text = value.strip()
    if not text:
        return None
    return dt.date.fromisoformat(text[:10])


def compute_nights(date_range: "DateRange") -> int:
    """Number of nights between check-in and check-out."""
    return (date_range.end - date_range.start).days


def overlaps(a: "DateRange", b: "DateRange") -> bool:
    """Half-open overlap: checking out and in on the same day is not a clash."""
    return a.start < b.end and a.end > b.start


def contains(outer: "DateRange", inner: "DateRange") -> bool:
    """Whether inner lies within outer, both bounds inclusive."""
    return inner.start >= outer.start and inner.end <= outer.end


def iter_nights(date_range: "DateRange") -> Iterator[dt.date]:
    """Yield each occupied night (check-out day excluded)."""
    current = date_range.start
    while current < date_range.end:
        yield current
        current += dt.timedelta(days=1)


def nights_in_year(date_range: "DateRange", year: int) -> int:
    """Count the occupied nights that fall in a calendar year."""
    return sum(1 for night in iter_nights(date_range) if night.year == year)
