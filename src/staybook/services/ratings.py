"""Rating summaries for a listing's reviews."""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict

from staybook.models import Review

STAR_VALUES = (1, 2, 3, 4, 5)


def whole_stars(rating: Decimal) -> int:
    """Round a rating to whole stars, halves up."""
    return int(rating.quantize(Decimal(1), rounding=ROUND_HALF_UP))


class RatingSummary(BaseModel):
    """Average rating and the per-star breakdown."""

    model_config = ConfigDict(frozen=True)

    count: int = 0
    average: Decimal = Decimal(0)
    stars: int = 0  # filled stars, the average rounded
    breakdown: dict[int, int] = {star: 0 for star in STAR_VALUES}
    percentages: dict[int, int] = {star: 0 for star in STAR_VALUES}


def rating_summary(reviews: Iterable[Review]) -> RatingSummary:
    """Summarise a listing's reviews.

    The average covers every review. The star breakdown counts each
    review under its rating rounded to whole stars; ratings that round
    outside 1-5 are left out of the breakdown but still count towards
    the total that percentages are taken of.
    """
    reviews = list(reviews)
    if not reviews:
        return RatingSummary()

    breakdown = {star: 0 for star in STAR_VALUES}
    for review in reviews:
        star = whole_stars(review.rating)
        if star in breakdown:
            breakdown[star] += 1

    total = len(reviews)
    average = sum((r.rating for r in reviews), Decimal(0)) / total
    percentages = {star: whole_stars(Decimal(n) * 100 / total) for star, n in breakdown.items()}

    return RatingSummary(
        count=total,
        average=average,
        stars=whole_stars(average),
        breakdown=breakdown,
        percentages=percentages,
    )


def reviews_with_stars(reviews: Iterable[Review], stars: int) -> list[Review]:
    """Reviews whose rating rounds to the given number of stars."""
    return [r for r in reviews if whole_stars(r.rating) == stars]
