"""Pricing calculator for stays with tiered multi-night discounts.

All arithmetic is done in Decimal and left unrounded; PricingResult
rounds to cents only when asked to for display.
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from staybook.models import DateRange, DiscountTier, PricingResult
from staybook.models.listing import to_decimal

from .dates import compute_nights

HUNDRED = Decimal(100)


class PriceCalculator:
    """Computes nights, the applicable discount and the price breakdown."""

    def compute_nights(self, date_range: DateRange) -> int:
        return compute_nights(date_range)

    def select_discount(self, nights: int, tiers: Iterable[DiscountTier]) -> Decimal:
        """Pick the discount percentage for a stay length.

        Among all matching tiers the highest discount wins, whatever order
        the host authored them in. No match means no discount.
        """
        matching = [tier.discount_percent for tier in tiers if tier.matches(nights)]
        return max(matching, default=Decimal(0))

    def quote(
        self,
        nights: int,
        price_per_night: Any,
        tiers: Iterable[DiscountTier] = (),
    ) -> PricingResult:
        """Price a stay.

        Args:
            nights: Number of nights (already validated as positive)
            price_per_night: Nightly rate; floats are converted via str
            tiers: Discount tiers in effect. Pass DiscountConfig.active_tiers
                so that a listing with discounts switched off quotes at
                full price.

        Returns:
            Unrounded PricingResult
        """
        rate = to_decimal(price_per_night)
        discount_percent = self.select_discount(nights, tiers)

        base_price = rate * nights
        discount_amount = base_price * discount_percent / HUNDRED
        total_price = base_price - discount_amount

        return PricingResult(
            nights=nights,
            base_price=base_price,
            discount_percent=discount_percent,
            discount_amount=discount_amount,
            total_price=total_price,
        )
