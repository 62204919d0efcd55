"""Pricing result model."""

from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field

CENT = Decimal("0.01")


def round_currency(amount: Decimal) -> Decimal:
    """Round a currency amount to cents, halves away from zero."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


class PricingResult(BaseModel):
    """Price breakdown for a stay.

    Derived per request and never stored. Amounts are exact Decimals;
    call for_display() to round to cents.
    """

    model_config = ConfigDict(frozen=True)

    nights: int = Field(..., ge=0)
    base_price: Decimal = Field(..., description="nights x price per night")
    discount_percent: Decimal = Field(default=Decimal(0), ge=0, le=100)
    discount_amount: Decimal = Decimal(0)
    total_price: Decimal

    def for_display(self) -> "PricingResult":
        """Copy with every currency amount rounded to cents."""
        return self.model_copy(
            update={
                "base_price": round_currency(self.base_price),
                "discount_amount": round_currency(self.discount_amount),
                "total_price": round_currency(self.total_price),
            }
        )
