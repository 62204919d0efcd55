"""Listing models: nightly price, availability windows and discount tiers.

Prices are held as Decimal so that repeated discount math does not drift.
"""

import datetime as dt
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .dates import AvailabilityWindow


def to_decimal(value: Any) -> Decimal:
    """Convert a JSON number to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"not a number: {value!r}") from exc


class DiscountTier(BaseModel):
    """Percentage discount for stays within a night-count range.

    Tiers are stored as the host authored them. A tier with
    min_nights <= 0 or discount_percent <= 0 is inactive and never
    matches; edit-time checks live in services.listing_config.
    """

    model_config = ConfigDict(frozen=True)

    min_nights: int
    max_nights: int | None = None  # None means no upper bound
    discount_percent: Decimal = Field(le=100)

    @field_validator("discount_percent", mode="before")
    @classmethod
    def coerce_percent(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @property
    def is_active(self) -> bool:
        return self.min_nights > 0 and self.discount_percent > 0

    def matches(self, nights: int) -> bool:
        """Whether a stay of this many nights falls inside the tier."""
        if not self.is_active or nights < self.min_nights:
            return False
        return self.max_nights is None or nights <= self.max_nights

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "DiscountTier":
        """Parse a {minNights, maxNights, discount} entry."""
        max_nights = data.get("maxNights")
        return cls(
            min_nights=int(data.get("minNights") or 0),
            max_nights=int(max_nights) if max_nights not in (None, "") else None,
            discount_percent=data.get("discount") or 0,
        )


class DiscountConfig(BaseModel):
    """A listing's discount tiers and the host's on/off switch.

    Hosts may author tiers before turning discounts on, so the flag is
    independent of whether any tiers exist.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    tiers: tuple[DiscountTier, ...] = ()

    @property
    def active_tiers(self) -> tuple[DiscountTier, ...]:
        """Tiers that may apply to a quote; empty when discounts are off."""
        if not self.enabled:
            return ()
        return tuple(t for t in self.tiers if t.is_active)


class Listing(BaseModel):
    """The parts of a listing that booking and pricing depend on."""

    model_config = ConfigDict(frozen=True)

    listing_id: str
    owner: str | None = None
    title: str = ""
    price_per_night: Decimal = Field(ge=0)
    availability_windows: tuple[AvailabilityWindow, ...] = ()
    discount_config: DiscountConfig = Field(default_factory=DiscountConfig)
    posted_on: dt.date | None = None
    published: bool = False

    @field_validator("price_per_night", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @property
    def is_unrestricted(self) -> bool:
        """No windows means the host has not restricted availability."""
        return not self.availability_windows

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Listing":
        """Parse the listing JSON returned by the listings API.

        Windows come from the publish-time ``availability`` list and from
        the flat ``metadata.availabilityStart``/``availabilityEnd`` pair;
        both sources are merged.
        """
        from staybook.services.dates import parse_date

        metadata = data.get("metadata") or {}

        windows: list[AvailabilityWindow] = []
        for entry in data.get("availability") or []:
            windows.append(
                AvailabilityWindow(
                    start=parse_date(entry.get("start")),
                    end=parse_date(entry.get("end")),
                )
            )
        single_start = parse_date(metadata.get("availabilityStart"))
        single_end = parse_date(metadata.get("availabilityEnd"))
        if single_start is not None and single_end is not None:
            windows.append(AvailabilityWindow(start=single_start, end=single_end))

        tiers = tuple(
            DiscountTier.from_api(t) for t in metadata.get("customDiscounts") or []
        )

        return cls(
            listing_id=str(data.get("id", data.get("listingId", ""))),
            owner=data.get("owner"),
            title=data.get("title", ""),
            price_per_night=data.get("price", 0),
            availability_windows=tuple(windows),
            discount_config=DiscountConfig(
                enabled=bool(metadata.get("discountsEnabled", False)),
                tiers=tiers,
            ),
            posted_on=parse_date(data.get("postedOn")),
            published=bool(data.get("published", False)),
        )
