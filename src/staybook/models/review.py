"""Guest review model."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from .listing import to_decimal


class Review(BaseModel):
    """A guest's rating of a listing after a stay.

    Ratings are meant to be 1-5 stars but are stored as given; summaries
    leave out anything that does not round into that range.
    """

    model_config = ConfigDict(frozen=True)

    rating: Decimal
    comment: str = ""
    owner: str | None = None

    @field_validator("rating", mode="before")
    @classmethod
    def coerce_rating(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Review":
        return cls(
            rating=data.get("rating", 0),
            comment=data.get("comment") or "",
            owner=data.get("owner"),
        )
