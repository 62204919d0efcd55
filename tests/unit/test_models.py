"""Unit tests for staybook pydantic models."""

import datetime as dt
from decimal import Decimal
from typing import Any

import pytest
from pydantic import ValidationError

from staybook.models import (
    AvailabilityWindow,
    Booking,
    BookingError,
    BookingRejection,
    BookingStatus,
    CandidateRange,
    DateRange,
    DiscountConfig,
    DiscountTier,
    ErrorCode,
    Listing,
    PricingResult,
    RejectionReason,
)
from staybook.models.listing import to_decimal


class TestDateRange:
    """Tests for DateRange construction."""

    def test_valid_range(self) -> None:
        stay = DateRange(start=dt.date(2024, 6, 10), end=dt.date(2024, 6, 15))
        assert stay.nights == 5

    def test_zero_night_range_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DateRange(start=dt.date(2024, 6, 10), end=dt.date(2024, 6, 10))

    def test_inverted_range_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AvailabilityWindow(start=dt.date(2024, 6, 10), end=dt.date(2024, 6, 1))

    def test_accepts_iso_strings(self) -> None:
        stay = DateRange(start="2024-06-10", end="2024-06-12")  # type: ignore[arg-type]
        assert stay.start == dt.date(2024, 6, 10)


class TestCandidateRange:
    """Tests for unvalidated guest input."""

    def test_from_strings(self) -> None:
        candidate = CandidateRange.from_strings("2024-06-10", "2024-06-12")
        assert candidate.start == dt.date(2024, 6, 10)
        assert candidate.end == dt.date(2024, 6, 12)

    def test_blank_strings_become_none(self) -> None:
        candidate = CandidateRange.from_strings("", None)
        assert candidate.start is None
        assert candidate.end is None

    def test_inverted_candidate_is_representable(self) -> None:
        candidate = CandidateRange(start=dt.date(2024, 6, 12), end=dt.date(2024, 6, 10))
        with pytest.raises(ValueError):
            candidate.to_date_range()


class TestDiscountModels:
    """Tests for DiscountTier and DiscountConfig."""

    def test_float_percent_is_exact(self) -> None:
        tier = DiscountTier(min_nights=3, discount_percent=7.5)
        assert tier.discount_percent == Decimal("7.5")

    def test_unbounded_tier_matches_long_stays(self) -> None:
        tier = DiscountTier(min_nights=14, max_nights=None, discount_percent=15)
        assert tier.matches(14)
        assert tier.matches(365)
        assert not tier.matches(13)

    @pytest.mark.parametrize(
        "min_nights,percent",
        [(0, 10), (-1, 10), (3, 0), (3, -5)],
    )
    def test_inactive_tiers_never_match(self, min_nights: int, percent: int) -> None:
        tier = DiscountTier(min_nights=min_nights, max_nights=None, discount_percent=percent)
        assert not tier.is_active
        assert not tier.matches(30)

    def test_percent_above_hundred_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DiscountTier(min_nights=1, discount_percent=101)

    def test_disabled_config_has_no_active_tiers(self) -> None:
        tier = DiscountTier(min_nights=2, discount_percent=10)
        assert DiscountConfig(enabled=False, tiers=(tier,)).active_tiers == ()
        assert DiscountConfig(enabled=True, tiers=(tier,)).active_tiers == (tier,)

    def test_active_tiers_skip_invalid_entries(self) -> None:
        good = DiscountTier(min_nights=2, discount_percent=10)
        bad = DiscountTier(min_nights=0, discount_percent=10)
        assert DiscountConfig(enabled=True, tiers=(good, bad)).active_tiers == (good,)


class TestListingFromApi:
    """Tests for parsing listing JSON."""

    def test_parses_windows_and_discounts(self, sample_listing_payload: dict[str, Any]) -> None:
        listing = Listing.from_api(sample_listing_payload)

        assert listing.listing_id == "42"
        assert listing.price_per_night == Decimal("120.5")
        assert len(listing.availability_windows) == 2
        assert listing.availability_windows[1].start == dt.date(2024, 8, 1)
        assert listing.discount_config.enabled is True
        assert len(listing.discount_config.tiers) == 2
        assert len(listing.discount_config.active_tiers) == 1
        assert listing.posted_on == dt.date(2024, 1, 15)
        assert listing.published is True

    def test_flat_metadata_window(self) -> None:
        listing = Listing.from_api(
            {
                "id": "7",
                "price": 99,
                "metadata": {
                    "availabilityStart": "2024-07-01",
                    "availabilityEnd": "2024-07-31",
                },
            }
        )
        assert listing.availability_windows == (
            AvailabilityWindow(start=dt.date(2024, 7, 1), end=dt.date(2024, 7, 31)),
        )
        assert listing.discount_config.enabled is False

    def test_no_windows_is_unrestricted(self) -> None:
        listing = Listing.from_api({"id": "7", "price": 99, "metadata": {}})
        assert listing.is_unrestricted

    def test_half_specified_flat_window_is_ignored(self) -> None:
        listing = Listing.from_api(
            {"id": "7", "price": 99, "metadata": {"availabilityStart": "2024-07-01"}}
        )
        assert listing.availability_windows == ()

    @pytest.mark.parametrize("price", ["abc", "", "12,50"])
    def test_non_numeric_price(self, price: Any) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Listing.from_api({"id": "7", "price": price})
        assert exc_info.value.errors()[0]["loc"] == ("price_per_night",)

    def test_to_decimal_rejects_text(self) -> None:
        with pytest.raises(ValueError, match="not a number"):
            to_decimal("abc")


class TestBooking:
    """Tests for the booking model and its status lifecycle."""

    def test_from_api(self, sample_booking_payload: dict[str, Any]) -> None:
        booking = Booking.from_api(sample_booking_payload)

        assert booking.booking_id == "987"
        assert booking.listing_id == "42"
        assert booking.date_range.nights == 5
        assert booking.status == BookingStatus.ACCEPTED
        assert booking.total_price == Decimal("675.25")

    def test_from_api_null_total(self, sample_booking_payload: dict[str, Any]) -> None:
        sample_booking_payload["totalPrice"] = None
        sample_booking_payload["status"] = "pending"
        booking = Booking.from_api(sample_booking_payload)
        assert booking.total_price is None
        assert booking.status == BookingStatus.PENDING

    def test_pending_can_be_accepted(self, booking_factory: Any) -> None:
        booking = booking_factory(
            dt.date(2024, 6, 10), dt.date(2024, 6, 15), status=BookingStatus.PENDING
        )
        accepted = booking.accept()

        assert accepted.status == BookingStatus.ACCEPTED
        assert accepted.date_range == booking.date_range
        assert booking.status == BookingStatus.PENDING

    def test_pending_can_be_declined(self, booking_factory: Any) -> None:
        booking = booking_factory(
            dt.date(2024, 6, 10), dt.date(2024, 6, 15), status=BookingStatus.PENDING
        )
        assert booking.decline().status == BookingStatus.DECLINED

    @pytest.mark.parametrize("status", [BookingStatus.ACCEPTED, BookingStatus.DECLINED])
    def test_terminal_states_cannot_move(self, booking_factory: Any, status: BookingStatus) -> None:
        booking = booking_factory(dt.date(2024, 6, 10), dt.date(2024, 6, 15), status=status)

        with pytest.raises(BookingError) as exc_info:
            booking.accept()
        assert exc_info.value.code == ErrorCode.INVALID_STATUS_TRANSITION

        with pytest.raises(BookingError):
            booking.decline()

    def test_booking_is_immutable(self, booking_factory: Any) -> None:
        booking = booking_factory(dt.date(2024, 6, 10), dt.date(2024, 6, 15))
        with pytest.raises(ValidationError):
            booking.total_price = Decimal("1")  # type: ignore[misc]

    def test_declined_does_not_block(self, booking_factory: Any) -> None:
        start, end = dt.date(2024, 6, 10), dt.date(2024, 6, 15)
        assert booking_factory(start, end, status=BookingStatus.PENDING).blocks_dates
        assert booking_factory(start, end, status=BookingStatus.ACCEPTED).blocks_dates
        assert not booking_factory(start, end, status=BookingStatus.DECLINED).blocks_dates


class TestErrorsAndResults:
    """Tests for rejection values, errors and price rounding."""

    def test_rejection_carries_message(self) -> None:
        rejection = BookingRejection.from_reason(RejectionReason.MISSING_DATES)
        assert rejection.message == "Please select both check-in and check-out dates"
        assert rejection.recovery

    def test_every_reason_has_message(self) -> None:
        for reason in RejectionReason:
            assert BookingRejection.from_reason(reason).message

    def test_booking_error_to_response(self) -> None:
        error = BookingError(ErrorCode.BOOKING_NOT_FOUND, details={"booking_id": "x"})
        response = error.to_response()

        assert response.success is False
        assert response.error_code == ErrorCode.BOOKING_NOT_FOUND
        assert response.details == {"booking_id": "x"}
        assert str(error) == "Booking not found"

    def test_for_display_rounds_half_up(self) -> None:
        result = PricingResult(
            nights=3,
            base_price=Decimal("100.005"),
            discount_percent=Decimal(0),
            discount_amount=Decimal("0.125"),
            total_price=Decimal("99.88"),
        ).for_display()

        assert result.base_price == Decimal("100.01")
        assert result.discount_amount == Decimal("0.13")
        assert str(result.total_price) == "99.88"
