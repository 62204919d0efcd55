"""Pytest configuration and fixtures for staybook tests.

Provides:
- DynamoDB mocking with moto for the booking ledger
- Sample listings and bookings shared by the unit tests
"""

import datetime as dt
import os
from decimal import Decimal
from typing import Any, Generator

import boto3
import pytest
from moto import mock_aws

from staybook.models import (
    AvailabilityWindow,
    Booking,
    BookingStatus,
    DateRange,
    DiscountConfig,
    DiscountTier,
    Listing,
)

# === Environment Setup ===

os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
os.environ.setdefault("DYNAMODB_TABLE_PREFIX", "test-staybook")

if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

TODAY = dt.date(2024, 6, 1)
LISTING_ID = "listing-42"


# === DynamoDB Fixtures ===


@pytest.fixture(autouse=True)
def reset_dynamodb_singleton() -> Generator[None, None, None]:
    """Give every test a fresh DynamoDB service inside its own mock."""
    from staybook.services.dynamodb import reset_dynamodb_service

    reset_dynamodb_service()
    yield
    reset_dynamodb_service()


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "eu-west-1"


@pytest.fixture
def dynamodb_client(aws_credentials: None) -> Generator[Any, None, None]:
    """Create a mocked DynamoDB client."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name="eu-west-1")
        yield client


@pytest.fixture
def create_tables(dynamodb_client: Any) -> None:
    """Create the bookings table with its booking_id index."""
    dynamodb_client.create_table(
        TableName="test-staybook-bookings",
        KeySchema=[
            {"AttributeName": "listing_id", "KeyType": "HASH"},
            {"AttributeName": "booking_id", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "listing_id", "AttributeType": "S"},
            {"AttributeName": "booking_id", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": "booking_id-index",
                "KeySchema": [{"AttributeName": "booking_id", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        BillingMode="PAY_PER_REQUEST",
    )


# === Sample Data Fixtures ===


def make_booking(
    start: dt.date,
    end: dt.date,
    status: BookingStatus = BookingStatus.ACCEPTED,
    listing_id: str = LISTING_ID,
    booking_id: str = "booking-1",
    total_price: Decimal | None = None,
) -> Booking:
    """Build a booking for the sample listing."""
    return Booking(
        booking_id=booking_id,
        listing_id=listing_id,
        owner="guest@example.com",
        date_range=DateRange(start=start, end=end),
        status=status,
        total_price=total_price,
    )


@pytest.fixture
def today() -> dt.date:
    return TODAY


@pytest.fixture
def standard_tiers() -> tuple[DiscountTier, ...]:
    """Weekly and fortnightly discount tiers."""
    return (
        DiscountTier(min_nights=3, max_nights=6, discount_percent=5),
        DiscountTier(min_nights=7, max_nights=13, discount_percent=10),
        DiscountTier(min_nights=14, max_nights=None, discount_percent=15),
    )


@pytest.fixture
def unrestricted_listing() -> Listing:
    """Listing with no availability windows and no discounts."""
    return Listing(listing_id=LISTING_ID, owner="host@example.com", price_per_night=150)


@pytest.fixture
def summer_listing(standard_tiers: tuple[DiscountTier, ...]) -> Listing:
    """Listing open for June-August 2024 with discounts switched on."""
    return Listing(
        listing_id=LISTING_ID,
        owner="host@example.com",
        price_per_night=Decimal("150"),
        availability_windows=(
            AvailabilityWindow(start=dt.date(2024, 6, 1), end=dt.date(2024, 8, 31)),
        ),
        discount_config=DiscountConfig(enabled=True, tiers=standard_tiers),
    )


@pytest.fixture
def existing_accepted() -> Booking:
    """Accepted stay 10-15 June 2024."""
    return make_booking(dt.date(2024, 6, 10), dt.date(2024, 6, 15))


@pytest.fixture
def sample_listing_payload() -> dict[str, Any]:
    """Listing JSON as returned by the listings API."""
    return {
        "id": 42,
        "title": "Beach cottage",
        "owner": "host@example.com",
        "price": 120.5,
        "postedOn": "2024-01-15T09:30:00.000Z",
        "published": True,
        "availability": [
            {"start": "2024-06-01", "end": "2024-06-30"},
            {"start": "2024-08-01", "end": "2024-08-31"},
        ],
        "metadata": {
            "discountsEnabled": True,
            "customDiscounts": [
                {"minNights": 7, "maxNights": None, "discount": 10},
                {"minNights": 0, "maxNights": 3, "discount": 50},
            ],
        },
    }


@pytest.fixture
def sample_booking_payload() -> dict[str, Any]:
    """Booking JSON as returned by the bookings API."""
    return {
        "id": 987,
        "owner": "guest@example.com",
        "listingId": "42",
        "dateRange": {"start": "2024-06-10", "end": "2024-06-15"},
        "totalPrice": 675.25,
        "status": "accepted",
    }


@pytest.fixture
def booking_factory() -> Any:
    """Factory for bookings on the sample listing."""
    return make_booking
