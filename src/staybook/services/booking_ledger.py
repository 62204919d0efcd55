"""DynamoDB-backed booking ledger with per-listing serialized commits.

Validation reads a snapshot of a listing's bookings and decides on it;
two requests racing for overlapping dates could both pass against the
same snapshot. Each listing partition therefore carries a ledger item
with a version number, and a booking is only written in the same
transaction that moves the version from the value the snapshot saw.
The loser of a race re-reads, re-validates, and so sees the winner's
booking.

Table layout (``<prefix>-bookings``):
    listing_id (HASH), booking_id (RANGE)
    GSI booking_id-index on booking_id
    the ledger item uses booking_id = "#LEDGER" and holds ``version``
"""

import datetime as dt
import os
import uuid
from decimal import Decimal
from typing import Any

from boto3.dynamodb.conditions import Key
from boto3.dynamodb.types import TypeSerializer
from pydantic import BaseModel, ConfigDict

from staybook.models import (
    Booking,
    BookingError,
    BookingRejection,
    BookingStatus,
    CandidateRange,
    DateRange,
    ErrorCode,
    Listing,
    round_currency,
)
from staybook.utils.logging import get_logger, log_booking_operation

from .dynamodb import DynamoDBService, get_dynamodb_service
from .validator import BookingRequestValidator

logger = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


class LedgerSnapshot(BaseModel):
    """A listing's bookings as of one ledger version."""

    model_config = ConfigDict(frozen=True)

    listing_id: str
    bookings: tuple[Booking, ...] = ()
    version: int = 0


def _generate_booking_id() -> str:
    year = dt.datetime.now(dt.UTC).year
    unique_part = uuid.uuid4().hex[:8].upper()
    return f"BKG-{year}-{unique_part}"


class BookingLedger:
    """Stores bookings and serializes booking creation per listing."""

    TABLE = "bookings"
    BOOKING_ID_INDEX = "booking_id-index"
    LEDGER_KEY = "#LEDGER"

    def __init__(
        self,
        db: DynamoDBService | None = None,
        validator: BookingRequestValidator | None = None,
        max_attempts: int | None = None,
    ) -> None:
        """Initialize the ledger.

        Args:
            db: DynamoDB service; the shared instance by default
            validator: Booking validator; a default one if omitted
            max_attempts: Commit attempts before giving up on a busy
                listing. Defaults to BOOKING_COMMIT_MAX_ATTEMPTS or 3.
        """
        self.db = db or get_dynamodb_service()
        self.validator = validator or BookingRequestValidator()
        if max_attempts is None:
            max_attempts = int(os.getenv("BOOKING_COMMIT_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS))
        self.max_attempts = max(1, max_attempts)
        self._serializer = TypeSerializer()

    # Reads

    def load_snapshot(self, listing_id: str) -> LedgerSnapshot:
        """Read a listing's bookings and ledger version consistently."""
        items = self.db.query(
            self.TABLE,
            Key("listing_id").eq(listing_id),
            consistent_read=True,
        )

        version = 0
        bookings = []
        for item in items:
            if item["booking_id"] == self.LEDGER_KEY:
                version = int(item.get("version", 0))
            else:
                bookings.append(self._item_to_booking(item))

        bookings.sort(key=lambda b: (b.date_range.start, b.booking_id))
        return LedgerSnapshot(listing_id=listing_id, bookings=tuple(bookings), version=version)

    def list_bookings(self, listing_id: str) -> list[Booking]:
        return list(self.load_snapshot(listing_id).bookings)

    def get_booking(self, booking_id: str, listing_id: str | None = None) -> Booking | None:
        """Look up a booking.

        With listing_id this is a strongly consistent read of the base
        table. Without it the lookup goes through booking_id-index, which
        DynamoDB updates asynchronously: a booking created moments ago may
        not be visible there yet.
        """
        if listing_id is not None:
            item = self.db.get_item(
                self.TABLE, {"listing_id": listing_id, "booking_id": booking_id}
            )
            if item is None or booking_id == self.LEDGER_KEY:
                return None
            return self._item_to_booking(item)

        items = self.db.query(
            self.TABLE,
            Key("booking_id").eq(booking_id),
            index_name=self.BOOKING_ID_INDEX,
        )
        items = [i for i in items if i["booking_id"] != self.LEDGER_KEY]
        if not items:
            return None
        return self._item_to_booking(items[0])

    # Writes

    def commit(self, booking: Booking, expected_version: int) -> bool:
        """Write a new booking if the listing is still at expected_version.

        Returns:
            True if written, False if another commit got there first
        """
        table_name = self.db.table_name(self.TABLE)
        item = self._booking_to_item(booking)
        item["created_at"] = dt.datetime.now(dt.UTC).isoformat()

        transact_items = [
            {
                "Put": {
                    "TableName": table_name,
                    "Item": self._serialize(item),
                    "ConditionExpression": "attribute_not_exists(booking_id)",
                }
            },
            self._bump_version(booking.listing_id, expected_version),
        ]
        return self.db.transact_write(transact_items)

    def request_booking(
        self,
        listing: Listing,
        candidate: CandidateRange,
        requester: str | None,
        today: dt.date,
    ) -> Booking | BookingRejection:
        """Validate a booking request and store it as pending.

        Args:
            listing: Listing snapshot (windows, price, discounts)
            candidate: Guest-proposed dates
            requester: Guest identity stored as the booking owner
            today: Guest's current calendar day

        Returns:
            The stored pending Booking, or the BookingRejection

        Raises:
            BookingError: CONCURRENT_MODIFICATION if every attempt lost
                a race with another writer on the same listing
        """
        for attempt in range(1, self.max_attempts + 1):
            snapshot = self.load_snapshot(listing.listing_id)
            outcome = self.validator.validate(candidate, today, listing, snapshot.bookings)

            if isinstance(outcome, BookingRejection):
                log_booking_operation(
                    logger,
                    "request_booking",
                    listing_id=listing.listing_id,
                    status="rejected",
                    reason=outcome.reason.value,
                )
                return outcome

            booking = Booking(
                booking_id=_generate_booking_id(),
                listing_id=listing.listing_id,
                owner=requester,
                date_range=candidate.to_date_range(),
                status=BookingStatus.PENDING,
                total_price=round_currency(outcome.total_price),
            )

            if self.commit(booking, snapshot.version):
                log_booking_operation(
                    logger,
                    "request_booking",
                    booking_id=booking.booking_id,
                    listing_id=listing.listing_id,
                    status=booking.status.value,
                    nights=outcome.nights,
                    total_price=str(booking.total_price),
                )
                return booking

            logger.warning(
                "Ledger version moved during booking commit, retrying",
                extra={
                    "listing_id": listing.listing_id,
                    "attempt": attempt,
                    "expected_version": snapshot.version,
                },
            )

        log_booking_operation(
            logger,
            "request_booking",
            listing_id=listing.listing_id,
            error="commit attempts exhausted",
            attempts=self.max_attempts,
        )
        raise BookingError(
            ErrorCode.CONCURRENT_MODIFICATION,
            details={"listing_id": listing.listing_id, "attempts": str(self.max_attempts)},
        )

    def accept_booking(self, booking_id: str, listing_id: str | None = None) -> Booking:
        """Host accepts a pending booking.

        Pass listing_id to read the booking consistently; see get_booking.
        """
        return self._transition(booking_id, BookingStatus.ACCEPTED, listing_id)

    def decline_booking(self, booking_id: str, listing_id: str | None = None) -> Booking:
        """Host declines a pending booking, releasing its dates."""
        return self._transition(booking_id, BookingStatus.DECLINED, listing_id)

    def _transition(
        self,
        booking_id: str,
        target: BookingStatus,
        listing_id: str | None = None,
    ) -> Booking:
        booking = self.get_booking(booking_id, listing_id)
        if booking is None:
            raise BookingError(ErrorCode.BOOKING_NOT_FOUND, details={"booking_id": booking_id})

        try:
            updated = booking.accept() if target == BookingStatus.ACCEPTED else booking.decline()
        except BookingError as e:
            log_booking_operation(
                logger,
                f"{target.value}_booking",
                booking_id=booking_id,
                listing_id=booking.listing_id,
                status=booking.status.value,
                error=e.message,
            )
            raise

        table_name = self.db.table_name(self.TABLE)
        transact_items = [
            {
                "Update": {
                    "TableName": table_name,
                    "Key": self._serialize(
                        {"listing_id": booking.listing_id, "booking_id": booking_id}
                    ),
                    "UpdateExpression": "SET #s = :target",
                    "ConditionExpression": "#s = :pending",
                    "ExpressionAttributeNames": {"#s": "status"},
                    "ExpressionAttributeValues": {
                        ":target": {"S": target.value},
                        ":pending": {"S": BookingStatus.PENDING.value},
                    },
                }
            },
            {
                "Update": {
                    "TableName": table_name,
                    "Key": self._ledger_key(booking.listing_id),
                    "UpdateExpression": "ADD #v :one",
                    "ExpressionAttributeNames": {"#v": "version"},
                    "ExpressionAttributeValues": {":one": {"N": "1"}},
                }
            },
        ]

        if not self.db.transact_write(transact_items):
            # Someone else moved it out of pending first
            current = self.get_booking(booking_id, booking.listing_id)
            current_status = current.status.value if current else "missing"
            log_booking_operation(
                logger,
                f"{target.value}_booking",
                booking_id=booking_id,
                listing_id=booking.listing_id,
                status=current_status,
                error="booking is no longer pending",
            )
            raise BookingError(
                ErrorCode.INVALID_STATUS_TRANSITION,
                details={
                    "booking_id": booking_id,
                    "current_status": current_status,
                    "requested_status": target.value,
                },
            )

        log_booking_operation(
            logger,
            f"{target.value}_booking",
            booking_id=booking_id,
            listing_id=booking.listing_id,
            status=target.value,
        )
        return updated

    # Helpers

    def _ledger_key(self, listing_id: str) -> dict[str, Any]:
        return self._serialize({"listing_id": listing_id, "booking_id": self.LEDGER_KEY})

    def _bump_version(self, listing_id: str, expected_version: int) -> dict[str, Any]:
        """Ledger update that only succeeds at expected_version."""
        update: dict[str, Any] = {
            "TableName": self.db.table_name(self.TABLE),
            "Key": self._ledger_key(listing_id),
            "UpdateExpression": "SET #v = :next",
            "ExpressionAttributeNames": {"#v": "version"},
            "ExpressionAttributeValues": {":next": {"N": str(expected_version + 1)}},
        }
        if expected_version == 0:
            update["ConditionExpression"] = "attribute_not_exists(#v)"
        else:
            update["ConditionExpression"] = "#v = :expected"
            update["ExpressionAttributeValues"][":expected"] = {"N": str(expected_version)}
        return {"Update": update}

    def _serialize(self, item: dict[str, Any]) -> dict[str, Any]:
        return {k: self._serializer.serialize(v) for k, v in item.items() if v is not None}

    def _booking_to_item(self, booking: Booking) -> dict[str, Any]:
        return {
            "listing_id": booking.listing_id,
            "booking_id": booking.booking_id,
            "owner": booking.owner,
            "check_in": booking.date_range.start.isoformat(),
            "check_out": booking.date_range.end.isoformat(),
            "status": booking.status.value,
            "total_price": booking.total_price,
        }

    def _item_to_booking(self, item: dict[str, Any]) -> Booking:
        total = item.get("total_price")
        return Booking(
            booking_id=item["booking_id"],
            listing_id=item["listing_id"],
            owner=item.get("owner"),
            date_range=DateRange(
                start=dt.date.fromisoformat(item["check_in"]),
                end=dt.date.fromisoformat(item["check_out"]),
            ),
            status=BookingStatus(item["status"]),
            total_price=Decimal(total) if total is not None else None,
        )
