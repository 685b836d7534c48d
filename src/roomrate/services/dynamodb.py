"""DynamoDB service wrapper for type-safe table operations.

Tables (names are prefixed with the configured table prefix):
- rooms:        HASH room_id
- reservations: HASH reservation_id, GSIs room_id-index and user_id-index
- room-nights:  HASH room_id, RANGE night; one item per booked night
- payments:     HASH payment_id, GSI reservation_id-index

The room-nights table is the storage-level double-booking guard. A
reservation and its nights are written in one transaction, each night
conditional on not existing yet, so two overlapping commits can never
both succeed.
"""

import datetime as dt
from decimal import Decimal
from typing import Any

import boto3
from boto3.dynamodb.conditions import Key
from boto3.dynamodb.types import TypeSerializer
from botocore.config import Config
from botocore.exceptions import ClientError

from roomrate.config import Settings, get_settings
from roomrate.models import Reservation, ReservationStatus, Room, RoomCategory
from roomrate.utils.logging import get_logger

logger = get_logger(__name__)

ROOMS_TABLE = "rooms"
RESERVATIONS_TABLE = "reservations"
ROOM_NIGHTS_TABLE = "room-nights"
PAYMENTS_TABLE = "payments"

# DynamoDB caps a transaction at 100 items: one reservation plus its nights
MAX_NIGHTS_PER_TRANSACTION = 99

TABLE_DEFINITIONS: dict[str, dict[str, Any]] = {
    ROOMS_TABLE: {
        "KeySchema": [{"AttributeName": "room_id", "KeyType": "HASH"}],
        "AttributeDefinitions": [{"AttributeName": "room_id", "AttributeType": "S"}],
    },
    RESERVATIONS_TABLE: {
        "KeySchema": [{"AttributeName": "reservation_id", "KeyType": "HASH"}],
        "AttributeDefinitions": [
            {"AttributeName": "reservation_id", "AttributeType": "S"},
            {"AttributeName": "room_id", "AttributeType": "S"},
            {"AttributeName": "user_id", "AttributeType": "S"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": "room_id-index",
                "KeySchema": [{"AttributeName": "room_id", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
            {
                "IndexName": "user_id-index",
                "KeySchema": [{"AttributeName": "user_id", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
    },
    ROOM_NIGHTS_TABLE: {
        "KeySchema": [
            {"AttributeName": "room_id", "KeyType": "HASH"},
            {"AttributeName": "night", "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "room_id", "AttributeType": "S"},
            {"AttributeName": "night", "AttributeType": "S"},
        ],
    },
    PAYMENTS_TABLE: {
        "KeySchema": [{"AttributeName": "payment_id", "KeyType": "HASH"}],
        "AttributeDefinitions": [
            {"AttributeName": "payment_id", "AttributeType": "S"},
            {"AttributeName": "reservation_id", "AttributeType": "S"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": "reservation_id-index",
                "KeySchema": [{"AttributeName": "reservation_id", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
    },
}

# Module-level singleton for connection reuse
_dynamodb_service_instance: "DynamoDBService | None" = None


def get_dynamodb_service() -> "DynamoDBService":
    """Get or create the singleton DynamoDB service instance.

    Avoids creating new boto3 clients on every request.
    """
    global _dynamodb_service_instance
    if _dynamodb_service_instance is None:
        _dynamodb_service_instance = DynamoDBService()
    return _dynamodb_service_instance


def reset_dynamodb_service() -> None:
    """Reset the singleton instance (for testing only).

    This allows tests to create a fresh DynamoDBService inside
    a mock_aws context.
    """
    global _dynamodb_service_instance
    _dynamodb_service_instance = None


class DynamoDBService:
    """Service for DynamoDB operations with environment-aware table names."""

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize DynamoDB service.

        Args:
            settings: Settings to use. Defaults to the cached environment settings.
        """
        settings = settings or get_settings()
        self.environment = settings.environment
        self.name_prefix = settings.dynamodb_table_prefix
        config = Config(
            region_name=settings.aws_region,
            retries={"max_attempts": settings.aws_max_attempts, "mode": "standard"},
        )
        self._dynamodb = boto3.resource("dynamodb", config=config)
        self._client = boto3.client("dynamodb", config=config)
        self._serializer = TypeSerializer()

    def _table_name(self, table: str) -> str:
        """Get full table name with prefix."""
        return f"{self.name_prefix}-{table}"

    def _get_table(self, table: str) -> Any:
        """Get DynamoDB table resource."""
        return self._dynamodb.Table(self._table_name(table))

    def _serialize_item(self, item: dict[str, Any]) -> dict[str, Any]:
        """Serialize a Python dict to DynamoDB attribute-value format."""
        return {k: self._serializer.serialize(v) for k, v in item.items() if v is not None}

    def create_tables(self) -> None:
        """Create all tables if missing (local development and tests)."""
        existing = set(self._client.list_tables().get("TableNames", []))
        for table, definition in TABLE_DEFINITIONS.items():
            name = self._table_name(table)
            if name in existing:
                continue
            self._client.create_table(
                TableName=name,
                BillingMode="PAY_PER_REQUEST",
                **definition,
            )
            logger.info("Created table", extra={"table": name})

    # Generic CRUD operations

    def get_item(
        self,
        table: str,
        key: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Get a single item by key.

        Args:
            table: Table name without prefix
            key: Primary key dict

        Returns:
            Item dict or None if not found
        """
        response = self._get_table(table).get_item(Key=key)
        item: dict[str, Any] | None = response.get("Item")
        return item

    def put_item(
        self,
        table: str,
        item: dict[str, Any],
        condition_expression: str | None = None,
    ) -> bool:
        """Put an item into the table.

        Args:
            table: Table name without prefix
            item: Item to store
            condition_expression: Optional condition for write

        Returns:
            True if successful, False if condition failed
        """
        try:
            kwargs: dict[str, Any] = {"Item": item}
            if condition_expression:
                kwargs["ConditionExpression"] = condition_expression

            self._get_table(table).put_item(**kwargs)
            return True
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return False
            raise

    def update_item(
        self,
        table: str,
        key: dict[str, Any],
        update_expression: str,
        expression_attribute_values: dict[str, Any],
        expression_attribute_names: dict[str, str] | None = None,
        condition_expression: str | None = None,
    ) -> dict[str, Any] | None:
        """Update an item with expressions.

        Args:
            table: Table name without prefix
            key: Primary key dict
            update_expression: DynamoDB update expression
            expression_attribute_values: Values for expression
            expression_attribute_names: Names for expression (for reserved words)
            condition_expression: Optional condition for update

        Returns:
            Updated attributes or None if condition failed
        """
        try:
            kwargs: dict[str, Any] = {
                "Key": key,
                "UpdateExpression": update_expression,
                "ExpressionAttributeValues": expression_attribute_values,
                "ReturnValues": "ALL_NEW",
            }
            if expression_attribute_names:
                kwargs["ExpressionAttributeNames"] = expression_attribute_names
            if condition_expression:
                kwargs["ConditionExpression"] = condition_expression

            response = self._get_table(table).update_item(**kwargs)
            attrs: dict[str, Any] | None = response.get("Attributes")
            return attrs
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return None
            raise

    def query(
        self,
        table: str,
        key_condition: Any,
        index_name: str | None = None,
        scan_index_forward: bool = True,
    ) -> list[dict[str, Any]]:
        """Query table or GSI, following pagination.

        Args:
            table: Table name without prefix
            key_condition: Boto3 Key condition
            index_name: GSI name (optional)
            scan_index_forward: Sort order (True=ascending)

        Returns:
            List of items
        """
        kwargs: dict[str, Any] = {
            "KeyConditionExpression": key_condition,
            "ScanIndexForward": scan_index_forward,
        }
        if index_name:
            kwargs["IndexName"] = index_name

        items: list[dict[str, Any]] = []
        while True:
            response = self._get_table(table).query(**kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    def scan(self, table: str) -> list[dict[str, Any]]:
        """Scan a whole table, following pagination."""
        kwargs: dict[str, Any] = {}
        items: list[dict[str, Any]] = []
        while True:
            response = self._get_table(table).scan(**kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    def transact_write(
        self,
        items: list[dict[str, Any]],
    ) -> bool:
        """Execute transactional write for multiple items.

        Args:
            items: List of TransactWriteItem dicts

        Returns:
            True if successful, False if transaction failed
        """
        try:
            self._client.transact_write_items(TransactItems=items)
            return True
        except ClientError as e:
            if e.response["Error"]["Code"] == "TransactionCanceledException":
                return False
            raise

    # =========================================================================
    # Rooms
    # =========================================================================

    def get_room(self, room_id: str) -> Room | None:
        """Get a room by ID."""
        item = self.get_item(ROOMS_TABLE, {"room_id": room_id})
        return self._item_to_room(item) if item else None

    def list_rooms(self, active_only: bool = True) -> list[Room]:
        """List rooms.

        For a hotel-sized table a scan is acceptable.

        Args:
            active_only: Only return bookable rooms

        Returns:
            Rooms sorted by room_id
        """
        rooms = [self._item_to_room(item) for item in self.scan(ROOMS_TABLE)]
        if active_only:
            rooms = [r for r in rooms if r.is_active]
        return sorted(rooms, key=lambda r: r.room_id)

    def put_room(self, room: Room) -> bool:
        """Store a room snapshot (seeding and tests)."""
        return self.put_item(ROOMS_TABLE, self._room_to_item(room))

    # =========================================================================
    # Reservations
    # =========================================================================

    def get_reservation(self, reservation_id: str) -> Reservation | None:
        """Get a reservation by ID."""
        item = self.get_item(RESERVATIONS_TABLE, {"reservation_id": reservation_id})
        return self._item_to_reservation(item) if item else None

    def get_reservations_for_room(self, room_id: str) -> list[Reservation]:
        """All reservations of a room, any status."""
        items = self.query(
            RESERVATIONS_TABLE,
            Key("room_id").eq(room_id),
            index_name="room_id-index",
        )
        return [self._item_to_reservation(item) for item in items]

    def get_reservations_by_user(self, user_id: str) -> list[Reservation]:
        """All reservations of a guest, newest first."""
        items = self.query(
            RESERVATIONS_TABLE,
            Key("user_id").eq(user_id),
            index_name="user_id-index",
        )
        reservations = [self._item_to_reservation(item) for item in items]
        return sorted(reservations, key=lambda r: r.created_at, reverse=True)

    def create_reservation(self, reservation: Reservation) -> bool:
        """Atomically store a reservation and lock its nights.

        Args:
            reservation: Reservation to store

        Returns:
            True if stored, False if any night is already held
        """
        if reservation.nights > MAX_NIGHTS_PER_TRANSACTION:
            raise ValueError(
                f"Stays longer than {MAX_NIGHTS_PER_TRANSACTION} nights cannot be committed"
            )

        created = reservation.created_at.isoformat()
        transact_items: list[dict[str, Any]] = [
            {
                "Put": {
                    "TableName": self._table_name(RESERVATIONS_TABLE),
                    "Item": self._serialize_item(self._reservation_to_item(reservation)),
                    "ConditionExpression": "attribute_not_exists(reservation_id)",
                }
            }
        ]

        for night in reservation.date_range.dates():
            transact_items.append(
                {
                    "Put": {
                        "TableName": self._table_name(ROOM_NIGHTS_TABLE),
                        "Item": self._serialize_item(
                            {
                                "room_id": reservation.room_id,
                                "night": night.isoformat(),
                                "reservation_id": reservation.reservation_id,
                                "created_at": created,
                            }
                        ),
                        # Only succeed if no other reservation holds this night
                        "ConditionExpression": "attribute_not_exists(room_id)",
                    }
                }
            )

        return self.transact_write(transact_items)

    def cancel_reservation(
        self,
        reservation: Reservation,
        cancelled_at: dt.datetime,
    ) -> bool:
        """Atomically mark a reservation cancelled and release its nights.

        Args:
            reservation: Reservation to cancel
            cancelled_at: Cancellation timestamp

        Returns:
            True if cancelled, False if its status changed concurrently
        """
        now = cancelled_at.isoformat()
        transact_items: list[dict[str, Any]] = [
            {
                "Update": {
                    "TableName": self._table_name(RESERVATIONS_TABLE),
                    "Key": {"reservation_id": {"S": reservation.reservation_id}},
                    "UpdateExpression": "SET #s = :cancelled, cancelled_at = :now, updated_at = :now",
                    "ConditionExpression": "#s = :pending OR #s = :confirmed",
                    "ExpressionAttributeNames": {"#s": "status"},
                    "ExpressionAttributeValues": {
                        ":cancelled": {"S": ReservationStatus.CANCELLED.value},
                        ":pending": {"S": ReservationStatus.PENDING.value},
                        ":confirmed": {"S": ReservationStatus.CONFIRMED.value},
                        ":now": {"S": now},
                    },
                }
            }
        ]

        for night in reservation.date_range.dates():
            transact_items.append(
                {
                    "Delete": {
                        "TableName": self._table_name(ROOM_NIGHTS_TABLE),
                        "Key": {
                            "room_id": {"S": reservation.room_id},
                            "night": {"S": night.isoformat()},
                        },
                        # Never release a night held by another reservation
                        "ConditionExpression": "attribute_not_exists(room_id) OR reservation_id = :rid",
                        "ExpressionAttributeValues": {
                            ":rid": {"S": reservation.reservation_id},
                        },
                    }
                }
            )

        return self.transact_write(transact_items)

    def transition_reservation_status(
        self,
        reservation_id: str,
        from_status: ReservationStatus,
        to_status: ReservationStatus,
        now: dt.datetime,
    ) -> Reservation | None:
        """Conditionally move a reservation from one status to another.

        Returns:
            The updated reservation, or None if it was not in from_status
        """
        attrs = self.update_item(
            RESERVATIONS_TABLE,
            {"reservation_id": reservation_id},
            "SET #s = :to, updated_at = :now",
            {
                ":to": to_status.value,
                ":from": from_status.value,
                ":now": now.isoformat(),
            },
            expression_attribute_names={"#s": "status"},
            condition_expression="#s = :from",
        )
        return self._item_to_reservation(attrs) if attrs else None

    def get_booked_nights(self, room_id: str) -> dict[str, str]:
        """Map of booked night (ISO date) to reservation ID for a room."""
        items = self.query(ROOM_NIGHTS_TABLE, Key("room_id").eq(room_id))
        return {item["night"]: item["reservation_id"] for item in items}

    # =========================================================================
    # Item conversion
    # =========================================================================

    def _item_to_room(self, item: dict[str, Any]) -> Room:
        """Convert DynamoDB item to Room model."""
        # Handle is_active as string or boolean (DynamoDB may store as either)
        is_active_raw = item.get("is_active", True)
        if isinstance(is_active_raw, str):
            is_active = is_active_raw.lower() == "true"
        else:
            is_active = bool(is_active_raw)

        return Room(
            room_id=item["room_id"],
            hotel_id=item.get("hotel_id"),
            room_number=item.get("room_number"),
            name=item.get("name"),
            category=RoomCategory(item["category"]),
            base_price=Decimal(str(item["base_price"])),
            capacity=int(item["capacity"]),
            is_active=is_active,
        )

    def _room_to_item(self, room: Room) -> dict[str, Any]:
        item: dict[str, Any] = {
            "room_id": room.room_id,
            "hotel_id": room.hotel_id,
            "room_number": room.room_number,
            "name": room.name,
            "category": room.category.value,
            "base_price": Decimal(str(room.base_price)),
            "capacity": room.capacity,
            "is_active": room.is_active,
        }
        return {k: v for k, v in item.items() if v is not None}

    def _item_to_reservation(self, item: dict[str, Any]) -> Reservation:
        """Convert DynamoDB item to Reservation model."""

        def _ts(key: str) -> dt.datetime | None:
            value = item.get(key)
            return dt.datetime.fromisoformat(value) if value else None

        created_at = _ts("created_at")
        if created_at is None:
            raise ValueError(f"Reservation {item['reservation_id']} has no created_at")

        return Reservation(
            reservation_id=item["reservation_id"],
            room_id=item["room_id"],
            user_id=item["user_id"],
            check_in=dt.date.fromisoformat(item["check_in"]),
            check_out=dt.date.fromisoformat(item["check_out"]),
            status=ReservationStatus(item["status"]),
            guests=int(item["guests"]),
            total_amount=int(item["total_amount"]),
            guest_name=item.get("guest_name"),
            guest_email=item.get("guest_email"),
            guest_phone=item.get("guest_phone"),
            special_requests=item.get("special_requests"),
            created_at=created_at,
            updated_at=_ts("updated_at"),
            cancelled_at=_ts("cancelled_at"),
        )

    def _reservation_to_item(self, reservation: Reservation) -> dict[str, Any]:
        item: dict[str, Any] = {
            "reservation_id": reservation.reservation_id,
            "room_id": reservation.room_id,
            "user_id": reservation.user_id,
            "check_in": reservation.check_in.isoformat(),
            "check_out": reservation.check_out.isoformat(),
            "nights": reservation.nights,
            "status": reservation.status.value,
            "guests": reservation.guests,
            "total_amount": reservation.total_amount,
            "guest_name": reservation.guest_name,
            "guest_email": reservation.guest_email,
            "guest_phone": reservation.guest_phone,
            "special_requests": reservation.special_requests,
            "created_at": reservation.created_at.isoformat(),
            "updated_at": reservation.updated_at.isoformat() if reservation.updated_at else None,
            "cancelled_at": reservation.cancelled_at.isoformat() if reservation.cancelled_at else None,
        }
        return {k: v for k, v in item.items() if v is not None}
