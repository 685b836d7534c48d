"""Payment record service.

Tracks the payment record attached to each reservation. Charging and
refunding money happens at the external payment processor; this service
only records the outcome:
- a PENDING record is created when a booking is committed
- the record becomes COMPLETED when the processor reports success
- the record becomes REFUNDED when a cancellation emits a refund instruction
"""

import datetime as dt
import uuid
from typing import Any

from boto3.dynamodb.conditions import Key

from roomrate.models import Payment, PaymentStatus, RefundInstruction, Reservation
from roomrate.utils.logging import get_logger, log_booking_operation

from .dynamodb import PAYMENTS_TABLE, DynamoDBService

logger = get_logger(__name__)


class PaymentService:
    """Service for managing payment records."""

    def __init__(self, db: DynamoDBService) -> None:
        """Initialize payment service.

        Args:
            db: DynamoDB service instance
        """
        self.db = db

    def _generate_payment_id(self, prefix: str = "TXN") -> str:
        """Generate a unique payment ID like TXN-ABC123DEF456."""
        return f"{prefix}-{uuid.uuid4().hex[:12].upper()}"

    def create_pending(self, reservation: Reservation, now: dt.datetime) -> Payment:
        """Create the pending payment record for a new reservation.

        Args:
            reservation: Newly committed reservation
            now: Creation time

        Returns:
            Created Payment record with PENDING status
        """
        payment = Payment(
            payment_id=self._generate_payment_id(),
            reservation_id=reservation.reservation_id,
            amount=reservation.total_amount,
            status=PaymentStatus.PENDING,
            created_at=now,
        )
        self.db.put_item(PAYMENTS_TABLE, self._payment_to_item(payment))

        log_booking_operation(
            logger,
            "create_payment_record",
            reservation_id=reservation.reservation_id,
            amount=payment.amount,
            status=payment.status.value,
            payment_id=payment.payment_id,
        )
        return payment

    def get_payment(self, payment_id: str) -> Payment | None:
        """Get a payment by ID."""
        item = self.db.get_item(PAYMENTS_TABLE, {"payment_id": payment_id})
        return self._item_to_payment(item) if item else None

    def get_payments_for_reservation(self, reservation_id: str) -> list[Payment]:
        """Get all payment records for a reservation."""
        items = self.db.query(
            PAYMENTS_TABLE,
            Key("reservation_id").eq(reservation_id),
            index_name="reservation_id-index",
        )
        return [self._item_to_payment(item) for item in items]

    def mark_completed(self, reservation_id: str, now: dt.datetime) -> list[Payment]:
        """Mark pending payment records of a reservation as completed.

        Returns:
            The updated payment records
        """
        updated: list[Payment] = []
        for payment in self.get_payments_for_reservation(reservation_id):
            if payment.status != PaymentStatus.PENDING:
                continue
            attrs = self.db.update_item(
                PAYMENTS_TABLE,
                {"payment_id": payment.payment_id},
                "SET #status = :status, completed_at = :now",
                {
                    ":status": PaymentStatus.COMPLETED.value,
                    ":pending": PaymentStatus.PENDING.value,
                    ":now": now.isoformat(),
                },
                {"#status": "status"},  # status is a reserved word
                condition_expression="#status = :pending",
            )
            if attrs:
                updated.append(self._item_to_payment(attrs))

        log_booking_operation(
            logger,
            "complete_payment_record",
            reservation_id=reservation_id,
            status=PaymentStatus.COMPLETED.value,
            updated=len(updated),
        )
        return updated

    def mark_refunded(self, instruction: RefundInstruction, now: dt.datetime) -> list[Payment]:
        """Apply a refund instruction emitted by a cancellation.

        Every non-refunded record of the reservation is marked refunded.
        A reservation without payment records is logged and left alone.

        Returns:
            The updated payment records
        """
        payments = self.get_payments_for_reservation(instruction.reservation_id)
        if not payments:
            logger.warning(
                "No payment record to refund",
                extra={"reservation_id": instruction.reservation_id},
            )
            return []

        updated: list[Payment] = []
        for payment in payments:
            if payment.status == PaymentStatus.REFUNDED:
                continue
            attrs = self.db.update_item(
                PAYMENTS_TABLE,
                {"payment_id": payment.payment_id},
                "SET #status = :status, refunded_at = :now",
                {
                    ":status": PaymentStatus.REFUNDED.value,
                    ":now": now.isoformat(),
                },
                {"#status": "status"},
            )
            if attrs:
                updated.append(self._item_to_payment(attrs))

        log_booking_operation(
            logger,
            instruction.action,
            reservation_id=instruction.reservation_id,
            amount=instruction.amount,
            status=PaymentStatus.REFUNDED.value,
            updated=len(updated),
        )
        return updated

    # Conversion helpers

    def _payment_to_item(self, payment: Payment) -> dict[str, Any]:
        """Convert Payment model to DynamoDB item."""
        item: dict[str, Any] = {
            "payment_id": payment.payment_id,
            "reservation_id": payment.reservation_id,
            "amount": payment.amount,
            "status": payment.status.value,
            "created_at": payment.created_at.isoformat(),
        }
        if payment.completed_at:
            item["completed_at"] = payment.completed_at.isoformat()
        if payment.refunded_at:
            item["refunded_at"] = payment.refunded_at.isoformat()
        return item

    def _item_to_payment(self, item: dict[str, Any]) -> Payment:
        """Convert DynamoDB item to Payment model."""
        return Payment(
            payment_id=item["payment_id"],
            reservation_id=item["reservation_id"],
            amount=int(item["amount"]),
            status=PaymentStatus(item["status"]),
            created_at=dt.datetime.fromisoformat(item["created_at"]),
            completed_at=(
                dt.datetime.fromisoformat(item["completed_at"])
                if item.get("completed_at")
                else None
            ),
            refunded_at=(
                dt.datetime.fromisoformat(item["refunded_at"])
                if item.get("refunded_at")
                else None
            ),
        )
