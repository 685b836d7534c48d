"""Cancellation outcome models."""

import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field

from .enums import ReservationStatus

MARK_PAYMENT_REFUNDED = "mark_payment_refunded"


class RefundInstruction(BaseModel):
    """Instruction for the payment collaborator emitted on cancellation."""

    action: Literal["mark_payment_refunded"] = MARK_PAYMENT_REFUNDED
    reservation_id: str
    amount: int = Field(..., ge=0, description="Amount to refund in currency units")


class CancellationResult(BaseModel):
    """Result of a successful cancellation."""

    reservation_id: str
    success: bool = True
    status: ReservationStatus = ReservationStatus.CANCELLED
    cancelled_at: dt.datetime
    hours_until_check_in: float
    refund: RefundInstruction
