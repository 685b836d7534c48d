"""Payment record model.

Only the record status is tracked here; charging and refunding money is the
payment processor's job.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .enums import PaymentStatus


class Payment(BaseModel):
    """A payment record for a reservation."""

    model_config = ConfigDict(strict=True)

    payment_id: str = Field(..., description="Unique payment ID")
    reservation_id: str = Field(..., description="Reference to Reservation")
    amount: int = Field(..., ge=0, description="Amount in currency units")
    status: PaymentStatus = Field(..., description="Payment status")
    created_at: datetime = Field(..., description="Creation timestamp")
    completed_at: datetime | None = Field(default=None, description="Completion timestamp")
    refunded_at: datetime | None = Field(default=None, description="Refund timestamp")
