"""Cancellation policy service.

Implements the pre-check-in cutoff:
- A pending or confirmed reservation may be cancelled while the current time
  is more than CUTOFF_HOURS (24) before check-in.
- Check-in is taken as 00:00 UTC on the check-in date.
- Inside the cutoff the request is refused and the reservation is unchanged.

A successful cancellation emits a refund instruction for the payment record.
"""

import datetime as dt

from roomrate.models import (
    CancellationResult,
    CancellationWindowClosedError,
    RefundInstruction,
    Reservation,
    ReservationNotCancellableError,
    ReservationStatus,
)
from roomrate.utils.logging import get_logger

logger = get_logger(__name__)


def check_in_moment(check_in: dt.date) -> dt.datetime:
    """Start of the check-in day in UTC."""
    return dt.datetime.combine(check_in, dt.time.min, tzinfo=dt.UTC)


def as_utc(moment: dt.datetime) -> dt.datetime:
    """Treat naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=dt.UTC)
    return moment.astimezone(dt.UTC)


class CancellationPolicyService:
    """Service deciding whether and how a reservation may be cancelled."""

    CUTOFF_HOURS = 24

    def __init__(self, cutoff_hours: int | None = None) -> None:
        self.cutoff = dt.timedelta(
            hours=self.CUTOFF_HOURS if cutoff_hours is None else cutoff_hours
        )

    def hours_until_check_in(self, check_in: dt.date, now: dt.datetime) -> float:
        """Hours from now until check-in (negative once check-in has passed)."""
        return (check_in_moment(check_in) - as_utc(now)).total_seconds() / 3600

    def is_cancellable(self, reservation: Reservation, now: dt.datetime) -> bool:
        """Whether cancelling now would be allowed."""
        if not reservation.is_blocking:
            return False
        return check_in_moment(reservation.check_in) - as_utc(now) > self.cutoff

    def cancel(self, reservation: Reservation, now: dt.datetime) -> CancellationResult:
        """Decide a cancellation request.

        Does not persist anything; the caller stores the status change and
        forwards the refund instruction.

        Args:
            reservation: Reservation to cancel
            now: Time of the request

        Returns:
            CancellationResult carrying the refund instruction

        Raises:
            ReservationNotCancellableError: Reservation is already cancelled
            CancellationWindowClosedError: Request falls inside the cutoff
        """
        if not reservation.is_blocking:
            raise ReservationNotCancellableError(
                details={
                    "reservation_id": reservation.reservation_id,
                    "status": reservation.status.value,
                }
            )

        hours_left = self.hours_until_check_in(reservation.check_in, now)
        if not self.is_cancellable(reservation, now):
            logger.warning(
                "Cancellation refused inside cutoff",
                extra={
                    "reservation_id": reservation.reservation_id,
                    "hours_until_check_in": round(hours_left, 2),
                },
            )
            raise CancellationWindowClosedError(
                details={
                    "reservation_id": reservation.reservation_id,
                    "hours_until_check_in": f"{hours_left:.2f}",
                    "cutoff_hours": str(int(self.cutoff.total_seconds() // 3600)),
                }
            )

        return CancellationResult(
            reservation_id=reservation.reservation_id,
            status=ReservationStatus.CANCELLED,
            cancelled_at=as_utc(now),
            hours_until_check_in=hours_left,
            refund=RefundInstruction(
                reservation_id=reservation.reservation_id,
                amount=reservation.total_amount,
            ),
        )

    def get_policy_description(self) -> str:
        """Human-readable description of the cancellation policy."""
        hours = int(self.cutoff.total_seconds() // 3600)
        return (
            "Cancellation Policy:\n"
            f"• More than {hours} hours before check-in: free cancellation, full refund\n"
            f"• Within {hours} hours of check-in: cancellation not allowed"
        )
