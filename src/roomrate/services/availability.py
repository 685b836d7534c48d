"""Availability service for reservation conflict checks.

Stays are half-open ranges [check_in, check_out). Two stays conflict when
they share a night, so a stay ending on the day another begins does not
conflict. Only pending and confirmed reservations hold their nights.
"""

import datetime as dt
from collections.abc import Iterable, Sequence

from roomrate.models import (
    AlternativeDateRange,
    AvailabilityResult,
    DateRange,
    Reservation,
    Room,
)
from roomrate.utils.logging import get_logger

logger = get_logger(__name__)


def ranges_overlap(a: DateRange, b: DateRange) -> bool:
    """Whether two stays share at least one night."""
    return a.check_in < b.check_out and b.check_in < a.check_out


def conflicting_reservations(
    room_id: str,
    stay: DateRange,
    reservations: Iterable[Reservation],
) -> list[Reservation]:
    """Blocking reservations of a room that overlap the stay."""
    return [
        r
        for r in reservations
        if r.room_id == room_id and r.is_blocking and ranges_overlap(stay, r.date_range)
    ]


class AvailabilityService:
    """Service for availability checks against existing reservations.

    Holds no state; reservations are passed in on every call.
    """

    def check_room(
        self,
        room_id: str,
        stay: DateRange,
        reservations: Iterable[Reservation],
    ) -> AvailabilityResult:
        """Check whether a room is free for a stay.

        Args:
            room_id: Room to check
            stay: Requested stay
            reservations: Existing reservations (other rooms and cancelled ones are ignored)

        Returns:
            AvailabilityResult with conflict count
        """
        conflicts = conflicting_reservations(room_id, stay, reservations)
        if conflicts:
            logger.debug(
                "Room has conflicting reservations",
                extra={"room_id": room_id, "conflicts": len(conflicts)},
            )
        return AvailabilityResult(
            room_id=room_id,
            available=not conflicts,
            conflicts=len(conflicts),
            conflicting_reservation_ids=[r.reservation_id for r in conflicts],
        )

    def filter_available(
        self,
        rooms: Iterable[Room],
        stay: DateRange,
        reservations: Sequence[Reservation],
    ) -> list[Room]:
        """Rooms with no conflicting reservation for the stay."""
        return [
            room
            for room in rooms
            if not conflicting_reservations(room.room_id, stay, reservations)
        ]

    def suggest_alternative_dates(
        self,
        room_id: str,
        stay: DateRange,
        reservations: Sequence[Reservation],
        today: dt.date,
        search_window_days: int = 14,
        max_suggestions: int = 3,
    ) -> list[AlternativeDateRange]:
        """Find free windows of the same length near the requested stay.

        Tries starts one day earlier, one day later, two days earlier and so
        on, never starting before today.

        Args:
            room_id: Room to search
            stay: Originally requested stay
            reservations: Existing reservations for the room
            today: First allowed check-in date
            search_window_days: How many days before/after to search
            max_suggestions: Maximum number of alternatives to return

        Returns:
            Alternatives sorted by distance from the requested check-in
        """
        blocking = [r for r in reservations if r.room_id == room_id and r.is_blocking]
        suggestions: list[AlternativeDateRange] = []

        for offset in range(1, search_window_days + 1):
            for shift, direction in ((-offset, "earlier"), (offset, "later")):
                if len(suggestions) >= max_suggestions:
                    break
                candidate = stay.shifted(shift)
                if candidate.check_in < today:
                    continue
                if conflicting_reservations(room_id, candidate, blocking):
                    continue
                suggestions.append(
                    AlternativeDateRange(
                        check_in=candidate.check_in,
                        check_out=candidate.check_out,
                        nights=candidate.nights,
                        offset_days=shift,
                        direction=direction,
                    )
                )

        suggestions.sort(key=lambda s: abs(s.offset_days))
        return suggestions[:max_suggestions]
