"""Pricing service for nightly rate calculation.

Prices are computed night by night. Each night starts at the room's base
price, is multiplied by every matching modifier of the pricing policy in
table order, and is then rounded half-up to a whole currency unit. Taxes
and the grand total are rounded afterwards, in that order. Changing the
rounding order changes totals, so it is fixed here.
"""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

from roomrate.models import (
    DateRange,
    InvalidPriceError,
    NightlyRate,
    PriceBreakdown,
    PricingPolicy,
    Room,
    RoomCategory,
)
from roomrate.utils.logging import get_logger

logger = get_logger(__name__)

_WHOLE_UNIT = Decimal("1")


def round_half_up(value: Decimal) -> int:
    """Round to the nearest whole unit, halves away from zero."""
    return int(value.quantize(_WHOLE_UNIT, rounding=ROUND_HALF_UP))


def load_pricing_policy(path: str | Path) -> PricingPolicy:
    """Load a pricing policy from a JSON file.

    Args:
        path: File containing a serialized PricingPolicy

    Returns:
        Parsed PricingPolicy
    """
    policy = PricingPolicy.model_validate_json(Path(path).read_text(encoding="utf-8"))
    logger.info(
        "Loaded pricing policy",
        extra={"path": str(path), "modifier_count": len(policy.modifiers)},
    )
    return policy


def calculate_price(
    base_price: Decimal,
    category: RoomCategory,
    check_in: dt.date,
    check_out: dt.date,
    policy: PricingPolicy | None = None,
) -> PriceBreakdown:
    """Price a stay.

    Args:
        base_price: Nightly base price (must be positive)
        category: Room category, used by category modifiers
        check_in: First night
        check_out: Departure date (exclusive)
        policy: Pricing policy; the default table when omitted

    Returns:
        PriceBreakdown with one entry per night

    Raises:
        InvalidRangeError: check_out is not after check_in
        InvalidPriceError: base_price is zero or negative
    """
    stay = DateRange(check_in=check_in, check_out=check_out)
    base = Decimal(base_price)
    if base <= 0:
        raise InvalidPriceError(details={"base_price": str(base_price)})

    policy = policy or PricingPolicy.default()

    nightly: list[NightlyRate] = []
    subtotal = 0
    for night in stay.dates():
        night_price = base
        factors: list[str] = []
        for modifier in policy.modifiers:
            if modifier.applies(night, category):
                night_price *= modifier.multiplier
                factors.append(modifier.label)

        final_price = round_half_up(night_price)
        subtotal += final_price
        nightly.append(
            NightlyRate(
                date=night,
                base_price=base,
                final_price=final_price,
                factors=factors,
            )
        )

    taxes = round_half_up(subtotal * policy.tax_rate)
    fees = policy.service_fee
    grand_total = round_half_up(Decimal(subtotal + taxes + fees))

    return PriceBreakdown(
        base_price=base,
        nights=stay.nights,
        breakdown=nightly,
        subtotal=subtotal,
        taxes=taxes,
        fees=fees,
        grand_total=grand_total,
        price_per_night=round_half_up(Decimal(subtotal) / stay.nights),
    )


class PricingService:
    """Service for pricing rooms with a fixed policy."""

    def __init__(self, policy: PricingPolicy | None = None) -> None:
        """Initialize pricing service.

        Args:
            policy: Pricing policy; the default table when omitted
        """
        self.policy = policy or PricingPolicy.default()

    def calculate_price(
        self,
        room: Room,
        check_in: dt.date,
        check_out: dt.date,
    ) -> PriceBreakdown:
        """Calculate the price of a stay in a room.

        Args:
            room: Room snapshot
            check_in: Check-in date
            check_out: Check-out date

        Returns:
            PriceBreakdown with per-night entries and totals
        """
        return calculate_price(
            room.base_price,
            room.category,
            check_in,
            check_out,
            self.policy,
        )

    def quote_range(self, room: Room, stay: DateRange) -> PriceBreakdown:
        """Calculate the price of a stay given as a DateRange."""
        return self.calculate_price(room, stay.check_in, stay.check_out)
