"""Pricing policy and price breakdown models.

A PricingPolicy is an ordered table of RateModifiers. For each night the
modifiers are tried in order; every one that matches multiplies the running
nightly price and contributes its label. The default table is:

    1. Weekend Rate (+30%)      Friday and Saturday nights
    2. Holiday Rate (+50%)      Dec 20 - Jan 5 (inclusive, any year)
    3. Peak Season (+20%)       June, July, August
    4. Premium Category (+10%)  Suite and Presidential rooms
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import RoomCategory
from .room import Room
from .types import Money

FRIDAY = 4
SATURDAY = 5


class SeasonWindow(BaseModel):
    """A year-agnostic span of calendar days, both ends inclusive.

    A window whose end precedes its start wraps across the year end,
    e.g. Dec 20 - Jan 5.
    """

    model_config = ConfigDict(frozen=True)

    start_month: int = Field(..., ge=1, le=12)
    start_day: int = Field(..., ge=1, le=31)
    end_month: int = Field(..., ge=1, le=12)
    end_day: int = Field(..., ge=1, le=31)

    def contains(self, day: dt.date) -> bool:
        key = (day.month, day.day)
        start = (self.start_month, self.start_day)
        end = (self.end_month, self.end_day)
        if start <= end:
            return start <= key <= end
        return key >= start or key <= end


class RateModifier(BaseModel):
    """One multiplicative surcharge in a pricing policy.

    Every criterion that is set must match for the modifier to apply.
    Weekdays use Python numbering (Monday is 0).
    """

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., min_length=1)
    multiplier: Decimal = Field(..., gt=0)
    weekdays: frozenset[int] | None = None
    months: frozenset[int] | None = None
    windows: tuple[SeasonWindow, ...] | None = None
    categories: frozenset[RoomCategory] | None = None

    def applies(self, night: dt.date, category: RoomCategory) -> bool:
        if self.weekdays is not None and night.weekday() not in self.weekdays:
            return False
        if self.months is not None and night.month not in self.months:
            return False
        if self.windows is not None and not any(w.contains(night) for w in self.windows):
            return False
        if self.categories is not None and category not in self.categories:
            return False
        return True


class PricingPolicy(BaseModel):
    """Ordered rate modifiers plus tax and fee settings."""

    model_config = ConfigDict(frozen=True)

    modifiers: tuple[RateModifier, ...] = Field(default_factory=tuple)
    tax_rate: Decimal = Field(default=Decimal("0.12"), ge=0)
    service_fee: int = Field(default=25, ge=0, description="Fixed fee per booking")

    @classmethod
    def default(
        cls,
        tax_rate: Decimal = Decimal("0.12"),
        service_fee: int = 25,
    ) -> "PricingPolicy":
        """The standard weekend/holiday/peak/premium table."""
        return cls(
            modifiers=(
                RateModifier(
                    label="Weekend Rate (+30%)",
                    multiplier=Decimal("1.30"),
                    weekdays=frozenset({FRIDAY, SATURDAY}),
                ),
                RateModifier(
                    label="Holiday Rate (+50%)",
                    multiplier=Decimal("1.50"),
                    windows=(
                        SeasonWindow(start_month=12, start_day=20, end_month=1, end_day=5),
                    ),
                ),
                RateModifier(
                    label="Peak Season (+20%)",
                    multiplier=Decimal("1.20"),
                    months=frozenset({6, 7, 8}),
                ),
                RateModifier(
                    label="Premium Category (+10%)",
                    multiplier=Decimal("1.10"),
                    categories=frozenset({RoomCategory.SUITE, RoomCategory.PRESIDENTIAL}),
                ),
            ),
            tax_rate=tax_rate,
            service_fee=service_fee,
        )


class NightlyRate(BaseModel):
    """Price of a single night."""

    date: dt.date
    base_price: Money
    final_price: int = Field(..., description="Price after modifiers, rounded half-up")
    factors: list[str] = Field(default_factory=list)


class PriceBreakdown(BaseModel):
    """Full price of a stay.

    All amounts except base_price are whole currency units.
    price_per_night is an average for display and feeds no other figure.
    """

    base_price: Money
    nights: int = Field(..., ge=1)
    breakdown: list[NightlyRate]
    subtotal: int
    taxes: int
    fees: int
    grand_total: int
    price_per_night: int

    @model_validator(mode="after")
    def _check_nights(self) -> "PriceBreakdown":
        if len(self.breakdown) != self.nights:
            raise ValueError("breakdown must contain one entry per night")
        return self


class RoomQuote(BaseModel):
    """An available room with its price for the requested stay."""

    room: Room
    pricing: PriceBreakdown
