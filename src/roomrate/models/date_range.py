"""Stay date range model."""

import datetime as dt
from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import InvalidRangeError


class DateRange(BaseModel):
    """A stay from check-in (inclusive) to check-out (exclusive).

    Both ends are calendar dates with no time-of-day component.
    Constructing a range whose check-out is not after its check-in
    raises InvalidRangeError.
    """

    model_config = ConfigDict(frozen=True)

    check_in: dt.date = Field(..., description="First night of the stay")
    check_out: dt.date = Field(..., description="Departure date (not a night)")

    @model_validator(mode="after")
    def _check_order(self) -> "DateRange":
        if self.check_out <= self.check_in:
            raise InvalidRangeError(
                details={
                    "check_in": self.check_in.isoformat(),
                    "check_out": self.check_out.isoformat(),
                }
            )
        return self

    @property
    def nights(self) -> int:
        """Number of nights in the stay."""
        return (self.check_out - self.check_in).days

    def dates(self) -> Iterator[dt.date]:
        """Yield each night of the stay (check-out excluded)."""
        for offset in range(self.nights):
            yield self.check_in + dt.timedelta(days=offset)

    def overlaps(self, other: "DateRange") -> bool:
        """Whether the two stays share at least one night."""
        return self.check_in < other.check_out and other.check_in < self.check_out

    def shifted(self, days: int) -> "DateRange":
        """Same-length range moved by a number of days."""
        delta = dt.timedelta(days=days)
        return DateRange(check_in=self.check_in + delta, check_out=self.check_out + delta)
