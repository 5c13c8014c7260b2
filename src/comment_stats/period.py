"""Trailing period parsing and filtering."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from comment_stats.errors import ConfigurationError

SUPPORTED_UNITS = {"d": "days"}


class Period(BaseModel):
    """Trailing time window for counting comments.

    A quantity of 0 means there is no lower bound and all history counts.
    """

    model_config = ConfigDict(frozen=True)

    quantity: int = Field(default=0, ge=0)
    unit: Literal["d"] = "d"

    @property
    def is_unbounded(self) -> bool:
        """Whether every timestamp falls inside this period."""
        return self.quantity == 0

    def cutoff(self, now: datetime | None = None) -> datetime | None:
        """Return the exclusive lower bound of the period, if any."""
        if self.is_unbounded:
            return None
        now = now or datetime.now(UTC)
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        try:
            return now - timedelta(days=self.quantity)
        except OverflowError:
            # Longer than the calendar reaches back: every timestamp is inside
            return datetime.min.replace(tzinfo=UTC)

    def __str__(self) -> str:
        return f"{self.quantity}{self.unit}"


def parse_period(value: str) -> Period:
    """Parse a period string such as ``7d``.

    Args:
        value: Quantity followed by a single unit character

    Returns:
        The parsed Period

    Raises:
        ConfigurationError: If the unit is unsupported or the quantity is not
            a non-negative integer
    """
    value = value.strip()
    if not value:
        raise ConfigurationError("Wrong period.")

    quantity_part, unit = value[:-1], value[-1]
    if unit not in SUPPORTED_UNITS:
        raise ConfigurationError(f"Period type `{unit}` is not supported.")

    if not (quantity_part.isascii() and quantity_part.isdigit()):
        raise ConfigurationError("Wrong period.")

    try:
        quantity = int(quantity_part)
    except ValueError as e:
        raise ConfigurationError("Wrong period.") from e
    return Period(quantity=quantity, unit=unit)


def is_within_period(
    period: Period, timestamp: datetime, now: datetime | None = None
) -> bool:
    """Decide whether a record timestamp falls strictly inside the period."""
    cutoff = period.cutoff(now)
    if cutoff is None:
        return True

    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    return timestamp > cutoff
