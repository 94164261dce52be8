"""Calendar month keys and rolling window helpers."""

from __future__ import annotations

from datetime import date
from typing import NamedTuple

__all__ = ["MonthKey", "month_key_for", "rolling_window"]


class MonthKey(NamedTuple):
    """A calendar month as an integer ``(year, month)`` pair.

    Window arithmetic goes through :attr:`ordinal` (months since year 0), so
    year boundaries need no special casing.
    """

    year: int
    month: int

    @classmethod
    def parse(cls, value: str) -> "MonthKey":
        """Parse a ``"YYYY-MM"`` key, raising ``ValueError`` when malformed."""

        parts = str(value).strip().split("-")
        if len(parts) != 2:
            raise ValueError(f"Month key must look like YYYY-MM: {value!r}")
        try:
            year, month = int(parts[0]), int(parts[1])
        except ValueError as exc:
            raise ValueError(f"Month key must look like YYYY-MM: {value!r}") from exc
        if not 1 <= month <= 12:
            raise ValueError(f"Month out of range in key {value!r}")
        return cls(year, month)

    @classmethod
    def from_ordinal(cls, ordinal: int) -> "MonthKey":
        year, index = divmod(ordinal, 12)
        return cls(year, index + 1)

    @property
    def ordinal(self) -> int:
        return self.year * 12 + (self.month - 1)

    def shift(self, months: int) -> "MonthKey":
        return MonthKey.from_ordinal(self.ordinal + months)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def month_key_for(value: date) -> str:
    """Return the ``"YYYY-MM"`` key of the month containing ``value``."""

    return str(MonthKey(value.year, value.month))


def rolling_window(end: MonthKey, size: int = 3, offset: int = 0) -> list[MonthKey]:
    """Return ``size`` consecutive months, oldest first, ending ``offset`` months before ``end``."""

    last = end.shift(-offset)
    return [last.shift(-step) for step in range(size - 1, -1, -1)]
