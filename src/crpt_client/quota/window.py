"""
Quota window definitions.

A quota window pairs a request limit with the duration after which the
admitted count is reset.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any

from crpt_client.errors import ConfigurationError


class TimeUnit(str, Enum):
    """Unit in which a window interval is expressed."""

    NANOSECONDS = "nanoseconds"
    MICROSECONDS = "microseconds"
    MILLISECONDS = "milliseconds"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"

    @classmethod
    def parse(cls, value: TimeUnit | str) -> TimeUnit:
        """Accept enum members, values or names in any case."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for unit in cls:
            if unit.value == text or unit.name.lower() == text:
                return unit
        raise ConfigurationError(f"Unknown time unit: {value!r}")

    def to_timedelta(self, amount: float) -> timedelta:
        if self is TimeUnit.NANOSECONDS:
            return timedelta(microseconds=amount / 1000)
        return timedelta(**{self.value: amount})


@dataclass(frozen=True)
class QuotaWindow:
    """
    Immutable quota configuration.

    At most ``limit`` admissions are granted between two consecutive
    resets, which happen every ``duration``.
    """

    limit: int
    """Maximum admissions per window."""

    duration: timedelta
    """Time between two resets."""

    def __post_init__(self) -> None:
        if isinstance(self.limit, bool) or not isinstance(self.limit, int):
            raise ConfigurationError(f"Request limit must be an integer, got {self.limit!r}")
        if self.limit <= 0:
            raise ConfigurationError(f"Request limit must be positive, got {self.limit}")
        if self.duration <= timedelta(0):
            raise ConfigurationError(f"Window duration must be positive, got {self.duration}")

    @classmethod
    def from_units(
        cls,
        limit: int,
        interval: float,
        time_unit: TimeUnit | str = TimeUnit.SECONDS,
    ) -> QuotaWindow:
        """
        Build a window from an interval expressed in ``time_unit``.

        Args:
            limit: Maximum admissions per window
            interval: Window length in ``time_unit``
            time_unit: Unit of ``interval``

        Raises:
            ConfigurationError: If any value is out of range
        """
        unit = TimeUnit.parse(time_unit)
        if interval <= 0:
            raise ConfigurationError(f"Interval must be positive, got {interval}")
        return cls(limit=limit, duration=unit.to_timedelta(interval))

    @property
    def seconds(self) -> float:
        return self.duration.total_seconds()

    def to_dict(self) -> dict[str, Any]:
        return {"limit": self.limit, "window_seconds": self.seconds}
