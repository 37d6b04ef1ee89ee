from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta


@dataclass(frozen=True)
class CurrentConditions:
    temperature_f: float
    wind_mph: float
    condition: str


@dataclass(frozen=True)
class HourBlock:
    starts_at: datetime
    precip_probability: float  # 0..1
    wind_mph: float
    temperature_f: float
    precip_intensity: float | None = None


@dataclass(frozen=True)
class WeatherSnapshot:
    """Read-only forecast handed to scoring and optimization."""

    current: CurrentConditions
    fetched_at: datetime
    hourly: tuple[HourBlock, ...] = field(default_factory=tuple)

    def age(self, now: datetime) -> timedelta:
        return now - self.fetched_at

    def is_stale(self, now: datetime, max_age: timedelta) -> bool:
        return self.age(now) > max_age

    def nearest_block(self, moment: datetime) -> HourBlock | None:
        if not self.hourly:
            return None
        # First block wins on equal distance.
        return min(self.hourly, key=lambda block: abs((block.starts_at - moment).total_seconds()))

    @property
    def horizon(self) -> datetime | None:
        return self.hourly[-1].starts_at if self.hourly else None


def is_usable(snapshot: WeatherSnapshot | None, now: datetime, max_age: timedelta) -> bool:
    """A missing or stale snapshot counts as unknown weather."""
    return snapshot is not None and not snapshot.is_stale(now, max_age)
