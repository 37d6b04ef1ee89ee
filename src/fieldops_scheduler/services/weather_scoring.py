"""Weather compatibility scoring for individual operations.

Scores are advisory: they never block work, they only feed the optimizer's
preference ordering and the chips shown next to a stop.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable

from fieldops_scheduler.services.domain import Operation, Urgency
from fieldops_scheduler.services.weather import WeatherSnapshot
from fieldops_scheduler.services.weather_profiles import (
    COLD_TEMPERATURE_F,
    DEFAULT_PRECIP_PROB_MAX,
    DEFAULT_WIND_MAX_MPH,
    HEAVY_RAIN_PRECIP_PROB,
    HOT_TEMPERATURE_F,
    WeatherProfileTable,
    default_profile_table,
)


class WeatherChip(str, Enum):
    GOOD_WINDOW = "good_window"
    WET = "wet"
    HEAVY_RAIN = "heavy_rain"
    WINDY = "windy"
    HOT = "hot"
    COLD = "cold"

    @property
    def label(self) -> str:
        return _CHIP_LABELS[self]


_CHIP_LABELS = {
    WeatherChip.GOOD_WINDOW: "Good Window",
    WeatherChip.WET: "Wet Pavement",
    WeatherChip.HEAVY_RAIN: "Heavy Rain",
    WeatherChip.WINDY: "High Wind",
    WeatherChip.HOT: "Heat Alert",
    WeatherChip.COLD: "Cold Alert",
}

# Lower ranks are scheduled first; heavy rain is postponed as far as possible.
CHIP_RANK: dict[WeatherChip, int] = {
    WeatherChip.GOOD_WINDOW: 0,
    WeatherChip.WET: 1,
    WeatherChip.WINDY: 2,
    WeatherChip.HOT: 3,
    WeatherChip.COLD: 3,
    WeatherChip.HEAVY_RAIN: 4,
}

CHIP_ADVICE: dict[WeatherChip, str] = {
    WeatherChip.HEAVY_RAIN: "Do indoor tasks; rain likely.",
    WeatherChip.WET: "Wet window likely, consider reslotting.",
    WeatherChip.WINDY: "High wind; bag and tie securely.",
    WeatherChip.HOT: "Heat: hydrate and pace work.",
    WeatherChip.COLD: "Very cold: reduce outdoor exposure.",
}

URGENT_MARKER = "urgent"


@dataclass(frozen=True)
class ScoringConfig:
    heavy_rain_precip_prob: float = HEAVY_RAIN_PRECIP_PROB
    default_precip_prob_max: float = DEFAULT_PRECIP_PROB_MAX
    default_wind_max_mph: float = DEFAULT_WIND_MAX_MPH
    hot_temperature_f: float = HOT_TEMPERATURE_F
    cold_temperature_f: float = COLD_TEMPERATURE_F


@dataclass(frozen=True)
class ScoredTask:
    operation: Operation
    due_at: datetime
    chip: WeatherChip
    advice: str | None = None

    @property
    def is_urgent(self) -> bool:
        return self.operation.urgency >= Urgency.URGENT

    @property
    def display(self) -> str:
        # Urgency changes what is shown, never the computed chip.
        return URGENT_MARKER if self.is_urgent else self.chip.value

    @property
    def rank(self) -> int:
        return CHIP_RANK[self.chip]


def score(
    operation: Operation,
    snapshot: WeatherSnapshot | None,
    due_at: datetime,
    *,
    profiles: WeatherProfileTable | None = None,
    config: ScoringConfig | None = None,
) -> ScoredTask:
    """Classify *operation* at *due_at* against the nearest forecast hour."""

    profiles = profiles or default_profile_table()
    config = config or ScoringConfig()
    profile = profiles.profile_for(operation.category)

    if not profile.is_outdoor:
        return ScoredTask(operation=operation, due_at=due_at, chip=WeatherChip.GOOD_WINDOW)

    block = snapshot.nearest_block(due_at) if snapshot is not None else None
    if block is None:
        return ScoredTask(operation=operation, due_at=due_at, chip=WeatherChip.GOOD_WINDOW)

    precip_max = profile.ideal_precip_prob_max
    if precip_max is None:
        precip_max = config.default_precip_prob_max
    wind_max = profile.ideal_wind_max
    if wind_max is None:
        wind_max = config.default_wind_max_mph

    if profile.sensitive_to_precip and block.precip_probability >= config.heavy_rain_precip_prob:
        chip = WeatherChip.HEAVY_RAIN
    elif profile.sensitive_to_precip and block.precip_probability >= precip_max:
        chip = WeatherChip.WET
    elif profile.sensitive_to_wind and block.wind_mph >= wind_max:
        chip = WeatherChip.WINDY
    elif block.temperature_f >= config.hot_temperature_f:
        chip = WeatherChip.HOT
    elif block.temperature_f <= config.cold_temperature_f:
        chip = WeatherChip.COLD
    else:
        chip = WeatherChip.GOOD_WINDOW

    return ScoredTask(operation=operation, due_at=due_at, chip=chip, advice=CHIP_ADVICE.get(chip))


def worst_chip(chips: Iterable[WeatherChip]) -> WeatherChip:
    """Most severe chip, or a good window when there is nothing to judge."""
    return max(chips, key=lambda chip: CHIP_RANK[chip], default=WeatherChip.GOOD_WINDOW)


__all__ = [
    "CHIP_ADVICE",
    "CHIP_RANK",
    "ScoredTask",
    "ScoringConfig",
    "WeatherChip",
    "score",
    "worst_chip",
]
