"""Weather sensitivity per task category and the thresholds that drive scoring."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field

HEAVY_RAIN_PRECIP_PROB = 0.6
DEFAULT_PRECIP_PROB_MAX = 0.3
DEFAULT_WIND_MAX_MPH = 25.0
HOT_TEMPERATURE_F = 95.0
COLD_TEMPERATURE_F = 25.0


class TaskCategory(str, Enum):
    CLEANING = "cleaning"
    SANITATION = "sanitation"
    OPERATIONS = "operations"
    MAINTENANCE = "maintenance"
    REPAIR = "repair"
    INSPECTION = "inspection"
    COMPLIANCE = "compliance"
    UNKNOWN = "unknown"

    @classmethod
    def from_label(cls, label: "str | TaskCategory | None") -> "TaskCategory":
        if isinstance(label, TaskCategory):
            return label
        if not label:
            return cls.UNKNOWN
        try:
            return cls(label.strip().lower())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class WeatherProfile:
    is_outdoor: bool
    sensitive_to_precip: bool
    sensitive_to_wind: bool
    ideal_wind_max: float | None = None
    ideal_precip_prob_max: float | None = None


INDOOR_PROFILE = WeatherProfile(is_outdoor=False, sensitive_to_precip=False, sensitive_to_wind=False)

DEFAULT_PROFILES: dict[TaskCategory, WeatherProfile] = {
    TaskCategory.CLEANING: WeatherProfile(True, True, False, 25.0, 0.3),
    TaskCategory.SANITATION: WeatherProfile(True, True, True, 30.0, 0.4),
    # Collection windows tolerate rain; wind still scatters bags.
    TaskCategory.OPERATIONS: WeatherProfile(True, False, True, 35.0, 0.6),
    TaskCategory.COMPLIANCE: WeatherProfile(True, False, True, 35.0, 0.6),
    TaskCategory.MAINTENANCE: WeatherProfile(True, True, False, 20.0, 0.2),
    TaskCategory.REPAIR: WeatherProfile(True, True, False, 20.0, 0.2),
    TaskCategory.INSPECTION: INDOOR_PROFILE,
    TaskCategory.UNKNOWN: INDOOR_PROFILE,
}


class WeatherProfileOverride(BaseModel):
    is_outdoor: bool
    sensitive_to_precip: bool = False
    sensitive_to_wind: bool = False
    ideal_wind_max: float | None = Field(default=None, gt=0)
    ideal_precip_prob_max: float | None = Field(default=None, ge=0, le=1)


class WeatherProfileFile(BaseModel):
    profiles: dict[TaskCategory, WeatherProfileOverride] = Field(default_factory=dict)


class WeatherProfileTable:
    """Lookup from task category to weather profile."""

    def __init__(self, profiles: dict[TaskCategory, WeatherProfile] | None = None) -> None:
        self._profiles = dict(DEFAULT_PROFILES)
        if profiles:
            self._profiles.update(profiles)

    def profile_for(self, category: "TaskCategory | str | None") -> WeatherProfile:
        # Unknown categories are never weather-blocked.
        return self._profiles.get(TaskCategory.from_label(category), INDOOR_PROFILE)


def load_profile_table(path: Path | None = None) -> WeatherProfileTable:
    """Build the profile table, layering overrides from a JSON file when given."""

    if path is None:
        return WeatherProfileTable()
    with path.open("r", encoding="utf-8") as handle:
        payload = WeatherProfileFile.model_validate(json.load(handle))
    return WeatherProfileTable(
        {
            category: WeatherProfile(**override.model_dump())
            for category, override in payload.profiles.items()
        }
    )


@lru_cache(maxsize=1)
def default_profile_table() -> WeatherProfileTable:
    return WeatherProfileTable()


def profile_for(category: "TaskCategory | str | None") -> WeatherProfile:
    return default_profile_table().profile_for(category)


__all__ = [
    "COLD_TEMPERATURE_F",
    "DEFAULT_PRECIP_PROB_MAX",
    "DEFAULT_PROFILES",
    "DEFAULT_WIND_MAX_MPH",
    "HEAVY_RAIN_PRECIP_PROB",
    "HOT_TEMPERATURE_F",
    "TaskCategory",
    "WeatherProfile",
    "WeatherProfileTable",
    "default_profile_table",
    "load_profile_table",
    "profile_for",
]
