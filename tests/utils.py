import asyncio
from datetime import date, datetime, timedelta

from fieldops_scheduler.services.weather import CurrentConditions, HourBlock, WeatherSnapshot

# Tuesday
FROZEN_NOW = datetime(2026, 10, 20, 6, 30)
TODAY = FROZEN_NOW.date()


def make_snapshot(
    *,
    start: datetime | None = None,
    hours: int = 12,
    precip: float | dict[int, float] = 0.0,
    wind: float | dict[int, float] = 5.0,
    temperature: float | dict[int, float] = 60.0,
    fetched_at: datetime | None = None,
) -> WeatherSnapshot:
    """Hourly forecast from *start*; per-hour overrides keyed by hour of day."""

    start = start or FROZEN_NOW.replace(minute=0)

    def _value(spec: float | dict[int, float], moment: datetime, default: float) -> float:
        if isinstance(spec, dict):
            return spec.get(moment.hour, default)
        return spec

    blocks = []
    for offset in range(hours):
        moment = start + timedelta(hours=offset)
        blocks.append(
            HourBlock(
                starts_at=moment,
                precip_probability=_value(precip, moment, 0.0),
                wind_mph=_value(wind, moment, 5.0),
                temperature_f=_value(temperature, moment, 60.0),
            )
        )
    return WeatherSnapshot(
        current=CurrentConditions(temperature_f=60.0, wind_mph=5.0, condition="clear"),
        fetched_at=fetched_at or FROZEN_NOW,
        hourly=tuple(blocks),
    )


class StaticWeather:
    """Weather provider returning a fixed snapshot and counting calls."""

    def __init__(self, snapshot: WeatherSnapshot | None) -> None:
        self.snapshot = snapshot
        self.calls = 0

    async def fetch_snapshot(self) -> WeatherSnapshot | None:
        self.calls += 1
        return self.snapshot


class SlowWeather(StaticWeather):
    def __init__(self, snapshot: WeatherSnapshot | None, delay: float) -> None:
        super().__init__(snapshot)
        self.delay = delay

    async def fetch_snapshot(self) -> WeatherSnapshot | None:
        self.calls += 1
        await asyncio.sleep(self.delay)
        return self.snapshot


def at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute)
