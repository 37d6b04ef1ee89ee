"""Open-Meteo forecast client producing :class:`WeatherSnapshot` values."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

import httpx

from fieldops_scheduler.core.config import Settings
from fieldops_scheduler.services.weather import CurrentConditions, HourBlock, WeatherSnapshot

logger = logging.getLogger(__name__)

DEFAULT_FORECAST_HOURS = 12

# WMO weather interpretation codes, collapsed to the conditions we display.
_CONDITIONS: list[tuple[range, str]] = [
    (range(0, 1), "clear"),
    (range(1, 4), "cloudy"),
    (range(45, 49), "fog"),
    (range(51, 58), "drizzle"),
    (range(61, 68), "rain"),
    (range(71, 78), "snow"),
    (range(80, 83), "rain"),
    (range(85, 87), "snow"),
    (range(95, 100), "thunderstorm"),
]


def condition_for(code: int | None) -> str:
    if code is None:
        return "unknown"
    for codes, label in _CONDITIONS:
        if code in codes:
            return label
    return "unknown"


def parse_forecast(payload: dict[str, Any], fetched_at: datetime, hours: int = DEFAULT_FORECAST_HOURS) -> WeatherSnapshot:
    """Turn an Open-Meteo ``/v1/forecast`` body into a snapshot.

    Raises ``KeyError``, ``ValueError`` or ``TypeError`` on an unexpected body.
    """

    current = payload["current"]
    conditions = CurrentConditions(
        temperature_f=float(current["temperature_2m"]),
        wind_mph=float(current["wind_speed_10m"]),
        condition=condition_for(current.get("weather_code")),
    )

    hourly = payload["hourly"]
    blocks = []
    for index, stamp in enumerate(hourly["time"][:hours]):
        precipitation = hourly.get("precipitation")
        blocks.append(
            HourBlock(
                starts_at=datetime.fromisoformat(stamp),
                precip_probability=float(hourly["precipitation_probability"][index] or 0) / 100.0,
                wind_mph=float(hourly["wind_speed_10m"][index]),
                temperature_f=float(hourly["temperature_2m"][index]),
                precip_intensity=float(precipitation[index]) if precipitation else None,
            )
        )
    return WeatherSnapshot(current=conditions, fetched_at=fetched_at, hourly=tuple(blocks))


class OpenMeteoWeatherProvider:
    """Fetches the current forecast; any failure yields ``None``."""

    def __init__(
        self,
        base_url: str,
        latitude: float,
        longitude: float,
        *,
        timeout: float = 10.0,
        hours: int = DEFAULT_FORECAST_HOURS,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.latitude = latitude
        self.longitude = longitude
        self.timeout = timeout
        self.hours = hours
        self._client = client
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.AsyncClient | None = None) -> "OpenMeteoWeatherProvider":
        return cls(
            settings.weather_base_url,
            settings.weather_latitude,
            settings.weather_longitude,
            timeout=settings.weather_fetch_timeout_seconds,
            client=client,
        )

    def _params(self) -> dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "current": "temperature_2m,wind_speed_10m,weather_code",
            "hourly": "temperature_2m,precipitation_probability,precipitation,wind_speed_10m",
            "temperature_unit": "fahrenheit",
            "wind_speed_unit": "mph",
            "forecast_hours": self.hours,
            "timezone": "auto",
        }

    async def _get(self, client: httpx.AsyncClient) -> dict[str, Any]:
        response = await client.get(f"{self.base_url}/v1/forecast", params=self._params())
        response.raise_for_status()
        return response.json()

    async def fetch_snapshot(self) -> WeatherSnapshot | None:
        try:
            if self._client is not None:
                payload = await self._get(self._client)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    payload = await self._get(client)
            return parse_forecast(payload, self._clock(), self.hours)
        except httpx.HTTPError as exc:
            logger.warning("Weather request failed: %s", exc)
        except (KeyError, ValueError, TypeError) as exc:
            logger.warning("Unexpected weather payload: %s", exc)
        return None


__all__ = ["OpenMeteoWeatherProvider", "condition_for", "parse_forecast"]
