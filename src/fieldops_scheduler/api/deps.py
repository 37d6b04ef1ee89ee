from datetime import datetime
from functools import lru_cache
from typing import Annotated, Callable

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops_scheduler.core.config import Settings, get_settings
from fieldops_scheduler.db.session import get_db_session
from fieldops_scheduler.repositories.sources import load_schedule_catalog
from fieldops_scheduler.services.scheduler import FieldScheduler
from fieldops_scheduler.services.sources import NoWeather, WeatherProvider
from fieldops_scheduler.services.weather_profiles import WeatherProfileTable, load_profile_table
from fieldops_scheduler.services.weather_provider import OpenMeteoWeatherProvider


@lru_cache
def get_profile_table() -> WeatherProfileTable:
    return load_profile_table(get_settings().weather_profiles_file)


def get_weather_provider(settings: Annotated[Settings, Depends(get_settings)]) -> WeatherProvider:
    if not settings.weather_enabled:
        return NoWeather()
    return OpenMeteoWeatherProvider.from_settings(settings)


def get_clock() -> Callable[[], datetime]:
    return datetime.now


async def get_scheduler(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    settings: Annotated[Settings, Depends(get_settings)],
    weather: Annotated[WeatherProvider, Depends(get_weather_provider)],
    clock: Annotated[Callable[[], datetime], Depends(get_clock)],
) -> FieldScheduler:
    catalog = await load_schedule_catalog(session)
    return FieldScheduler.from_settings(
        settings,
        templates=catalog,
        weather=weather,
        compliance=catalog,
        workers=catalog,
        profiles=get_profile_table(),
        clock=clock,
    )
