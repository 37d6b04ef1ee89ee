from datetime import date

import pytest

from fieldops_scheduler.core.config import Settings
from fieldops_scheduler.services.domain import StopKind
from fieldops_scheduler.services.scheduler import FieldScheduler
from fieldops_scheduler.services.sources import ScheduleCatalog
from fieldops_scheduler.services.weather_profiles import TaskCategory
from fieldops_scheduler.services.weather_scoring import WeatherChip

from .factories import make_operation, make_template, make_window, make_worker
from .utils import FROZEN_NOW, TODAY, SlowWeather, StaticWeather, at, make_snapshot


def _catalog() -> ScheduleCatalog:
    return ScheduleCatalog(
        workers=[make_worker("4", "Kevin Dutan")],
        templates=[
            make_template(
                "sweep",
                rule="daily:mon-fri@08:00",
                title="Sweep",
                operations=(make_operation("Sweep", TaskCategory.CLEANING),),
            ),
            make_template(
                "lobby",
                rule="daily:mon-fri@09:00",
                title="Lobby",
                operations=(make_operation("Lobby check", TaskCategory.INSPECTION),),
                sequence_index=1,
            ),
        ],
        windows=[make_window()],
    )


def _scheduler(weather, *, clock=lambda: FROZEN_NOW, **options) -> FieldScheduler:
    catalog = _catalog()
    return FieldScheduler(catalog, weather, catalog, catalog, clock=clock, **options)


def _titles(route) -> list[str]:
    return [sequence.label for sequence in route.movable_sequences]


@pytest.mark.anyio("asyncio")
async def test_plain_route_never_reads_weather() -> None:
    weather = StaticWeather(make_snapshot(precip={8: 0.9}))

    daily = await _scheduler(weather).route_for("4", TODAY)

    assert weather.calls == 0
    assert daily.scores == []
    assert not daily.route.weather_optimized
    assert _titles(daily.route) == ["Sweep", "Lobby"]


@pytest.mark.anyio("asyncio")
async def test_weather_optimized_route_carries_scores() -> None:
    weather = StaticWeather(make_snapshot(precip={8: 0.9}))

    daily = await _scheduler(weather).route_for("4", TODAY, weather_optimized=True)

    assert weather.calls == 1
    assert daily.route.weather_optimized
    assert _titles(daily.route) == ["Lobby", "Sweep"]
    chips = {score.sequence.label: score.chip for score in daily.scores}
    assert chips == {"Lobby": WeatherChip.GOOD_WINDOW, "Sweep": WeatherChip.HEAVY_RAIN}


@pytest.mark.anyio("asyncio")
async def test_weather_optimized_other_day_is_plain() -> None:
    weather = StaticWeather(make_snapshot(precip={8: 0.9}))

    daily = await _scheduler(weather).route_for("4", date(2026, 10, 21), weather_optimized=True)

    assert weather.calls == 0
    assert not daily.route.weather_optimized


@pytest.mark.anyio("asyncio")
async def test_slow_weather_falls_back_to_built_route() -> None:
    weather = SlowWeather(make_snapshot(precip={8: 0.9}), delay=1.0)

    daily = await _scheduler(weather, weather_timeout_seconds=0.05).route_for(
        "4", TODAY, weather_optimized=True
    )

    assert not daily.route.weather_optimized
    assert daily.scores == []
    assert _titles(daily.route) == ["Sweep", "Lobby"]


@pytest.mark.anyio("asyncio")
async def test_active_and_upcoming_follow_the_clock() -> None:
    scheduler = _scheduler(StaticWeather(None), clock=lambda: at(TODAY, 8, 5))

    active = await scheduler.active("4")
    upcoming = await scheduler.upcoming("4", limit=5)

    assert [sequence.kind for sequence in active] == [StopKind.RETRIEVAL]
    assert [sequence.arrival for sequence in upcoming] == [at(TODAY, 8, 10), at(TODAY, 9, 0)]


@pytest.mark.anyio("asyncio")
async def test_unknown_worker_gets_an_empty_route() -> None:
    daily = await _scheduler(StaticWeather(None)).route_for("99", TODAY, weather_optimized=True)

    assert daily.route.is_empty
    assert daily.route.worker_id == "99"


@pytest.mark.anyio("asyncio")
async def test_from_settings_applies_shift_start_and_buffer() -> None:
    catalog = _catalog()
    catalog.templates.append(
        make_template(
            "planters",
            rule="daily",
            title="Planters",
            operations=(make_operation("Water planters", TaskCategory.INSPECTION, duration_minutes=20),),
            sequence_index=2,
        )
    )
    settings = Settings(default_shift_start="06:00", travel_buffer_minutes=0)
    scheduler = FieldScheduler.from_settings(
        settings,
        templates=catalog,
        weather=StaticWeather(make_snapshot(precip={8: 0.9})),
        compliance=catalog,
        workers=catalog,
        clock=lambda: at(TODAY, 6, 0),
    )

    plain = await scheduler.build_route("4", TODAY)
    assert _titles(plain) == ["Planters", "Sweep", "Lobby"]
    assert plain.movable_sequences[0].arrival == at(TODAY, 6, 0)

    daily = await scheduler.route_for("4", TODAY, weather_optimized=True)
    assert _titles(daily.route) == ["Lobby", "Planters", "Sweep"]
    assert [sequence.arrival for sequence in daily.route.movable_sequences] == [
        at(TODAY, 6, 0),
        at(TODAY, 6, 30),
        at(TODAY, 6, 50),
    ]
