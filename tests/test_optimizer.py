from dataclasses import replace
from datetime import date, timedelta

from fieldops_scheduler.services.domain import WorkerRoute
from fieldops_scheduler.services.optimizer import OptimizerConfig, optimize, score_stops
from fieldops_scheduler.services.recurrence import TimeOfDay
from fieldops_scheduler.services.route_builder import assemble_route
from fieldops_scheduler.services.weather_profiles import TaskCategory
from fieldops_scheduler.services.weather_scoring import WeatherChip

from .factories import make_operation, make_template, make_window, make_worker
from .utils import FROZEN_NOW, TODAY, at, make_snapshot

RAIN_AT_EIGHT = make_snapshot(precip={8: 0.9})


def _route(day: date = TODAY, *, windows=(), sweep_dependencies=(), planter_dependencies=()) -> WorkerRoute:
    templates = [
        make_template(
            "sweep",
            rule="daily@08:00",
            operations=(make_operation("Sidewalk sweep", TaskCategory.CLEANING),),
            dependencies=sweep_dependencies,
        ),
        make_template(
            "mop",
            rule="daily@09:00",
            operations=(make_operation("Lobby mop", TaskCategory.INSPECTION),),
            sequence_index=1,
        ),
        make_template(
            "planters",
            rule="daily@10:00",
            operations=(make_operation("Water planters", TaskCategory.MAINTENANCE),),
            sequence_index=2,
            dependencies=planter_dependencies,
        ),
    ]
    return assemble_route(make_worker(), day, templates, list(windows))


def _order(route: WorkerRoute) -> list[str]:
    return [sequence.id.split(":")[0] for sequence in route.movable_sequences]


def test_heavy_rain_stop_is_pushed_last() -> None:
    route = _route()

    optimized = optimize(route, RAIN_AT_EIGHT, now=FROZEN_NOW)

    assert _order(optimized) == ["mop", "planters", "sweep"]
    assert [sequence.arrival for sequence in optimized.movable_sequences] == [
        at(TODAY, 8, 0),
        at(TODAY, 8, 40),
        at(TODAY, 9, 20),
    ]
    assert optimized.weather_optimized
    assert not route.weather_optimized
    assert _order(route) == ["sweep", "mop", "planters"]


def test_locked_stops_keep_their_time() -> None:
    route = _route(windows=[make_window()])
    locked_before = {sequence.id: sequence.arrival for sequence in route.locked_sequences}

    optimized = optimize(route, RAIN_AT_EIGHT, now=FROZEN_NOW)

    assert locked_before
    assert {sequence.id: sequence.arrival for sequence in optimized.locked_sequences} == locked_before
    for previous, current in zip(optimized.sequences, optimized.sequences[1:]):
        assert previous.end <= current.arrival


def test_missing_or_stale_weather_is_a_no_op() -> None:
    route = _route()
    stale = make_snapshot(precip={8: 0.9}, fetched_at=FROZEN_NOW - timedelta(hours=2))

    assert optimize(route, None, now=FROZEN_NOW) is route
    assert optimize(route, stale, now=FROZEN_NOW) is route
    assert _order(optimize(route, stale, now=FROZEN_NOW)) == _order(route)


def test_only_today_is_optimized() -> None:
    tomorrow = _route(TODAY + timedelta(days=1))

    assert optimize(tomorrow, RAIN_AT_EIGHT, now=FROZEN_NOW) is tomorrow


def test_optimizing_twice_gives_the_same_order() -> None:
    route = _route(windows=[make_window()])

    once = optimize(route, RAIN_AT_EIGHT, now=FROZEN_NOW)
    twice = optimize(once, RAIN_AT_EIGHT, now=FROZEN_NOW)

    assert _order(twice) == _order(once)
    assert [sequence.arrival for sequence in twice.sequences] == [sequence.arrival for sequence in once.sequences]


def test_started_stops_are_pinned() -> None:
    route = _route()
    now = at(TODAY, 8, 5)
    snapshot = make_snapshot(precip={8: 0.9}, fetched_at=now)

    optimized = optimize(route, snapshot, now=now)

    assert optimized.weather_optimized
    sweep = next(sequence for sequence in optimized.sequences if sequence.id.startswith("sweep"))
    assert sweep.arrival == at(TODAY, 8, 0)
    assert all(sequence.arrival >= now for sequence in optimized.movable_sequences if sequence is not sweep)


def test_dependencies_are_respected() -> None:
    route = _route(planter_dependencies=("sweep",))

    optimized = optimize(route, RAIN_AT_EIGHT, now=FROZEN_NOW)

    assert _order(optimized) == ["mop", "sweep", "planters"]


def test_dependency_cycle_falls_back_to_preference() -> None:
    route = _route(sweep_dependencies=("mop",), planter_dependencies=("sweep",))
    cyclic = replace(
        route,
        sequences=tuple(
            replace(sequence, dependencies=(f"planters:{TODAY.isoformat()}",))
            if sequence.id.startswith("mop")
            else sequence
            for sequence in route.sequences
        ),
    )

    optimized = optimize(cyclic, RAIN_AT_EIGHT, now=FROZEN_NOW)

    assert sorted(_order(optimized)) == ["mop", "planters", "sweep"]
    assert _order(optimized)[0] == "mop"


def test_overrunning_the_shift_keeps_the_original_route() -> None:
    route = _route()
    config = OptimizerConfig(travel_buffer_minutes=60)

    result = optimize(route, RAIN_AT_EIGHT, now=FROZEN_NOW, shift_end=TimeOfDay(10, 45), config=config)

    assert result is route


def test_score_stops_reports_chips() -> None:
    route = _route()

    scores = {item.sequence.id.split(":")[0]: item for item in score_stops(route, RAIN_AT_EIGHT)}

    assert scores["sweep"].chip is WeatherChip.HEAVY_RAIN
    assert scores["sweep"].advice == "Do indoor tasks; rain likely."
    assert scores["mop"].chip is WeatherChip.GOOD_WINDOW
    assert scores["mop"].advice is None
