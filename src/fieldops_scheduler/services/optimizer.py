"""Weather-adaptive reordering of a worker's movable stops."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from fieldops_scheduler.services.domain import RouteSequence, WorkerRoute
from fieldops_scheduler.services.recurrence import TimeOfDay
from fieldops_scheduler.services.timeline import lay_out
from fieldops_scheduler.services.weather import WeatherSnapshot, is_usable
from fieldops_scheduler.services.weather_profiles import WeatherProfileTable
from fieldops_scheduler.services.weather_scoring import (
    CHIP_ADVICE,
    CHIP_RANK,
    ScoredTask,
    ScoringConfig,
    WeatherChip,
    score,
    worst_chip,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptimizerConfig:
    travel_buffer_minutes: int = 10
    max_snapshot_age_minutes: int = 60
    default_shift_end: TimeOfDay = TimeOfDay(17, 0)
    scoring: ScoringConfig = ScoringConfig()

    @classmethod
    def from_settings(cls, settings) -> "OptimizerConfig":
        return cls(
            travel_buffer_minutes=settings.travel_buffer_minutes,
            max_snapshot_age_minutes=settings.weather_max_age_minutes,
            default_shift_end=TimeOfDay.parse(settings.default_shift_end),
        )

    @property
    def buffer(self) -> timedelta:
        return timedelta(minutes=self.travel_buffer_minutes)

    @property
    def max_age(self) -> timedelta:
        return timedelta(minutes=self.max_snapshot_age_minutes)


@dataclass(frozen=True)
class StopScore:
    sequence: RouteSequence
    tasks: tuple[ScoredTask, ...]

    @property
    def chip(self) -> WeatherChip:
        return worst_chip(task.chip for task in self.tasks)

    @property
    def advice(self) -> str | None:
        return CHIP_ADVICE.get(self.chip)

    @property
    def is_urgent(self) -> bool:
        return any(task.is_urgent for task in self.tasks)

    @property
    def rank(self) -> int:
        return CHIP_RANK[self.chip]


def score_stop(
    sequence: RouteSequence,
    snapshot: WeatherSnapshot | None,
    *,
    profiles: WeatherProfileTable | None = None,
    config: ScoringConfig | None = None,
) -> StopScore:
    # Scored at the planned time so that repeated passes see the same weather.
    due_at = sequence.scheduled_for
    tasks = tuple(
        score(operation, snapshot, due_at, profiles=profiles, config=config)
        for operation in sequence.operations
    )
    return StopScore(sequence=sequence, tasks=tasks)


def score_stops(
    route: WorkerRoute,
    snapshot: WeatherSnapshot | None,
    *,
    profiles: WeatherProfileTable | None = None,
    config: ScoringConfig | None = None,
) -> list[StopScore]:
    """Representative chip for each movable stop of *route*."""

    return [
        score_stop(sequence, snapshot, profiles=profiles, config=config)
        for sequence in route.movable_sequences
    ]


def _preference_order(scores: list[StopScore]) -> list[RouteSequence]:
    """Rank by chip then template order, never ahead of a movable prerequisite."""

    pending = sorted(scores, key=lambda item: (item.rank, item.sequence.sequence_index, item.sequence.id))
    pending_ids = {item.sequence.id for item in pending}
    ordered: list[RouteSequence] = []
    while pending:
        ready = next(
            (
                item
                for item in pending
                if not any(dependency in pending_ids for dependency in item.sequence.dependencies)
            ),
            None,
        )
        if ready is None:
            # Dependency cycle: fall back to the best ranked stop.
            ready = pending[0]
        pending.remove(ready)
        pending_ids.discard(ready.sequence.id)
        ordered.append(ready.sequence)
    return ordered


def optimize(
    route: WorkerRoute,
    snapshot: WeatherSnapshot | None,
    *,
    now: datetime | None = None,
    shift_end: TimeOfDay | None = None,
    profiles: WeatherProfileTable | None = None,
    config: OptimizerConfig | None = None,
) -> WorkerRoute:
    """
    Reorder the movable stops of today's *route* against *snapshot*.

    Locked stops and stops that have already started keep their arrival.
    The remaining stops are ranked good window first and heavy rain last,
    then laid out back to back (plus the travel buffer) from the earliest
    movable arrival.  Missing or stale weather, a route for another day,
    or a layout that would run past the shift end all return *route* itself.
    """

    config = config or OptimizerConfig()
    now = now or datetime.now()

    if route.day != now.date():
        logger.info("Skipping weather optimization for %s: %s is not today", route.worker_id, route.day)
        return route
    if not is_usable(snapshot, now, config.max_age):
        logger.info("Skipping weather optimization for %s: no fresh forecast", route.worker_id)
        return route

    pinned = [sequence for sequence in route.sequences if sequence.locked or sequence.arrival < now]
    movable = [sequence for sequence in route.sequences if not sequence.locked and sequence.arrival >= now]
    if not movable:
        return route

    scores = [score_stop(sequence, snapshot, profiles=profiles, config=config.scoring) for sequence in movable]
    ordered = _preference_order(scores)
    start = min(sequence.arrival for sequence in movable)
    sequences = lay_out(pinned, ordered, start=start, buffer=config.buffer)

    moved_ids = {sequence.id for sequence in movable}
    new_end = max(sequence.end for sequence in sequences if sequence.id in moved_ids)
    old_end = max(sequence.end for sequence in movable)
    limit = (shift_end or config.default_shift_end).on(route.day)
    if new_end > limit and new_end > old_end:
        logger.info(
            "Keeping original order for %s: reordered route would end at %s, after shift end %s",
            route.worker_id,
            new_end.time(),
            limit.time(),
        )
        return route

    return replace(route, sequences=tuple(sequences), weather_optimized=True)


__all__ = [
    "OptimizerConfig",
    "StopScore",
    "optimize",
    "score_stop",
    "score_stops",
]
