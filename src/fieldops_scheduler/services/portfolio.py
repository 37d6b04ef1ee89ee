"""Week and month calendars across the whole workforce."""

from __future__ import annotations

import asyncio
import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Callable, Iterable

from fieldops_scheduler.services.domain import StopKind, Worker, WorkerRoute
from fieldops_scheduler.services.optimizer import OptimizerConfig, optimize
from fieldops_scheduler.services.recurrence import Weekday
from fieldops_scheduler.services.route_builder import RouteBuilder
from fieldops_scheduler.services.sources import WeatherProvider, WorkerDirectory
from fieldops_scheduler.services.weather import WeatherSnapshot
from fieldops_scheduler.services.weather_profiles import WeatherProfileTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleItem:
    day: date
    start: datetime
    end: datetime
    building_id: str
    building_name: str
    worker_id: str
    worker_name: str
    title: str
    task_count: int
    locked: bool = False
    kind: StopKind = StopKind.ROUTINE


@dataclass
class WeekSchedule:
    start: date
    days: dict[Weekday, list[ScheduleItem]] = field(default_factory=dict)

    @property
    def items(self) -> list[ScheduleItem]:
        return [item for weekday in sorted(self.days) for item in self.days[weekday]]


@dataclass
class MonthSchedule:
    month: date
    days: dict[int, list[ScheduleItem]] = field(default_factory=dict)

    @property
    def items(self) -> list[ScheduleItem]:
        return [item for day in sorted(self.days) for item in self.days[day]]


def week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def week_days(reference: date) -> list[date]:
    first = week_start(reference)
    return [first + timedelta(days=offset) for offset in range(7)]


def month_days(reference: date) -> list[date]:
    _, total = calendar.monthrange(reference.year, reference.month)
    return [date(reference.year, reference.month, day) for day in range(1, total + 1)]


def route_items(route: WorkerRoute, worker: Worker) -> list[ScheduleItem]:
    return [
        ScheduleItem(
            day=route.day,
            start=sequence.arrival,
            end=sequence.end,
            building_id=sequence.building_id,
            building_name=sequence.building_name,
            worker_id=worker.id,
            worker_name=worker.name,
            title=sequence.label,
            task_count=len(sequence.operations),
            locked=sequence.locked,
            kind=sequence.kind,
        )
        for sequence in route.sequences
    ]


class PortfolioAggregator:
    """Fans the route builder (and optimizer, for today) out over every active worker."""

    def __init__(
        self,
        builder: RouteBuilder,
        workers: WorkerDirectory,
        weather: WeatherProvider,
        *,
        optimizer_config: OptimizerConfig | None = None,
        profiles: WeatherProfileTable | None = None,
        weather_timeout_seconds: float = 5.0,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._builder = builder
        self._workers = workers
        self._weather = weather
        self._optimizer_config = optimizer_config or OptimizerConfig()
        self._profiles = profiles
        self._weather_timeout = weather_timeout_seconds
        self._clock = clock

    async def load_week(
        self,
        reference: date,
        *,
        worker_id: str | None = None,
        building_id: str | None = None,
        weather_optimized: bool = False,
    ) -> WeekSchedule:
        days = week_days(reference)
        grouped = await self._collect(days, worker_id, building_id, weather_optimized)
        return WeekSchedule(
            start=days[0],
            days={Weekday.of(day): grouped[day] for day in days},
        )

    async def load_month(
        self,
        reference: date,
        *,
        worker_id: str | None = None,
        building_id: str | None = None,
        weather_optimized: bool = False,
    ) -> MonthSchedule:
        days = month_days(reference)
        grouped = await self._collect(days, worker_id, building_id, weather_optimized)
        return MonthSchedule(
            month=days[0],
            days={day.day: grouped[day] for day in days},
        )

    async def fetch_snapshot(self) -> WeatherSnapshot | None:
        """Single bounded weather read shared by every worker in a pass."""

        try:
            return await asyncio.wait_for(self._weather.fetch_snapshot(), timeout=self._weather_timeout)
        except asyncio.TimeoutError:
            logger.warning("Weather fetch timed out after %.1fs; skipping optimization", self._weather_timeout)
        except Exception:
            logger.warning("Weather fetch failed; skipping optimization", exc_info=True)
        return None

    async def _collect(
        self,
        days: list[date],
        worker_id: str | None,
        building_id: str | None,
        weather_optimized: bool,
    ) -> dict[date, list[ScheduleItem]]:
        now = self._clock()
        workers = [
            worker
            for worker in await self._workers.list_active_workers()
            if worker_id is None or worker.id == worker_id
        ]

        snapshot = None
        if weather_optimized and now.date() in days:
            snapshot = await self.fetch_snapshot()

        pairs = [(day, worker) for day in days for worker in workers]
        results = await asyncio.gather(
            *(self._worker_day(worker, day, snapshot, now) for day, worker in pairs)
        )

        grouped: dict[date, list[ScheduleItem]] = {day: [] for day in days}
        for (day, _), items in zip(pairs, results):
            grouped[day].extend(_filter_building(items, building_id))
        for items in grouped.values():
            items.sort(key=lambda item: (item.start, item.worker_id))
        return grouped

    async def _worker_day(
        self,
        worker: Worker,
        day: date,
        snapshot: WeatherSnapshot | None,
        now: datetime,
    ) -> list[ScheduleItem]:
        try:
            route = await self._builder.build_route(worker.id, day, worker=worker)
        except Exception:
            logger.warning("Route build failed for worker %s on %s", worker.id, day, exc_info=True)
            return []
        if snapshot is not None and day == now.date():
            route = optimize(
                route,
                snapshot,
                now=now,
                shift_end=self._builder.config.shift_end(worker),
                profiles=self._profiles,
                config=self._optimizer_config,
            )
        return route_items(route, worker)


def _filter_building(items: Iterable[ScheduleItem], building_id: str | None) -> list[ScheduleItem]:
    if building_id is None:
        return list(items)
    return [item for item in items if item.building_id == building_id]


__all__ = [
    "MonthSchedule",
    "PortfolioAggregator",
    "ScheduleItem",
    "WeekSchedule",
    "month_days",
    "route_items",
    "week_days",
    "week_start",
]
