"""Entry point used by the API: route building, optimization and calendars."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable

from fieldops_scheduler.core.config import Settings
from fieldops_scheduler.services.domain import RouteSequence, WorkerRoute
from fieldops_scheduler.services.optimizer import OptimizerConfig, StopScore, optimize, score_stops
from fieldops_scheduler.services.portfolio import MonthSchedule, PortfolioAggregator, WeekSchedule
from fieldops_scheduler.services.route_builder import RouteBuilder, RouteBuilderConfig
from fieldops_scheduler.services.sources import (
    ComplianceSource,
    TemplateSource,
    WeatherProvider,
    WorkerDirectory,
)
from fieldops_scheduler.services.weather import WeatherSnapshot
from fieldops_scheduler.services.weather_profiles import WeatherProfileTable, default_profile_table


@dataclass(frozen=True)
class DailyRoute:
    route: WorkerRoute
    scores: list[StopScore] = field(default_factory=list)


class FieldScheduler:
    """
    Scheduling engine bound to its four read-only collaborators.

    Instances hold no mutable state; every call is a function of its
    arguments, the collaborators and the injected clock.
    """

    def __init__(
        self,
        templates: TemplateSource,
        weather: WeatherProvider,
        compliance: ComplianceSource,
        workers: WorkerDirectory,
        *,
        builder_config: RouteBuilderConfig | None = None,
        optimizer_config: OptimizerConfig | None = None,
        profiles: WeatherProfileTable | None = None,
        weather_timeout_seconds: float = 5.0,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.templates = templates
        self.weather = weather
        self.compliance = compliance
        self.workers = workers
        self.profiles = profiles or default_profile_table()
        self.optimizer_config = optimizer_config or OptimizerConfig()
        self.clock = clock
        self.builder = RouteBuilder(templates, compliance, workers, builder_config)
        self.portfolio = PortfolioAggregator(
            self.builder,
            workers,
            weather,
            optimizer_config=self.optimizer_config,
            profiles=self.profiles,
            weather_timeout_seconds=weather_timeout_seconds,
            clock=clock,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        templates: TemplateSource,
        weather: WeatherProvider,
        compliance: ComplianceSource,
        workers: WorkerDirectory,
        profiles: WeatherProfileTable | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> "FieldScheduler":
        return cls(
            templates,
            weather,
            compliance,
            workers,
            builder_config=RouteBuilderConfig.from_settings(settings),
            optimizer_config=OptimizerConfig.from_settings(settings),
            profiles=profiles,
            weather_timeout_seconds=settings.weather_fetch_timeout_seconds,
            clock=clock,
        )

    async def build_route(self, worker_id: str, day: date) -> WorkerRoute:
        return await self.builder.build_route(worker_id, day)

    async def optimize(self, route: WorkerRoute, snapshot: WeatherSnapshot | None) -> WorkerRoute:
        worker = await self.workers.get_worker(route.worker_id)
        return optimize(
            route,
            snapshot,
            now=self.clock(),
            shift_end=self.builder.config.shift_end(worker),
            profiles=self.profiles,
            config=self.optimizer_config,
        )

    async def route_for(self, worker_id: str, day: date, *, weather_optimized: bool = False) -> DailyRoute:
        """Daily view: build, then reorder against the live forecast when asked for today."""

        route = await self.build_route(worker_id, day)
        if not weather_optimized or route.is_empty or day != self.clock().date():
            return DailyRoute(route=route)
        snapshot = await self.portfolio.fetch_snapshot()
        optimized = await self.optimize(route, snapshot)
        scores = self.score_stops(optimized, snapshot) if snapshot is not None else []
        return DailyRoute(route=optimized, scores=scores)

    async def upcoming(self, worker_id: str, *, limit: int = 3) -> list[RouteSequence]:
        now = self.clock()
        route = await self.build_route(worker_id, now.date())
        return route.upcoming(now, limit=limit)

    async def active(self, worker_id: str) -> list[RouteSequence]:
        now = self.clock()
        route = await self.build_route(worker_id, now.date())
        return route.active_at(now)

    def score_stops(self, route: WorkerRoute, snapshot: WeatherSnapshot | None) -> list[StopScore]:
        return score_stops(route, snapshot, profiles=self.profiles, config=self.optimizer_config.scoring)

    async def load_week(
        self,
        reference: date,
        *,
        worker_id: str | None = None,
        building_id: str | None = None,
        weather_optimized: bool = False,
    ) -> WeekSchedule:
        return await self.portfolio.load_week(
            reference,
            worker_id=worker_id,
            building_id=building_id,
            weather_optimized=weather_optimized,
        )

    async def load_month(
        self,
        reference: date,
        *,
        worker_id: str | None = None,
        building_id: str | None = None,
        weather_optimized: bool = False,
    ) -> MonthSchedule:
        return await self.portfolio.load_month(
            reference,
            worker_id=worker_id,
            building_id=building_id,
            weather_optimized=weather_optimized,
        )


__all__ = ["DailyRoute", "FieldScheduler"]
