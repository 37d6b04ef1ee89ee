"""Assemble a worker's ordered stops for one calendar day."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, time
from typing import Iterable, Sequence

from fieldops_scheduler.services.compliance import ComplianceWindow, generate_compliance_tasks
from fieldops_scheduler.services.domain import (
    AssignmentTemplate,
    Building,
    RouteSequence,
    StopKind,
    Worker,
    WorkerRoute,
    sequence_duration,
)
from fieldops_scheduler.services.holidays import sanitation_holiday_dates
from fieldops_scheduler.services.recurrence import TimeOfDay, applies_on, time_of_day
from fieldops_scheduler.services.sources import ComplianceSource, TemplateSource, WorkerDirectory
from fieldops_scheduler.services.timeline import lay_out, stagger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteBuilderConfig:
    default_shift_start: TimeOfDay = TimeOfDay(7, 0)
    default_shift_end: TimeOfDay = TimeOfDay(17, 0)
    default_stop_minutes: int = 30
    skip_holiday_collections: bool = True

    @classmethod
    def from_settings(cls, settings) -> "RouteBuilderConfig":
        return cls(
            default_shift_start=TimeOfDay.parse(settings.default_shift_start),
            default_shift_end=TimeOfDay.parse(settings.default_shift_end),
            default_stop_minutes=settings.default_stop_minutes,
            skip_holiday_collections=settings.skip_holiday_collections,
        )

    def shift_start(self, worker: Worker | None) -> TimeOfDay:
        if worker is not None and worker.shift_start is not None:
            return worker.shift_start
        return self.default_shift_start

    def shift_end(self, worker: Worker | None) -> TimeOfDay:
        if worker is not None and worker.shift_end is not None:
            return worker.shift_end
        return self.default_shift_end


def stop_id(template_id: str, day: date) -> str:
    return f"{template_id}:{day.isoformat()}"


def touched_buildings(
    templates: Iterable[AssignmentTemplate],
    windows: Iterable[ComplianceWindow] = (),
    worker_id: str | None = None,
) -> list[Building]:
    """Distinct buildings in template order, then those whose windows name *worker_id*."""

    seen: dict[str, Building] = {}
    for template in templates:
        seen.setdefault(template.building_id, template.building)
    for window in windows:
        if worker_id is not None and window.responsible_worker_id == worker_id:
            seen.setdefault(window.building_id, Building(window.building_id, window.building_name))
    return list(seen.values())


def template_order(templates: Iterable[AssignmentTemplate]) -> list[AssignmentTemplate]:
    # Stable, so configuration order breaks sequence_index ties.
    return sorted(templates, key=lambda template: template.sequence_index)


def _routine_stop(
    template: AssignmentTemplate,
    index: int,
    day: date,
    shift_start: TimeOfDay,
    config: RouteBuilderConfig,
) -> RouteSequence:
    # Untimed templates queue up from the shift start in template order.
    nominal = (time_of_day(template.rule) or shift_start).on(day)
    return RouteSequence(
        id=stop_id(template.id, day),
        building_id=template.building_id,
        building_name=template.building_name,
        arrival=nominal,
        duration_minutes=sequence_duration(template.operations, config.default_stop_minutes),
        operations=template.operations,
        locked=False,
        kind=StopKind.ROUTINE,
        sequence_index=index,
        planned_arrival=nominal,
        title=template.title,
        dependencies=tuple(stop_id(dependency, day) for dependency in template.dependencies),
    )


def assemble_route(
    worker: Worker,
    day: date,
    templates: Sequence[AssignmentTemplate],
    windows: Iterable[ComplianceWindow],
    *,
    config: RouteBuilderConfig | None = None,
) -> WorkerRoute:
    """
    Build the route for *worker* on *day* from already fetched inputs.

    Routine stops come from templates whose rule applies on *day*; compliance
    stops come from every building the worker's templates touch and from
    every window naming the worker as responsible.  Locked
    stops are placed first, routine stops keep their rule time unless an
    earlier stop is still running.
    """

    config = config or RouteBuilderConfig()
    shift_start = config.shift_start(worker)
    templates = template_order(templates)

    routine = [
        _routine_stop(template, index, day, shift_start, config)
        for index, template in enumerate(templates)
        if applies_on(template.rule, day)
    ]

    holidays = sanitation_holiday_dates(day.year) if config.skip_holiday_collections else frozenset()
    assigned = [window for window in windows if window.assigned_to(worker.id)]
    compliance: list[RouteSequence] = []
    for building in touched_buildings(templates, assigned, worker.id):
        compliance.extend(generate_compliance_tasks(building, day, assigned, holidays=holidays))
    compliance = [
        replace(stop, sequence_index=len(templates) + offset)
        for offset, stop in enumerate(compliance)
    ]

    routine.sort(key=lambda stop: (stop.planned_arrival, stop.sequence_index))
    sequences = lay_out(
        stagger(compliance),
        routine,
        start=datetime.combine(day, time.min),
        honour_nominal=True,
    )
    return WorkerRoute(worker_id=worker.id, day=day, sequences=tuple(sequences))


class RouteBuilder:
    """Fetches a worker's inputs from the injected sources and assembles the route."""

    def __init__(
        self,
        templates: TemplateSource,
        compliance: ComplianceSource,
        workers: WorkerDirectory,
        config: RouteBuilderConfig | None = None,
    ) -> None:
        self._templates = templates
        self._compliance = compliance
        self._workers = workers
        self.config = config or RouteBuilderConfig()

    async def build_route(self, worker_id: str, day: date, *, worker: Worker | None = None) -> WorkerRoute:
        if worker is None:
            worker = await self._workers.get_worker(worker_id)
        if worker is None:
            worker = Worker(id=worker_id, name=worker_id)

        templates = list(await self._templates.fetch_templates(worker_id))
        buildings = touched_buildings(templates)
        window_lists = await asyncio.gather(
            *(self._compliance.fetch_compliance_windows(building.id) for building in buildings)
        )
        windows = [window for group in window_lists for window in group]
        touched = {building.id for building in buildings}
        for window in await self._compliance.fetch_responsible_windows(worker_id):
            if window.building_id not in touched:
                windows.append(window)

        route = assemble_route(worker, day, templates, windows, config=self.config)
        logger.debug(
            "Built route for %s on %s: %d stops (%d locked)",
            worker_id,
            day,
            len(route.sequences),
            len(route.locked_sequences),
        )
        return route


__all__ = [
    "RouteBuilder",
    "RouteBuilderConfig",
    "assemble_route",
    "stop_id",
    "template_order",
    "touched_buildings",
]
