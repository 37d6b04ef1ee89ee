"""Mandatory waste set-out and retrieval stops derived from collection days."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable

from fieldops_scheduler.services.domain import Building, Operation, RouteSequence, StopKind, Urgency
from fieldops_scheduler.services.recurrence import TimeOfDay, Weekday
from fieldops_scheduler.services.weather_profiles import TaskCategory

logger = logging.getLogger(__name__)

DEFAULT_SET_OUT_TIME = TimeOfDay(20, 0)
DEFAULT_RETRIEVAL_TIME = TimeOfDay(8, 0)


@dataclass(frozen=True)
class ComplianceWindow:
    """Collection schedule of one building.

    Set-out happens on the evening before each collection day, retrieval on
    the morning of the collection day itself.
    """

    building_id: str
    building_name: str
    collection_days: frozenset[Weekday] = field(default_factory=frozenset)
    set_out_time: TimeOfDay = DEFAULT_SET_OUT_TIME
    retrieval_time: TimeOfDay = DEFAULT_RETRIEVAL_TIME
    requires_retrieval: bool = True
    responsible_worker_id: str | None = None
    set_out_minutes: int = 15
    retrieval_minutes: int = 10
    location: str = "curbside"
    instructions: str | None = None

    def collects_on(self, day: date) -> bool:
        return Weekday.of(day) in self.collection_days

    def assigned_to(self, worker_id: str) -> bool:
        return self.responsible_worker_id is None or self.responsible_worker_id == worker_id


def _stop_id(window: ComplianceWindow, collection_day: date, kind: StopKind) -> str:
    suffix = "set-out" if kind is StopKind.SET_OUT else "retrieval"
    return f"compliance:{window.building_id}:{collection_day.isoformat()}:{suffix}"


def _set_out_stop(window: ComplianceWindow, collection_day: date) -> RouteSequence:
    arrival = window.set_out_time.on(collection_day - timedelta(days=1))
    operation = Operation(
        name=f"Set out bins ({window.location})",
        category=TaskCategory.COMPLIANCE,
        duration_minutes=window.set_out_minutes,
        requires_photo=True,
        urgency=Urgency.CRITICAL,
    )
    return RouteSequence(
        id=_stop_id(window, collection_day, StopKind.SET_OUT),
        building_id=window.building_id,
        building_name=window.building_name,
        arrival=arrival,
        duration_minutes=max(1, window.set_out_minutes),
        operations=(operation,),
        locked=True,
        kind=StopKind.SET_OUT,
        planned_arrival=arrival,
        title=f"Set-out: {window.building_name}",
    )


def _retrieval_stop(window: ComplianceWindow, collection_day: date) -> RouteSequence:
    arrival = window.retrieval_time.on(collection_day)
    operation = Operation(
        name=f"Bring in bins ({window.location})",
        category=TaskCategory.COMPLIANCE,
        duration_minutes=window.retrieval_minutes,
        requires_photo=True,
        urgency=Urgency.CRITICAL,
    )
    return RouteSequence(
        id=_stop_id(window, collection_day, StopKind.RETRIEVAL),
        building_id=window.building_id,
        building_name=window.building_name,
        arrival=arrival,
        duration_minutes=max(1, window.retrieval_minutes),
        operations=(operation,),
        locked=True,
        kind=StopKind.RETRIEVAL,
        planned_arrival=arrival,
        title=f"Retrieval: {window.building_name}",
    )


def generate_compliance_tasks(
    building: Building,
    day: date,
    windows: Iterable[ComplianceWindow],
    *,
    holidays: Iterable[date] = (),
) -> list[RouteSequence]:
    """Locked stops owed on *day*'s route for *building*.

    *day* is the collection day: its set-out stop sits on the previous
    evening and its retrieval stop on the morning of *day*.  Collection days
    listed in *holidays* produce nothing.
    """

    skipped = set(holidays)
    tasks: list[RouteSequence] = []
    for window in windows:
        if window.building_id != building.id or not window.collects_on(day):
            continue
        if day in skipped:
            logger.debug("No collection at %s on holiday %s", building.id, day)
            continue
        tasks.append(_set_out_stop(window, day))
        if window.requires_retrieval:
            tasks.append(_retrieval_stop(window, day))
    return tasks


def set_out_reminders(windows: Iterable[ComplianceWindow], day: date) -> list[ComplianceWindow]:
    """Windows whose bins go out on the evening of *day* (collection tomorrow)."""

    tomorrow = day + timedelta(days=1)
    reminders = [window for window in windows if window.collects_on(tomorrow)]
    return sorted(reminders, key=lambda window: (window.set_out_time, window.building_name))


__all__ = [
    "DEFAULT_RETRIEVAL_TIME",
    "DEFAULT_SET_OUT_TIME",
    "ComplianceWindow",
    "generate_compliance_tasks",
    "set_out_reminders",
]
