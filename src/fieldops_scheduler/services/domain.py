"""Value types shared by the route builder, optimizer and portfolio views."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from enum import Enum, IntEnum

from fieldops_scheduler.services.recurrence import RecurrenceRule, TimeOfDay
from fieldops_scheduler.services.weather_profiles import TaskCategory


class Urgency(IntEnum):
    LOW = 0
    NORMAL = 1
    HIGH = 2
    URGENT = 3
    CRITICAL = 4
    EMERGENCY = 5


class StopKind(str, Enum):
    ROUTINE = "routine"
    SET_OUT = "set_out"
    RETRIEVAL = "retrieval"


@dataclass(frozen=True)
class Operation:
    name: str
    category: TaskCategory = TaskCategory.UNKNOWN
    duration_minutes: int = 30
    requires_photo: bool = False
    urgency: Urgency = Urgency.NORMAL


@dataclass(frozen=True)
class Building:
    id: str
    name: str


@dataclass(frozen=True)
class Worker:
    id: str
    name: str
    shift_start: TimeOfDay | None = None
    shift_end: TimeOfDay | None = None


@dataclass(frozen=True)
class AssignmentTemplate:
    id: str
    worker_id: str
    building_id: str
    building_name: str
    operations: tuple[Operation, ...]
    rule: RecurrenceRule | None
    title: str | None = None
    sequence_index: int = 0
    dependencies: tuple[str, ...] = ()

    @property
    def building(self) -> Building:
        return Building(self.building_id, self.building_name)


@dataclass(frozen=True)
class RouteSequence:
    id: str
    building_id: str
    building_name: str
    arrival: datetime
    duration_minutes: int
    operations: tuple[Operation, ...] = ()
    locked: bool = False
    kind: StopKind = StopKind.ROUTINE
    sequence_index: int = 0
    planned_arrival: datetime | None = None
    title: str | None = None
    dependencies: tuple[str, ...] = ()

    @property
    def end(self) -> datetime:
        return self.arrival + timedelta(minutes=self.duration_minutes)

    @property
    def scheduled_for(self) -> datetime:
        return self.planned_arrival or self.arrival

    @property
    def label(self) -> str:
        return self.title or self.building_name

    def with_arrival(self, arrival: datetime) -> "RouteSequence":
        return replace(self, arrival=arrival)

    def overlaps(self, other: "RouteSequence") -> bool:
        return self.arrival < other.end and other.arrival < self.end


def sequence_duration(operations: tuple[Operation, ...], default_minutes: int) -> int:
    if not operations:
        return max(1, default_minutes)
    return max(1, sum(operation.duration_minutes for operation in operations))


@dataclass(frozen=True)
class WorkerRoute:
    """A worker's stops for one calendar day; identity is ``(worker_id, day)``."""

    worker_id: str
    day: date
    sequences: tuple[RouteSequence, ...] = field(default_factory=tuple)
    weather_optimized: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.sequences

    @property
    def starts_at(self) -> datetime | None:
        return self.sequences[0].arrival if self.sequences else None

    @property
    def ends_at(self) -> datetime | None:
        return max((sequence.end for sequence in self.sequences), default=None)

    @property
    def locked_sequences(self) -> tuple[RouteSequence, ...]:
        return tuple(sequence for sequence in self.sequences if sequence.locked)

    @property
    def movable_sequences(self) -> tuple[RouteSequence, ...]:
        return tuple(sequence for sequence in self.sequences if not sequence.locked)

    def active_at(self, now: datetime) -> list[RouteSequence]:
        return [sequence for sequence in self.sequences if sequence.arrival <= now <= sequence.end]

    def upcoming(self, now: datetime, limit: int = 3) -> list[RouteSequence]:
        future = [sequence for sequence in self.sequences if sequence.arrival > now]
        return future[: max(limit, 0)]


__all__ = [
    "AssignmentTemplate",
    "Building",
    "Operation",
    "RouteSequence",
    "StopKind",
    "Urgency",
    "Worker",
    "WorkerRoute",
    "sequence_duration",
]
