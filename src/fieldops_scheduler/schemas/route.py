from datetime import date, datetime

from pydantic import BaseModel

from fieldops_scheduler.schemas.weather import WeatherSnapshotSchema
from fieldops_scheduler.services.domain import Operation, RouteSequence, WorkerRoute
from fieldops_scheduler.services.optimizer import StopScore


class OperationRead(BaseModel):
    name: str
    category: str
    duration_minutes: int
    requires_photo: bool
    urgency: str

    @classmethod
    def from_domain(cls, operation: Operation) -> "OperationRead":
        return cls(
            name=operation.name,
            category=operation.category.value,
            duration_minutes=operation.duration_minutes,
            requires_photo=operation.requires_photo,
            urgency=operation.urgency.name.lower(),
        )


class RouteSequenceRead(BaseModel):
    id: str
    building_id: str
    building_name: str
    title: str
    kind: str
    locked: bool
    arrival: datetime
    end: datetime
    duration_minutes: int
    planned_arrival: datetime | None = None
    sequence_index: int
    dependencies: list[str] = []
    operations: list[OperationRead] = []
    chip: str | None = None
    advice: str | None = None
    urgent: bool = False

    @classmethod
    def from_domain(cls, sequence: RouteSequence, score: StopScore | None = None) -> "RouteSequenceRead":
        return cls(
            id=sequence.id,
            building_id=sequence.building_id,
            building_name=sequence.building_name,
            title=sequence.label,
            kind=sequence.kind.value,
            locked=sequence.locked,
            arrival=sequence.arrival,
            end=sequence.end,
            duration_minutes=sequence.duration_minutes,
            planned_arrival=sequence.planned_arrival,
            sequence_index=sequence.sequence_index,
            dependencies=list(sequence.dependencies),
            operations=[OperationRead.from_domain(operation) for operation in sequence.operations],
            chip=score.chip.value if score else None,
            advice=score.advice if score else None,
            urgent=score.is_urgent if score else False,
        )


class WorkerRouteRead(BaseModel):
    worker_id: str
    day: date
    weather_optimized: bool
    sequences: list[RouteSequenceRead]

    @classmethod
    def from_domain(cls, route: WorkerRoute, scores: list[StopScore] | None = None) -> "WorkerRouteRead":
        by_id = {item.sequence.id: item for item in scores or []}
        return cls(
            worker_id=route.worker_id,
            day=route.day,
            weather_optimized=route.weather_optimized,
            sequences=[
                RouteSequenceRead.from_domain(sequence, by_id.get(sequence.id))
                for sequence in route.sequences
            ],
        )


class OptimizeRequest(BaseModel):
    day: date | None = None
    snapshot: WeatherSnapshotSchema | None = None
