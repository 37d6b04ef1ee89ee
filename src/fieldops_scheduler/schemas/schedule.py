from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from fieldops_scheduler.services.domain import StopKind
from fieldops_scheduler.services.portfolio import MonthSchedule, WeekSchedule


class ScheduleItemRead(BaseModel):
    day: date
    start: datetime
    end: datetime
    building_id: str
    building_name: str
    worker_id: str
    worker_name: str
    title: str
    task_count: int
    locked: bool
    kind: StopKind

    model_config = ConfigDict(from_attributes=True)


class WeekScheduleRead(BaseModel):
    start: date
    days: dict[str, list[ScheduleItemRead]]

    @classmethod
    def from_domain(cls, schedule: WeekSchedule) -> "WeekScheduleRead":
        return cls(
            start=schedule.start,
            days={
                weekday.short_name.lower(): [ScheduleItemRead.model_validate(item) for item in items]
                for weekday, items in sorted(schedule.days.items())
            },
        )


class MonthScheduleRead(BaseModel):
    month: str  # YYYY-MM
    days: dict[int, list[ScheduleItemRead]]

    @classmethod
    def from_domain(cls, schedule: MonthSchedule) -> "MonthScheduleRead":
        return cls(
            month=schedule.month.strftime("%Y-%m"),
            days={
                day: [ScheduleItemRead.model_validate(item) for item in items]
                for day, items in sorted(schedule.days.items())
            },
        )
