from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fieldops_scheduler.services.recurrence import TimeOfDay, format_weekdays, parse_weekdays


def _normalise_time(value: str | None) -> str | None:
    if value is None:
        return None
    return str(TimeOfDay.parse(value))


class WorkerBase(BaseModel):
    name: str
    shift_start: str | None = None
    shift_end: str | None = None
    is_active: bool = True

    @field_validator("shift_start", "shift_end")
    @classmethod
    def _validate_time(cls, value: str | None) -> str | None:
        return _normalise_time(value)


class WorkerCreate(WorkerBase):
    id: str = Field(min_length=1, max_length=64)


class WorkerRead(WorkerBase):
    id: str

    model_config = ConfigDict(from_attributes=True)


class BuildingBase(BaseModel):
    name: str
    address: str | None = None


class BuildingCreate(BuildingBase):
    id: str = Field(min_length=1, max_length=64)


class BuildingRead(BuildingBase):
    id: str

    model_config = ConfigDict(from_attributes=True)


class ComplianceWindowBase(BaseModel):
    collection_days: str  # e.g. "sun,tue,thu"
    set_out_time: str = "20:00"
    retrieval_time: str = "08:00"
    requires_retrieval: bool = True
    responsible_worker_id: str | None = None
    set_out_minutes: int = Field(default=15, ge=1)
    retrieval_minutes: int = Field(default=10, ge=1)
    location: str = "curbside"
    instructions: str | None = None

    @field_validator("collection_days")
    @classmethod
    def _validate_days(cls, value: str) -> str:
        days = parse_weekdays(value)
        if not days:
            raise ValueError("At least one collection day is required")
        return format_weekdays(days)

    @field_validator("set_out_time", "retrieval_time")
    @classmethod
    def _validate_time(cls, value: str) -> str:
        return _normalise_time(value)


class ComplianceWindowCreate(ComplianceWindowBase):
    pass


class ComplianceWindowRead(ComplianceWindowBase):
    id: int
    building_id: str

    model_config = ConfigDict(from_attributes=True)


class SetOutReminderRead(BaseModel):
    building_id: str
    building_name: str
    set_out_day: date
    collection_day: date
    set_out_time: str
    location: str
    instructions: str | None = None
    responsible_worker_id: str | None = None
