from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from fieldops_scheduler.services.recurrence import describe_rule, format_rule, load_rule, parse_rule
from fieldops_scheduler.services.weather_profiles import TaskCategory

UrgencyName = Literal["low", "normal", "high", "urgent", "critical", "emergency"]


class OperationSchema(BaseModel):
    name: str
    category: TaskCategory = TaskCategory.UNKNOWN
    duration_minutes: int = Field(default=30, ge=1)
    requires_photo: bool = False
    urgency: UrgencyName = "normal"


class AssignmentTemplateBase(BaseModel):
    worker_id: str
    building_id: str
    title: str | None = None
    recurrence: str  # e.g. "daily:mon-fri@06:00"
    operations: list[OperationSchema] = Field(default_factory=list)
    sequence_index: int = 0
    dependencies: list[str] = Field(default_factory=list)


class AssignmentTemplateCreate(AssignmentTemplateBase):
    @field_validator("recurrence")
    @classmethod
    def _validate_recurrence(cls, value: str) -> str:
        return format_rule(parse_rule(value))


class AssignmentTemplateRead(AssignmentTemplateBase):
    id: str

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def schedule(self) -> str:
        return describe_rule(load_rule(self.recurrence))
