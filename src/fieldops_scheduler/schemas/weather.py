from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from fieldops_scheduler.services.weather import CurrentConditions, HourBlock, WeatherSnapshot


def _local_naive(value: datetime) -> datetime:
    # The engine clock is naive local time.
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class CurrentConditionsSchema(BaseModel):
    temperature_f: float
    wind_mph: float = Field(ge=0)
    condition: str = "unknown"


class HourBlockSchema(BaseModel):
    starts_at: datetime
    precip_probability: float = Field(ge=0, le=1)
    wind_mph: float = Field(ge=0)
    temperature_f: float
    precip_intensity: float | None = None

    @field_validator("starts_at")
    @classmethod
    def _validate_starts_at(cls, value: datetime) -> datetime:
        return _local_naive(value)


class WeatherSnapshotSchema(BaseModel):
    current: CurrentConditionsSchema
    fetched_at: datetime
    hourly: list[HourBlockSchema] = Field(default_factory=list)

    @field_validator("fetched_at")
    @classmethod
    def _validate_fetched_at(cls, value: datetime) -> datetime:
        return _local_naive(value)

    def to_domain(self) -> WeatherSnapshot:
        blocks = sorted(self.hourly, key=lambda block: block.starts_at)
        return WeatherSnapshot(
            current=CurrentConditions(**self.current.model_dump()),
            fetched_at=self.fetched_at,
            hourly=tuple(HourBlock(**block.model_dump()) for block in blocks),
        )
