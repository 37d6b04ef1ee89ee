from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from fieldops_scheduler.api.deps import get_scheduler
from fieldops_scheduler.schemas.schedule import MonthScheduleRead, WeekScheduleRead
from fieldops_scheduler.services.scheduler import FieldScheduler

router = APIRouter()


@router.get("/week", response_model=WeekScheduleRead)
async def load_week(
    scheduler: Annotated[FieldScheduler, Depends(get_scheduler)],
    reference: Annotated[date | None, Query()] = None,
    worker_id: Annotated[str | None, Query()] = None,
    building_id: Annotated[str | None, Query()] = None,
    weather_optimized: Annotated[bool, Query()] = False,
) -> WeekScheduleRead:
    schedule = await scheduler.load_week(
        reference or scheduler.clock().date(),
        worker_id=worker_id,
        building_id=building_id,
        weather_optimized=weather_optimized,
    )
    return WeekScheduleRead.from_domain(schedule)


@router.get("/month", response_model=MonthScheduleRead)
async def load_month(
    scheduler: Annotated[FieldScheduler, Depends(get_scheduler)],
    reference: Annotated[date | None, Query()] = None,
    worker_id: Annotated[str | None, Query()] = None,
    building_id: Annotated[str | None, Query()] = None,
    weather_optimized: Annotated[bool, Query()] = False,
) -> MonthScheduleRead:
    schedule = await scheduler.load_month(
        reference or scheduler.clock().date(),
        worker_id=worker_id,
        building_id=building_id,
        weather_optimized=weather_optimized,
    )
    return MonthScheduleRead.from_domain(schedule)
