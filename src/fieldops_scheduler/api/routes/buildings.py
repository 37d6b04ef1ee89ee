from datetime import date, timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops_scheduler.db.session import get_db_session
from fieldops_scheduler.repositories import building as building_repo
from fieldops_scheduler.repositories.sources import to_window
from fieldops_scheduler.schemas.workforce import (
    BuildingCreate,
    BuildingRead,
    ComplianceWindowCreate,
    ComplianceWindowRead,
    SetOutReminderRead,
)
from fieldops_scheduler.services.compliance import set_out_reminders

router = APIRouter()


@router.get("/", response_model=list[BuildingRead])
async def list_buildings(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> list[BuildingRead]:
    buildings = await building_repo.list_buildings(session)
    return [BuildingRead.model_validate(building) for building in buildings]


@router.post("/", response_model=BuildingRead, status_code=status.HTTP_201_CREATED)
async def create_building(
    payload: BuildingCreate, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> BuildingRead:
    if await building_repo.get_building(session, payload.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Building already exists")
    building = await building_repo.create_building(session, payload)
    await session.commit()
    return BuildingRead.model_validate(building)


@router.get("/compliance/reminders", response_model=list[SetOutReminderRead])
async def list_set_out_reminders(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    day: Annotated[date | None, Query()] = None,
) -> list[SetOutReminderRead]:
    day = day or date.today()
    rows = await building_repo.list_compliance_windows(session)
    reminders = set_out_reminders([to_window(row) for row in rows], day)
    return [
        SetOutReminderRead(
            building_id=window.building_id,
            building_name=window.building_name,
            set_out_day=day,
            collection_day=day + timedelta(days=1),
            set_out_time=str(window.set_out_time),
            location=window.location,
            instructions=window.instructions,
            responsible_worker_id=window.responsible_worker_id,
        )
        for window in reminders
    ]


@router.get("/{building_id}/compliance-windows", response_model=list[ComplianceWindowRead])
async def list_compliance_windows(
    building_id: str, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> list[ComplianceWindowRead]:
    building = await building_repo.get_building(session, building_id)
    if not building:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Building not found")
    windows = await building_repo.list_compliance_windows(session, building_id)
    return [ComplianceWindowRead.model_validate(window) for window in windows]


@router.post(
    "/{building_id}/compliance-windows",
    response_model=ComplianceWindowRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_compliance_window(
    building_id: str,
    payload: ComplianceWindowCreate,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ComplianceWindowRead:
    building = await building_repo.get_building(session, building_id)
    if not building:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Building not found")
    window = await building_repo.create_compliance_window(session, building_id, payload)
    await session.commit()
    return ComplianceWindowRead.model_validate(window)
