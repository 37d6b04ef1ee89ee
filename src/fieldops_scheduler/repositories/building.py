from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fieldops_scheduler.db.models.workforce import Building, ComplianceWindow
from fieldops_scheduler.schemas.workforce import BuildingCreate, ComplianceWindowCreate


async def list_buildings(session: AsyncSession) -> list[Building]:
    result = await session.execute(select(Building).order_by(Building.name, Building.id))
    return list(result.scalars().all())


async def get_building(session: AsyncSession, building_id: str) -> Building | None:
    return await session.get(Building, building_id)


async def create_building(session: AsyncSession, payload: BuildingCreate) -> Building:
    building = Building(**payload.model_dump())
    session.add(building)
    await session.flush()
    await session.refresh(building)
    return building


async def list_compliance_windows(
    session: AsyncSession, building_id: str | None = None
) -> list[ComplianceWindow]:
    stmt = select(ComplianceWindow).options(selectinload(ComplianceWindow.building))
    if building_id is not None:
        stmt = stmt.where(ComplianceWindow.building_id == building_id)
    result = await session.execute(stmt.order_by(ComplianceWindow.id))
    return list(result.scalars().all())


async def create_compliance_window(
    session: AsyncSession, building_id: str, payload: ComplianceWindowCreate
) -> ComplianceWindow:
    window = ComplianceWindow(building_id=building_id, **payload.model_dump())
    session.add(window)
    await session.flush()
    await session.refresh(window)
    return window
