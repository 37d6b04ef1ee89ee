from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fieldops_scheduler.db.models.assignment import AssignmentTemplate
from fieldops_scheduler.schemas.assignment import AssignmentTemplateCreate


async def list_templates(
    session: AsyncSession, worker_id: str | None = None
) -> list[AssignmentTemplate]:
    stmt = select(AssignmentTemplate).options(selectinload(AssignmentTemplate.building))
    if worker_id is not None:
        stmt = stmt.where(AssignmentTemplate.worker_id == worker_id)
    stmt = stmt.order_by(
        AssignmentTemplate.worker_id, AssignmentTemplate.sequence_index, AssignmentTemplate.id
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_template(session: AsyncSession, template_id: str) -> AssignmentTemplate | None:
    return await session.get(AssignmentTemplate, template_id)


async def create_template(
    session: AsyncSession, payload: AssignmentTemplateCreate
) -> AssignmentTemplate:
    template = AssignmentTemplate(**payload.model_dump(mode="json"))
    session.add(template)
    await session.flush()
    await session.refresh(template)
    return template


async def delete_template(session: AsyncSession, template: AssignmentTemplate) -> None:
    await session.delete(template)
