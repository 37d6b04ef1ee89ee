from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops_scheduler.db.session import get_db_session
from fieldops_scheduler.repositories import assignment as assignment_repo
from fieldops_scheduler.repositories import building as building_repo
from fieldops_scheduler.repositories import worker as worker_repo
from fieldops_scheduler.schemas.assignment import AssignmentTemplateCreate, AssignmentTemplateRead

router = APIRouter()


@router.get("/", response_model=list[AssignmentTemplateRead])
async def list_templates(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    worker_id: Annotated[str | None, Query()] = None,
) -> list[AssignmentTemplateRead]:
    templates = await assignment_repo.list_templates(session, worker_id)
    return [AssignmentTemplateRead.model_validate(template) for template in templates]


@router.post("/", response_model=AssignmentTemplateRead, status_code=status.HTTP_201_CREATED)
async def create_template(
    payload: AssignmentTemplateCreate, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> AssignmentTemplateRead:
    if not await worker_repo.get_worker(session, payload.worker_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Worker not found")
    if not await building_repo.get_building(session, payload.building_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Building not found")
    template = await assignment_repo.create_template(session, payload)
    await session.commit()
    return AssignmentTemplateRead.model_validate(template)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: str, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> None:
    template = await assignment_repo.get_template(session, template_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    await assignment_repo.delete_template(session, template)
    await session.commit()
