from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops_scheduler.db.session import get_db_session
from fieldops_scheduler.repositories import worker as worker_repo
from fieldops_scheduler.schemas.workforce import WorkerCreate, WorkerRead

router = APIRouter()


@router.get("/", response_model=list[WorkerRead])
async def list_workers(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> list[WorkerRead]:
    workers = await worker_repo.list_workers(session)
    return [WorkerRead.model_validate(worker) for worker in workers]


@router.post("/", response_model=WorkerRead, status_code=status.HTTP_201_CREATED)
async def create_worker(
    payload: WorkerCreate, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> WorkerRead:
    if await worker_repo.get_worker(session, payload.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Worker already exists")
    worker = await worker_repo.create_worker(session, payload)
    await session.commit()
    return WorkerRead.model_validate(worker)


@router.delete("/{worker_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_worker(
    worker_id: str, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> None:
    worker = await worker_repo.get_worker(session, worker_id)
    if not worker:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Worker not found")
    await worker_repo.delete_worker(session, worker)
    await session.commit()
