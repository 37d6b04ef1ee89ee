from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops_scheduler.db.models.workforce import Worker
from fieldops_scheduler.schemas.workforce import WorkerCreate


async def list_workers(session: AsyncSession, *, active_only: bool = False) -> list[Worker]:
    stmt = select(Worker).order_by(Worker.name, Worker.id)
    if active_only:
        stmt = stmt.where(Worker.is_active.is_(True))
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_worker(session: AsyncSession, worker_id: str) -> Worker | None:
    return await session.get(Worker, worker_id)


async def create_worker(session: AsyncSession, payload: WorkerCreate) -> Worker:
    worker = Worker(**payload.model_dump())
    session.add(worker)
    await session.flush()
    await session.refresh(worker)
    return worker


async def delete_worker(session: AsyncSession, worker: Worker) -> None:
    await session.delete(worker)
