from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from fieldops_scheduler.api.deps import get_scheduler
from fieldops_scheduler.schemas.route import OptimizeRequest, RouteSequenceRead, WorkerRouteRead
from fieldops_scheduler.services.scheduler import FieldScheduler

router = APIRouter()


async def _require_worker(scheduler: FieldScheduler, worker_id: str) -> None:
    if await scheduler.workers.get_worker(worker_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Worker not found")


@router.get("/{worker_id}", response_model=WorkerRouteRead)
async def get_route(
    worker_id: str,
    scheduler: Annotated[FieldScheduler, Depends(get_scheduler)],
    day: Annotated[date | None, Query()] = None,
    weather_optimized: Annotated[bool, Query()] = False,
) -> WorkerRouteRead:
    await _require_worker(scheduler, worker_id)
    daily = await scheduler.route_for(
        worker_id, day or scheduler.clock().date(), weather_optimized=weather_optimized
    )
    return WorkerRouteRead.from_domain(daily.route, daily.scores)


@router.post("/{worker_id}/optimize", response_model=WorkerRouteRead)
async def optimize_route(
    worker_id: str,
    payload: OptimizeRequest,
    scheduler: Annotated[FieldScheduler, Depends(get_scheduler)],
) -> WorkerRouteRead:
    await _require_worker(scheduler, worker_id)
    route = await scheduler.build_route(worker_id, payload.day or scheduler.clock().date())
    snapshot = payload.snapshot.to_domain() if payload.snapshot else None
    optimized = await scheduler.optimize(route, snapshot)
    scores = scheduler.score_stops(optimized, snapshot) if snapshot is not None else []
    return WorkerRouteRead.from_domain(optimized, scores)


@router.get("/{worker_id}/upcoming", response_model=list[RouteSequenceRead])
async def list_upcoming(
    worker_id: str,
    scheduler: Annotated[FieldScheduler, Depends(get_scheduler)],
    limit: Annotated[int, Query(ge=1, le=20)] = 3,
) -> list[RouteSequenceRead]:
    await _require_worker(scheduler, worker_id)
    upcoming = await scheduler.upcoming(worker_id, limit=limit)
    return [RouteSequenceRead.from_domain(sequence) for sequence in upcoming]
