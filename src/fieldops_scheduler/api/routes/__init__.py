from fastapi import APIRouter

from . import buildings, daily_routes, schedule, templates, workers

api_router = APIRouter()

api_router.include_router(workers.router, prefix="/workers", tags=["workers"])
api_router.include_router(buildings.router, prefix="/buildings", tags=["buildings"])
api_router.include_router(templates.router, prefix="/templates", tags=["templates"])
api_router.include_router(daily_routes.router, prefix="/routes", tags=["routes"])
api_router.include_router(schedule.router, prefix="/schedule", tags=["schedule"])
