"""Seed a handful of baseline records for local development.

Run this after applying Alembic migrations:

    python -m alembic upgrade head
    python scripts/seed_demo.py
"""

from __future__ import annotations

import asyncio
from datetime import date
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from fieldops_scheduler.core.config import get_settings
from fieldops_scheduler.core.logging import configure_logging
from fieldops_scheduler.db.models.assignment import AssignmentTemplate
from fieldops_scheduler.db.models.workforce import Building, ComplianceWindow, Worker
from fieldops_scheduler.repositories import assignment as assignment_repo
from fieldops_scheduler.repositories import building as building_repo
from fieldops_scheduler.repositories import worker as worker_repo
from fieldops_scheduler.repositories.sources import load_schedule_catalog
from fieldops_scheduler.schemas.assignment import AssignmentTemplateCreate
from fieldops_scheduler.schemas.workforce import BuildingCreate, ComplianceWindowCreate, WorkerCreate
from fieldops_scheduler.services.scheduler import FieldScheduler
from fieldops_scheduler.services.sources import NoWeather

WORKERS: list[dict[str, Any]] = [
    {"id": "4", "name": "Kevin Dutan", "shift_start": "06:00", "shift_end": "17:00"},
    {"id": "2", "name": "Edwin Lema", "shift_start": "06:00", "shift_end": "15:00"},
]

BUILDINGS: list[dict[str, Any]] = [
    {"id": "10", "name": "131 Perry Street", "address": "131 Perry Street, New York, NY"},
    {"id": "6", "name": "68 Perry Street", "address": "68 Perry Street, New York, NY"},
    {"id": "3", "name": "135-139 West 17th Street", "address": "135-139 West 17th Street, New York, NY"},
    {"id": "14", "name": "Rubin Museum", "address": "150 West 17th Street, New York, NY"},
]

COMPLIANCE_WINDOWS: list[tuple[str, dict[str, Any]]] = [
    ("10", {"collection_days": "sun,tue,thu", "responsible_worker_id": "4"}),
    ("6", {"collection_days": "mon,wed,fri", "responsible_worker_id": "4"}),
    ("3", {"collection_days": "sun,tue,thu", "requires_retrieval": False}),
    (
        "14",
        {
            "collection_days": "mon,thu",
            "location": "loading dock",
            "instructions": "Commercial carting, bins stay inside the gate.",
        },
    ),
]

TEMPLATES: list[dict[str, Any]] = [
    {
        "worker_id": "4",
        "building_id": "10",
        "title": "Sidewalk & curb sweep",
        "recurrence": "daily:mon-fri@06:00",
        "sequence_index": 0,
        "operations": [
            {"name": "Sidewalk sweep", "category": "cleaning", "duration_minutes": 30},
            {"name": "Hose down curb", "category": "cleaning", "duration_minutes": 15},
        ],
    },
    {
        "worker_id": "4",
        "building_id": "6",
        "title": "Hallway & stairwell clean",
        "recurrence": "weekly:mon,wed,fri@07:30",
        "sequence_index": 1,
        "operations": [
            {"name": "Stairwell mop", "category": "cleaning", "duration_minutes": 45},
            {"name": "Trash room check", "category": "sanitation", "duration_minutes": 15},
        ],
    },
    {
        "worker_id": "4",
        "building_id": "14",
        "title": "Roof drain inspection",
        "recurrence": "weekly:wed;every=2;from=2026-01-07",
        "sequence_index": 2,
        "operations": [
            {
                "name": "Roof drain check",
                "category": "maintenance",
                "duration_minutes": 30,
                "requires_photo": True,
            },
        ],
    },
    {
        "worker_id": "2",
        "building_id": "3",
        "title": "Boiler walkthrough",
        "recurrence": "daily:mon-sat@06:30",
        "sequence_index": 0,
        "operations": [
            {"name": "Boiler log", "category": "inspection", "duration_minutes": 20, "requires_photo": True},
        ],
    },
    {
        "worker_id": "2",
        "building_id": "10",
        "title": "Courtyard planters",
        "recurrence": "weekly:tue,thu@10:00",
        "sequence_index": 1,
        "operations": [
            {"name": "Water planters", "category": "maintenance", "duration_minutes": 20},
        ],
    },
]


async def seed() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    engine = create_async_engine(settings.database_url, future=True)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async with session_factory() as session:
        if not await session.scalar(select(func.count(Worker.id))):
            for data in WORKERS:
                await worker_repo.create_worker(session, WorkerCreate(**data))

        if not await session.scalar(select(func.count(Building.id))):
            for data in BUILDINGS:
                await building_repo.create_building(session, BuildingCreate(**data))

        if not await session.scalar(select(func.count(ComplianceWindow.id))):
            for building_id, data in COMPLIANCE_WINDOWS:
                await building_repo.create_compliance_window(
                    session, building_id, ComplianceWindowCreate(**data)
                )

        if not await session.scalar(select(func.count(AssignmentTemplate.id))):
            for data in TEMPLATES:
                await assignment_repo.create_template(session, AssignmentTemplateCreate(**data))

        await session.commit()
        await _print_today(session)

    await engine.dispose()
    print("Seed data inserted (skipped existing rows).")


async def _print_today(session) -> None:
    catalog = await load_schedule_catalog(session)
    scheduler = FieldScheduler.from_settings(
        get_settings(),
        templates=catalog,
        weather=NoWeather(),
        compliance=catalog,
        workers=catalog,
    )
    today = date.today()
    for worker in catalog.workers:
        route = await scheduler.build_route(worker.id, today)
        print(f"{worker.name} on {today.isoformat()}: {len(route.sequences)} stops")
        for sequence in route.sequences:
            marker = " [locked]" if sequence.locked else ""
            print(f"  {sequence.arrival:%a %H:%M}  {sequence.label}{marker}")


if __name__ == "__main__":
    asyncio.run(seed())
