import pytest

from fieldops_scheduler.repositories import assignment as assignment_repo
from fieldops_scheduler.repositories import building as building_repo
from fieldops_scheduler.repositories import worker as worker_repo
from fieldops_scheduler.repositories.sources import load_schedule_catalog, to_operation
from fieldops_scheduler.services.domain import Urgency
from fieldops_scheduler.services.recurrence import TimeOfDay, Weekday
from fieldops_scheduler.services.weather_profiles import TaskCategory

from .factories import (
    build_building_create,
    build_template_create,
    build_window_create,
    build_worker_create,
)


async def _seed(session) -> None:
    await worker_repo.create_worker(session, build_worker_create())
    await worker_repo.create_worker(
        session, build_worker_create(id="9", name="Retired Worker", is_active=False)
    )
    await building_repo.create_building(session, build_building_create())
    await building_repo.create_compliance_window(
        session, "10", build_window_create(collection_days="Tue, Sun, thu", responsible_worker_id="4")
    )
    await assignment_repo.create_template(
        session,
        build_template_create(
            recurrence="weekly:fri,mon@7:30",
            operations=[
                {"name": "Stairwell mop", "category": "cleaning", "duration_minutes": 45, "urgency": "high"},
            ],
        ),
    )
    await session.commit()


@pytest.mark.anyio("asyncio")
async def test_worker_crud(session_factory) -> None:
    async with session_factory() as session:
        await worker_repo.create_worker(session, build_worker_create(shift_start="6:00"))
        await session.commit()

        stored = await worker_repo.get_worker(session, "4")
        assert stored is not None
        assert stored.shift_start == "06:00"
        assert [worker.id for worker in await worker_repo.list_workers(session)] == ["4"]

        await worker_repo.delete_worker(session, stored)
        await session.commit()
        assert await worker_repo.get_worker(session, "4") is None


@pytest.mark.anyio("asyncio")
async def test_values_are_normalised_on_create(session_factory) -> None:
    async with session_factory() as session:
        await _seed(session)

        windows = await building_repo.list_compliance_windows(session, "10")
        templates = await assignment_repo.list_templates(session, "4")

    assert [window.collection_days for window in windows] == ["tue,thu,sun"]
    assert windows[0].building.name == "131 Perry Street"
    assert len(templates) == 1
    assert templates[0].recurrence == "weekly:mon,fri@07:30"
    assert templates[0].operations[0]["category"] == "cleaning"


@pytest.mark.anyio("asyncio")
async def test_load_schedule_catalog_converts_rows(session_factory) -> None:
    async with session_factory() as session:
        await _seed(session)
        catalog = await load_schedule_catalog(session)

    assert [worker.id for worker in catalog.workers] == ["4"]
    worker = catalog.workers[0]
    assert worker.shift_start == TimeOfDay(6, 0)
    assert worker.shift_end == TimeOfDay(17, 0)

    template = catalog.templates[0]
    assert template.building_name == "131 Perry Street"
    assert template.rule is not None
    assert template.rule.weekdays == frozenset({Weekday.MONDAY, Weekday.FRIDAY})
    assert template.operations[0].category is TaskCategory.CLEANING
    assert template.operations[0].urgency is Urgency.HIGH

    window = catalog.windows[0]
    assert window.collection_days == frozenset({Weekday.SUNDAY, Weekday.TUESDAY, Weekday.THURSDAY})
    assert window.set_out_time == TimeOfDay(20, 0)
    assert window.responsible_worker_id == "4"

    assert await catalog.get_worker("9") is None
    assert len(await catalog.fetch_templates("4")) == 1
    assert len(await catalog.fetch_compliance_windows("10")) == 1


def test_to_operation_tolerates_sparse_rows() -> None:
    operation = to_operation({"name": "Odd job", "category": "gardening", "urgency": "whenever"})

    assert operation.category is TaskCategory.UNKNOWN
    assert operation.urgency is Urgency.NORMAL
    assert operation.duration_minutes == 30
