"""Load scheduler reference data from the database."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from fieldops_scheduler.db.models.assignment import AssignmentTemplate as TemplateRow
from fieldops_scheduler.db.models.workforce import ComplianceWindow as WindowRow
from fieldops_scheduler.db.models.workforce import Worker as WorkerRow
from fieldops_scheduler.repositories import assignment as assignment_repo
from fieldops_scheduler.repositories import building as building_repo
from fieldops_scheduler.repositories import worker as worker_repo
from fieldops_scheduler.services.compliance import ComplianceWindow
from fieldops_scheduler.services.domain import AssignmentTemplate, Operation, Urgency, Worker
from fieldops_scheduler.services.recurrence import TimeOfDay, load_rule, parse_weekdays
from fieldops_scheduler.services.sources import ScheduleCatalog
from fieldops_scheduler.services.weather_profiles import TaskCategory

logger = logging.getLogger(__name__)


def _time_or_none(value: str | None) -> TimeOfDay | None:
    if not value:
        return None
    try:
        return TimeOfDay.parse(value)
    except ValueError:
        return None


def to_worker(row: WorkerRow) -> Worker:
    return Worker(
        id=row.id,
        name=row.name,
        shift_start=_time_or_none(row.shift_start),
        shift_end=_time_or_none(row.shift_end),
    )


def to_operation(data: dict) -> Operation:
    urgency = str(data.get("urgency") or "normal").upper()
    return Operation(
        name=data.get("name") or "Task",
        category=TaskCategory.from_label(data.get("category")),
        duration_minutes=max(1, int(data.get("duration_minutes") or 30)),
        requires_photo=bool(data.get("requires_photo", False)),
        urgency=Urgency[urgency] if urgency in Urgency.__members__ else Urgency.NORMAL,
    )


def to_template(row: TemplateRow) -> AssignmentTemplate:
    rule = load_rule(row.recurrence)
    if rule is None:
        logger.warning("Template %s has an unreadable recurrence '%s'", row.id, row.recurrence)
    return AssignmentTemplate(
        id=row.id,
        worker_id=row.worker_id,
        building_id=row.building_id,
        building_name=row.building.name,
        operations=tuple(to_operation(item) for item in row.operations or []),
        rule=rule,
        title=row.title,
        sequence_index=row.sequence_index,
        dependencies=tuple(row.dependencies or ()),
    )


def to_window(row: WindowRow) -> ComplianceWindow:
    try:
        days = parse_weekdays(row.collection_days)
    except ValueError:
        logger.warning("Compliance window %s has unreadable collection days", row.id)
        days = frozenset()
    return ComplianceWindow(
        building_id=row.building_id,
        building_name=row.building.name,
        collection_days=days,
        set_out_time=_time_or_none(row.set_out_time) or TimeOfDay(20, 0),
        retrieval_time=_time_or_none(row.retrieval_time) or TimeOfDay(8, 0),
        requires_retrieval=row.requires_retrieval,
        responsible_worker_id=row.responsible_worker_id,
        set_out_minutes=row.set_out_minutes,
        retrieval_minutes=row.retrieval_minutes,
        location=row.location,
        instructions=row.instructions,
    )


async def load_schedule_catalog(session: AsyncSession) -> ScheduleCatalog:
    """Read active workers, templates and compliance windows in one session."""

    workers = await worker_repo.list_workers(session, active_only=True)
    templates = await assignment_repo.list_templates(session)
    windows = await building_repo.list_compliance_windows(session)
    return ScheduleCatalog(
        workers=[to_worker(row) for row in workers],
        templates=[to_template(row) for row in templates],
        windows=[to_window(row) for row in windows],
    )
