"""Read-only collaborators the scheduler is constructed with."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Sequence

from fieldops_scheduler.services.compliance import ComplianceWindow
from fieldops_scheduler.services.domain import AssignmentTemplate, Worker
from fieldops_scheduler.services.weather import WeatherSnapshot


class TemplateSource(Protocol):
    async def fetch_templates(self, worker_id: str) -> Sequence[AssignmentTemplate]:
        """Templates in stable configuration order; empty when the worker has none."""
        ...


class WeatherProvider(Protocol):
    async def fetch_snapshot(self) -> WeatherSnapshot | None:
        """Current forecast, or ``None`` when it cannot be obtained."""
        ...


class ComplianceSource(Protocol):
    async def fetch_compliance_windows(self, building_id: str) -> Sequence[ComplianceWindow]:
        ...

    async def fetch_responsible_windows(self, worker_id: str) -> Sequence[ComplianceWindow]:
        """Windows naming *worker_id* as the responsible worker, at any building."""
        ...


class WorkerDirectory(Protocol):
    async def list_active_workers(self) -> Sequence[Worker]:
        ...

    async def get_worker(self, worker_id: str) -> Worker | None:
        ...


class NoWeather:
    """Provider used when weather lookups are disabled."""

    async def fetch_snapshot(self) -> WeatherSnapshot | None:
        return None


@dataclass
class ScheduleCatalog:
    """
    Reference data held in memory.

    Serves as template source, compliance source and worker directory at
    once; the SQL repositories load one of these per request so that
    concurrent route builds never share a database session.
    """

    workers: list[Worker] = field(default_factory=list)
    templates: list[AssignmentTemplate] = field(default_factory=list)
    windows: list[ComplianceWindow] = field(default_factory=list)

    async def fetch_templates(self, worker_id: str) -> Sequence[AssignmentTemplate]:
        return [template for template in self.templates if template.worker_id == worker_id]

    async def fetch_compliance_windows(self, building_id: str) -> Sequence[ComplianceWindow]:
        return [window for window in self.windows if window.building_id == building_id]

    async def fetch_responsible_windows(self, worker_id: str) -> Sequence[ComplianceWindow]:
        return [window for window in self.windows if window.responsible_worker_id == worker_id]

    async def list_active_workers(self) -> Sequence[Worker]:
        return list(self.workers)

    async def get_worker(self, worker_id: str) -> Worker | None:
        return next((worker for worker in self.workers if worker.id == worker_id), None)


__all__ = [
    "ComplianceSource",
    "NoWeather",
    "ScheduleCatalog",
    "TemplateSource",
    "WeatherProvider",
    "WorkerDirectory",
]
