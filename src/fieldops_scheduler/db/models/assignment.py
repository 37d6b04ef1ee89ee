from __future__ import annotations

from typing import Optional
from uuid import uuid4

from sqlalchemy import JSON, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldops_scheduler.db.base import Base
from fieldops_scheduler.db.models.workforce import Building, Worker


def _new_id() -> str:
    return uuid4().hex


class AssignmentTemplate(Base):
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    worker_id: Mapped[str] = mapped_column(
        ForeignKey("worker.id", ondelete="CASCADE"), index=True, nullable=False
    )
    building_id: Mapped[str] = mapped_column(
        ForeignKey("building.id", ondelete="CASCADE"), index=True, nullable=False
    )
    title: Mapped[Optional[str]] = mapped_column(String(160))
    # Recurrence mini-language, e.g. "daily:mon-fri@06:00".
    recurrence: Mapped[str] = mapped_column(Text, nullable=False)
    operations: Mapped[list[dict]] = mapped_column(JSON, default=list, nullable=False)
    sequence_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    dependencies: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    worker: Mapped[Worker] = relationship(back_populates="templates")
    building: Mapped[Building] = relationship(back_populates="templates")
