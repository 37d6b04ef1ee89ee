from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldops_scheduler.db.base import Base

if TYPE_CHECKING:
    from fieldops_scheduler.db.models.assignment import AssignmentTemplate


class Worker(Base):
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    shift_start: Mapped[Optional[str]] = mapped_column(String(5))
    shift_end: Mapped[Optional[str]] = mapped_column(String(5))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=sa.func.now(), nullable=False)

    templates: Mapped[list["AssignmentTemplate"]] = relationship(
        back_populates="worker", cascade="all, delete-orphan"
    )


class Building(Base):
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(Text)

    compliance_windows: Mapped[list["ComplianceWindow"]] = relationship(
        back_populates="building", cascade="all, delete-orphan"
    )
    templates: Mapped[list["AssignmentTemplate"]] = relationship(
        back_populates="building", cascade="all, delete-orphan"
    )


class ComplianceWindow(Base):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    building_id: Mapped[str] = mapped_column(
        ForeignKey("building.id", ondelete="CASCADE"), index=True, nullable=False
    )
    collection_days: Mapped[str] = mapped_column(String(64), nullable=False)
    set_out_time: Mapped[str] = mapped_column(String(5), default="20:00", nullable=False)
    retrieval_time: Mapped[str] = mapped_column(String(5), default="08:00", nullable=False)
    requires_retrieval: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    responsible_worker_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("worker.id", ondelete="SET NULL")
    )
    set_out_minutes: Mapped[int] = mapped_column(Integer, default=15, nullable=False)
    retrieval_minutes: Mapped[int] = mapped_column(Integer, default=10, nullable=False)
    location: Mapped[str] = mapped_column(String(64), default="curbside", nullable=False)
    instructions: Mapped[Optional[str]] = mapped_column(Text)

    building: Mapped[Building] = relationship(back_populates="compliance_windows")
