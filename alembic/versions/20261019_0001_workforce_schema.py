"""Workforce, building, compliance window and assignment template tables.

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "worker",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("shift_start", sa.String(length=5), nullable=True),
        sa.Column("shift_end", sa.String(length=5), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "building",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
    )

    op.create_table(
        "compliancewindow",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "building_id",
            sa.String(length=64),
            sa.ForeignKey("building.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("collection_days", sa.String(length=64), nullable=False),
        sa.Column("set_out_time", sa.String(length=5), nullable=False, server_default="20:00"),
        sa.Column("retrieval_time", sa.String(length=5), nullable=False, server_default="08:00"),
        sa.Column("requires_retrieval", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "responsible_worker_id",
            sa.String(length=64),
            sa.ForeignKey("worker.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("set_out_minutes", sa.Integer(), nullable=False, server_default=sa.text("15")),
        sa.Column("retrieval_minutes", sa.Integer(), nullable=False, server_default=sa.text("10")),
        sa.Column("location", sa.String(length=64), nullable=False, server_default="curbside"),
        sa.Column("instructions", sa.Text(), nullable=True),
    )
    op.create_index("ix_compliancewindow_building_id", "compliancewindow", ["building_id"])

    op.create_table(
        "assignmenttemplate",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column(
            "worker_id",
            sa.String(length=64),
            sa.ForeignKey("worker.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "building_id",
            sa.String(length=64),
            sa.ForeignKey("building.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=160), nullable=True),
        sa.Column("recurrence", sa.Text(), nullable=False),
        sa.Column("operations", sa.JSON(), nullable=False),
        sa.Column("sequence_index", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("dependencies", sa.JSON(), nullable=False),
    )
    op.create_index("ix_assignmenttemplate_worker_id", "assignmenttemplate", ["worker_id"])
    op.create_index("ix_assignmenttemplate_building_id", "assignmenttemplate", ["building_id"])


def downgrade() -> None:
    op.drop_index("ix_assignmenttemplate_building_id", table_name="assignmenttemplate")
    op.drop_index("ix_assignmenttemplate_worker_id", table_name="assignmenttemplate")
    op.drop_table("assignmenttemplate")
    op.drop_index("ix_compliancewindow_building_id", table_name="compliancewindow")
    op.drop_table("compliancewindow")
    op.drop_table("building")
    op.drop_table("worker")
