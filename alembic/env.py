from __future__ import annotations

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from fieldops_scheduler.core.config import get_settings
from fieldops_scheduler.db.base import Base
from fieldops_scheduler.db import models  # noqa: F401  # registers the workforce tables

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# Async drivers and the synchronous driver offline mode falls back to.
_SYNC_DRIVERS = {"+asyncpg": "", "+aiosqlite": ""}


def _database_url(*, async_driver: bool) -> str:
    url = config.get_main_option("sqlalchemy.url") or get_settings().database_url
    if async_driver:
        return url
    for marker, replacement in _SYNC_DRIVERS.items():
        url = url.replace(marker, replacement)
    return url


def run_migrations_offline() -> None:
    """Emit the schema as SQL without a live database."""
    context.configure(
        url=_database_url(async_driver=False),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine: AsyncEngine = create_async_engine(
        _database_url(async_driver=True), poolclass=pool.NullPool
    )

    async with engine.begin() as connection:
        await connection.run_sync(do_run_migrations)

    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
