"""Alembic environment for the TaskFlow schema.

Migrations run through an async engine so the same asyncpg/aiosqlite drivers
serve both the API and `alembic upgrade`. `taskflow.models` is imported for its
side effect of registering every table on Base.metadata.

Design Decisions:
    - DATABASE_URL wins over alembic.ini, normalized the way Settings does it
    - SQLite connections migrate in batch mode (ALTER TABLE is limited there)
"""

import asyncio
import os
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

from taskflow.db.base import Base
import taskflow.models  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def resolve_url() -> str:
    url = os.environ.get("DATABASE_URL") or config.get_main_option("sqlalchemy.url")
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _configure_and_run(**options) -> None:
    context.configure(target_metadata=target_metadata, **options)
    with context.begin_transaction():
        context.run_migrations()


def run_offline() -> None:
    """Emit SQL for the TaskFlow tables without a live connection."""
    _configure_and_run(
        url=resolve_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )


def _run_on_connection(connection: Connection) -> None:
    _configure_and_run(
        connection=connection,
        render_as_batch=connection.dialect.name == "sqlite",
    )


async def run_online() -> None:
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = resolve_url()
    engine = async_engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_on_connection)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    asyncio.run(run_online())
