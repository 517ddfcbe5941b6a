"""Schema Bootstrap — create tables straight from ORM metadata.

Invariants:
    - Meant for test fixtures and throwaway SQLite databases; deployments run Alembic
    - Every model module is imported before create_all so metadata is complete
"""

from sqlalchemy.ext.asyncio import AsyncEngine

from taskflow.db.base import Base


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables from ORM metadata (no migration history)."""
    import taskflow.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
