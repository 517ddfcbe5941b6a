"""SQLAlchemy Declarative Base — shared base class and column helpers for all ORM models.

Invariants:
    - All models inherit from Base
    - Base is the single source of truth for table metadata
    - Timestamps are timezone-aware UTC; updated_at is refreshed on every UPDATE

Design Decisions:
    - Separate file for Base: avoids circular imports between models
    - Enums stored as their wire value in VARCHAR (native_enum=False): identical on
      PostgreSQL and SQLite, no ALTER TYPE migrations when a member is added
"""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from taskflow.core.domain_types import utcnow


class Base(DeclarativeBase):
    """Base class for all TaskFlow ORM models."""
    pass


def enum_column(enum_cls: type[Enum], length: int = 20) -> SAEnum:
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=length,
        values_callable=lambda members: [m.value for m in members],
    )


class IdentityMixin:
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
