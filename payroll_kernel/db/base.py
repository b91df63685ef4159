"""
Module: payroll_kernel.db.base
Responsibility: Declarative base for the payroll ORM models: UUID primary
    keys, the annotation-to-column type map and audit columns.
Architecture position: Kernel > DB.  Imported by ORM models only; MUST NOT
    import from payroll_engines, payroll_modules or payroll_batch.

Invariants enforced:
    - Money columns are Numeric(38, 9); a ``Mapped[Decimal]`` never
      becomes a float column.
    - UUIDs are stored as 36-character strings so the same models run on
      SQLite and PostgreSQL.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import DateTime, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """``uuid.UUID`` in Python, ``VARCHAR(36)`` in the database."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else PyUUID(value)


class Base(DeclarativeBase):
    """Root of the payroll ORM; every table gets a generated UUID ``id``."""

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 9),
        datetime: DateTime(timezone=True),
        PyUUID: UUIDString(),
    }

    id: Mapped[PyUUID] = mapped_column(UUIDString(), primary_key=True, default=uuid4)


class TrackedBase(Base):
    """
    Abstract base adding who-and-when audit columns.

    ``created_*`` is written once on insert.  ``updated_at`` moves on every
    UPDATE and ``updated_by_id`` names the actor of the last recalculation.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now()
    )
    created_by_id: Mapped[PyUUID] = mapped_column(nullable=False)
    updated_by_id: Mapped[PyUUID | None] = mapped_column(nullable=True)
