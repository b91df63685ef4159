"""
PayrollRecordRepository -- storage of calculated payroll records.

Responsibility:
    Persist and read back ``PayrollRecord`` results keyed by
    ``(employee_id, payroll_period_id)``.

Architecture position:
    Modules > Payroll -- imperative shell around the pure calculator.
    Used by ``payroll_batch.runner`` and by callers that run single
    calculations.  The calculator never calls it.

Invariants enforced:
    - One stored record per (employee, period).  ``upsert()`` replaces the
      computed values of an existing row and keeps its id, so re-running a
      period is idempotent.

Failure modes:
    - InvalidPayrollInputError: The record lacks an employee or period id.
    - PayrollRecordNotFoundError: ``get()`` for a key with no row.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from payroll_kernel.exceptions import InvalidPayrollInputError, PayrollRecordNotFoundError
from payroll_kernel.logging_config import get_logger
from payroll_modules.payroll.models import PayrollRecord
from payroll_modules.payroll.orm import PayrollRecordModel

logger = get_logger("modules.payroll.repository")


class PayrollRecordRepository:
    """
    Repository for calculated payroll records.

    Contract:
        Reads and writes ``PayrollRecordModel`` rows within the caller's
        session and flushes.

    Non-goals:
        - Does NOT call ``session.commit()`` -- caller controls boundaries.
        - Does NOT recalculate anything.

    Usage:
        with session_scope() as session:
            repo = PayrollRecordRepository(session)
            repo.upsert(record, actor_id)
    """

    def __init__(self, session: Session):
        self._session = session

    def upsert(self, record: PayrollRecord, actor_id: UUID) -> PayrollRecordModel:
        """
        Insert ``record``, or overwrite the row already stored for its key.

        Raises:
            InvalidPayrollInputError: If ``employee_id`` or
                ``payroll_period_id`` is missing.
        """
        if not record.employee_id:
            raise InvalidPayrollInputError("employee_id", record.employee_id, "is required")
        if not record.payroll_period_id:
            raise InvalidPayrollInputError(
                "payroll_period_id", record.payroll_period_id, "is required"
            )

        existing = self._find(record.employee_id, record.payroll_period_id)
        if existing is None:
            model = PayrollRecordModel.from_dto(record, created_by_id=actor_id)
            self._session.add(model)
            action = "inserted"
        else:
            existing.apply_dto(record, updated_by_id=actor_id)
            model = existing
            action = "replaced"

        self._session.flush()
        logger.info(
            "payroll_record_stored",
            extra={
                "employee_id": record.employee_id,
                "payroll_period_id": record.payroll_period_id,
                "action": action,
                "record_id": str(model.id),
                "net_pay": str(record.net_pay),
            },
        )
        return model

    def get(self, employee_id: str, payroll_period_id: str) -> PayrollRecord:
        """
        Stored record for one employee and period.

        Raises:
            PayrollRecordNotFoundError: If nothing is stored for the key.
        """
        model = self._find(employee_id, payroll_period_id)
        if model is None:
            raise PayrollRecordNotFoundError(employee_id, payroll_period_id)
        return model.to_dto()

    def list_for_period(self, payroll_period_id: str) -> list[PayrollRecord]:
        """All records of a period, ordered by employee id."""
        rows = self._session.scalars(
            select(PayrollRecordModel)
            .where(PayrollRecordModel.payroll_period_id == payroll_period_id)
            .order_by(PayrollRecordModel.employee_id)
        ).all()
        return [row.to_dto() for row in rows]

    def _find(self, employee_id: str, payroll_period_id: str) -> PayrollRecordModel | None:
        return self._session.scalars(
            select(PayrollRecordModel).where(
                PayrollRecordModel.employee_id == employee_id,
                PayrollRecordModel.payroll_period_id == payroll_period_id,
            )
        ).one_or_none()
