"""
Batch payroll runner -- one payroll period for many employees.

Responsibility:
    Calculates and validates every item of a batch in a thread pool,
    isolates per-employee failures, aggregates totals and optionally
    persists the calculated records.

Architecture position:
    Batch -- imperative shell above ``payroll_modules.payroll``.  The
    calculations are pure, so items run in parallel with no shared state.

Invariants enforced:
    - Failure isolation: an exception in one item becomes a FAILED item
      result and never aborts the batch.  An item without an employee id
      fails on its own with INVALID_PAYROLL_INPUT.
    - One item per employee: duplicate employee ids are rejected before
      any calculation runs.
    - Persistence happens after the parallel phase, on the calling
      thread, because a SQLAlchemy session is not shared across threads.

Failure modes:
    - DuplicateBatchItemError: an employee appears twice.
    - InvalidPayrollInputError: a repository is given without an actor.
    - Persistence errors propagate; the caller owns the transaction.
"""

from __future__ import annotations

import contextvars
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Sequence
from uuid import UUID, uuid4

from payroll_kernel.domain.values import ZERO
from payroll_kernel.exceptions import (
    DuplicateBatchItemError,
    InvalidPayrollInputError,
    PayrollEngineError,
)
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_modules.payroll.calculator import calculate_payroll
from payroll_modules.payroll.config import PayrollEngineSettings
from payroll_modules.payroll.models import StatutoryRateSnapshot, TaxSlab
from payroll_modules.payroll.repository import PayrollRecordRepository
from payroll_modules.payroll.validation import validate_payroll_calculation
from payroll_batch.types import (
    PayrollBatchItem,
    PayrollBatchItemResult,
    PayrollBatchItemStatus,
    PayrollBatchResult,
    PayrollBatchStatus,
)

logger = get_logger("batch.runner")

UNHANDLED_EXCEPTION = "UNHANDLED_EXCEPTION"


def _check_duplicates(items: Sequence[PayrollBatchItem]) -> None:
    seen: set[str] = set()
    for item in items:
        employee_id = item.employee_id
        if not employee_id:
            continue
        if employee_id in seen:
            raise DuplicateBatchItemError(employee_id)
        seen.add(employee_id)


def _run_item(
    index: int,
    item: PayrollBatchItem,
    statutory_rates: StatutoryRateSnapshot,
    tax_slabs: Sequence[TaxSlab],
    payroll_period_id: str,
    settings: PayrollEngineSettings | None,
) -> PayrollBatchItemResult:
    item_start = time.monotonic()
    try:
        if not item.employee_id:
            raise InvalidPayrollInputError(
                "employee_id", item.employee_id, "is required for batch items"
            )
        record = calculate_payroll(
            salary_structure=item.salary_structure,
            attendance=item.attendance,
            statutory_rates=statutory_rates,
            tax_slabs=tax_slabs,
            advance_deduction=item.advance_deduction,
            adjustments=item.adjustments,
            payroll_period_id=payroll_period_id,
            settings=settings,
        )
        validation = validate_payroll_calculation(record, settings)
        return PayrollBatchItemResult(
            item_index=index,
            employee_id=item.employee_id,
            status=PayrollBatchItemStatus.SUCCEEDED,
            record=replace(record, status=validation.status),
            validation=validation,
            duration_ms=int((time.monotonic() - item_start) * 1000),
        )
    except PayrollEngineError as exc:
        logger.warning(
            "batch_item_failed",
            extra={
                "employee_id": item.employee_id,
                "error_code": exc.code,
                "error_message": str(exc),
            },
        )
        error_code, error_message = exc.code, str(exc)
    except Exception as exc:
        logger.exception(
            "batch_item_unhandled_exception",
            extra={"employee_id": item.employee_id},
        )
        error_code, error_message = UNHANDLED_EXCEPTION, str(exc)

    return PayrollBatchItemResult(
        item_index=index,
        employee_id=item.employee_id,
        status=PayrollBatchItemStatus.FAILED,
        error_code=error_code,
        error_message=error_message,
        duration_ms=int((time.monotonic() - item_start) * 1000),
    )


def run_payroll_batch(
    items: Sequence[PayrollBatchItem],
    statutory_rates: StatutoryRateSnapshot,
    tax_slabs: Sequence[TaxSlab],
    payroll_period_id: str,
    *,
    max_workers: int | None = None,
    settings: PayrollEngineSettings | None = None,
    repository: PayrollRecordRepository | None = None,
    actor_id: UUID | None = None,
    batch_id: UUID | None = None,
) -> PayrollBatchResult:
    """
    Calculate payroll for every item of one period.

    Args:
        items: One item per employee.
        statutory_rates: Rates shared by every item.
        tax_slabs: Slab table shared by every item.
        payroll_period_id: Period stamped on every record.
        max_workers: Thread pool size; the executor default when omitted.
        settings: Engine settings shared by every item.
        repository: When given, succeeded records are upserted after the
            parallel phase.
        actor_id: Audit actor for persisted rows; required with
            ``repository``.
        batch_id: Identifier for logs; generated when omitted.

    Returns:
        PayrollBatchResult with item results in input order.
    """
    if repository is not None and actor_id is None:
        raise InvalidPayrollInputError("actor_id", None, "is required when persisting")
    _check_duplicates(items)

    batch_id = batch_id or uuid4()
    start_time = time.monotonic()

    with LogContext.bind(batch_id=batch_id, payroll_period_id=payroll_period_id):
        logger.info(
            "payroll_batch_started",
            extra={"total_items": len(items), "max_workers": max_workers},
        )

        item_results: list[PayrollBatchItemResult] = []
        if items:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                # Each task runs in its own copy of the caller's log context
                futures = [
                    pool.submit(
                        contextvars.copy_context().run,
                        _run_item,
                        index,
                        item,
                        statutory_rates,
                        tax_slabs,
                        payroll_period_id,
                        settings,
                    )
                    for index, item in enumerate(items)
                ]
                item_results = [future.result() for future in futures]

        succeeded_results = [
            r for r in item_results if r.status == PayrollBatchItemStatus.SUCCEEDED
        ]
        succeeded = len(succeeded_results)
        failed = len(item_results) - succeeded
        invalid = sum(1 for r in succeeded_results if not r.is_valid)

        if failed == 0:
            status = PayrollBatchStatus.COMPLETED
        elif succeeded == 0:
            status = PayrollBatchStatus.FAILED
        else:
            status = PayrollBatchStatus.PARTIALLY_COMPLETED

        persisted = 0
        if repository is not None:
            for result in succeeded_results:
                repository.upsert(result.record, actor_id)
                persisted += 1

        records = [r.record for r in succeeded_results]
        batch_result = PayrollBatchResult(
            batch_id=batch_id,
            payroll_period_id=payroll_period_id,
            status=status,
            total_items=len(items),
            succeeded=succeeded,
            failed=failed,
            invalid=invalid,
            item_results=tuple(item_results),
            total_gross=sum((r.gross_earnings for r in records), ZERO),
            total_deductions=sum((r.total_deductions for r in records), ZERO),
            total_net=sum((r.net_pay for r in records), ZERO),
            persisted=persisted,
            duration_ms=int((time.monotonic() - start_time) * 1000),
            errors_by_code=dict(
                Counter(r.error_code for r in item_results if r.error_code)
            ),
        )

        log = logger.info if status == PayrollBatchStatus.COMPLETED else logger.warning
        log(
            "payroll_batch_completed",
            extra={
                "status": status.value,
                "succeeded": succeeded,
                "failed": failed,
                "invalid": invalid,
                "persisted": persisted,
                "total_net": str(batch_result.total_net),
                "duration_ms": batch_result.duration_ms,
            },
        )

    return batch_result
