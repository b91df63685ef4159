"""
payroll_batch.types -- Pure frozen dataclasses for batch payroll runs.

ZERO I/O.  Frozen dataclasses with enum status fields and tuples for
immutable collections.

Invariants enforced:
    - All DTOs are frozen dataclasses (immutable).
    - Item results keep the input position (``item_index``) so a batch
      result reads in submission order regardless of completion order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from uuid import UUID

from payroll_kernel.domain.values import ZERO, non_negative
from payroll_modules.payroll.models import (
    Adjustments,
    AttendanceSummary,
    PayrollRecord,
    SalaryStructure,
    ValidationResult,
)


# =============================================================================
# Status enums
# =============================================================================


class PayrollBatchStatus(str, Enum):
    """Batch-level outcome."""

    COMPLETED = "completed"  # Every item calculated
    PARTIALLY_COMPLETED = "partially_completed"  # Some items failed
    FAILED = "failed"  # No item calculated


class PayrollBatchItemStatus(str, Enum):
    """Per-employee outcome within a batch."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


# =============================================================================
# DTOs
# =============================================================================


@dataclass(frozen=True)
class PayrollBatchItem:
    """Inputs for one employee in a batch run."""

    salary_structure: SalaryStructure
    attendance: AttendanceSummary
    advance_deduction: Decimal = ZERO
    adjustments: Adjustments | None = None

    def __post_init__(self):
        object.__setattr__(
            self,
            "advance_deduction",
            non_negative(self.advance_deduction, "advance_deduction"),
        )

    @property
    def employee_id(self) -> str | None:
        return self.salary_structure.employee_id


@dataclass(frozen=True)
class PayrollBatchItemResult:
    """Result of calculating one employee.

    A failed item carries the exception's ``code`` and message; the
    record and validation are ``None``.
    """

    item_index: int  # 0-indexed position in the batch
    employee_id: str | None
    status: PayrollBatchItemStatus
    record: PayrollRecord | None = None
    validation: ValidationResult | None = None
    error_code: str | None = None
    error_message: str | None = None
    duration_ms: int = 0

    @property
    def is_valid(self) -> bool:
        return self.validation is not None and self.validation.is_valid


@dataclass(frozen=True)
class PayrollBatchResult:
    """Result of a whole batch run, returned by ``run_payroll_batch``.

    Totals cover succeeded items only.
    """

    batch_id: UUID
    payroll_period_id: str
    status: PayrollBatchStatus
    total_items: int
    succeeded: int
    failed: int
    invalid: int  # succeeded but with validation errors
    item_results: tuple[PayrollBatchItemResult, ...] = ()
    total_gross: Decimal = ZERO
    total_deductions: Decimal = ZERO
    total_net: Decimal = ZERO
    persisted: int = 0
    duration_ms: int = 0
    errors_by_code: dict[str, int] = field(default_factory=dict)

    @property
    def records(self) -> tuple[PayrollRecord, ...]:
        return tuple(r.record for r in self.item_results if r.record is not None)
