"""
payroll_batch -- parallel payroll runs for a whole period.

Public surface:
    run_payroll_batch   -- calculate, validate and optionally persist
    PayrollBatchItem    -- per-employee inputs
    PayrollBatchResult  -- aggregated outcome with per-item results
"""

from payroll_batch.runner import run_payroll_batch
from payroll_batch.types import (
    PayrollBatchItem,
    PayrollBatchItemResult,
    PayrollBatchItemStatus,
    PayrollBatchResult,
    PayrollBatchStatus,
)

__all__ = [
    "PayrollBatchItem",
    "PayrollBatchItemResult",
    "PayrollBatchItemStatus",
    "PayrollBatchResult",
    "PayrollBatchStatus",
    "run_payroll_batch",
]
