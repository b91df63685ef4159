"""
Typed Exception Hierarchy for the Payroll Engine.

===============================================================================
TWO ERROR CHANNELS
===============================================================================

Payroll separates two kinds of failure:

  1. Business-rule findings on a calculated record (net pay mismatch,
     present days above working days, suspicious PF). These are RETURNED
     as a ValidationResult by the validator, never raised.

  2. Contract violations by the caller (zero working days, a malformed
     statutory rate snapshot, a missing tax-slab table when tax is
     mandatory). These are RAISED as the typed exceptions below. Falling
     back to zero tax or zero PF on bad configuration is a compliance
     risk, so these fail loudly.

Every exception carries a class-level ``code`` and stores its context as
attributes so that logs and batch results can report it without parsing
the message.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    PayrollEngineError (base)
    |
    +-- ConfigurationError
    |   +-- InvalidWorkingDaysError
    |   +-- MissingTaxSlabsError
    |   +-- TaxSlabOverlapError
    |
    +-- InvalidPayrollInputError
    |
    +-- PayrollPersistenceError
    |   +-- PayrollRecordNotFoundError
    |
    +-- BatchError
        +-- DuplicateBatchItemError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Configuration   | CONFIGURATION_ERROR         | Malformed rate snapshot or settings
                | INVALID_WORKING_DAYS        | working_days <= 0
                | MISSING_TAX_SLABS           | No active slabs for a mandatory regime
                | TAX_SLAB_OVERLAP            | Active slabs overlap or leave a gap
----------------|-----------------------------|-----------------------------------------
Input           | INVALID_PAYROLL_INPUT       | Negative amount, day count or hours
----------------|-----------------------------|-----------------------------------------
Persistence     | PAYROLL_RECORD_NOT_FOUND    | No stored record for (employee, period)
----------------|-----------------------------|-----------------------------------------
Batch           | DUPLICATE_BATCH_ITEM        | Same employee twice in one batch
"""

from __future__ import annotations

from typing import Any


class PayrollEngineError(Exception):
    """
    Base exception for all payroll engine errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "PAYROLL_ENGINE_ERROR"


# Configuration exceptions


class ConfigurationError(PayrollEngineError):
    """Statutory configuration or engine settings are malformed."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid configuration for {field}={value!r}: {reason}")


class InvalidWorkingDaysError(ConfigurationError):
    """A payroll period with zero or negative working days."""

    code: str = "INVALID_WORKING_DAYS"

    def __init__(self, working_days: Any):
        self.working_days = working_days
        super().__init__(
            "working_days",
            working_days,
            "working days must be positive to pro-rate salary",
        )


class MissingTaxSlabsError(ConfigurationError):
    """No active tax slabs exist for a regime whose tax is mandatory."""

    code: str = "MISSING_TAX_SLABS"

    def __init__(self, regime: str):
        self.regime = regime
        super().__init__(
            "tax_slabs",
            regime,
            f"no active tax slabs for regime '{regime}'",
        )


class TaxSlabOverlapError(ConfigurationError):
    """Active slabs for one regime overlap or leave a gap."""

    code: str = "TAX_SLAB_OVERLAP"

    def __init__(self, regime: str, previous_to: Any, next_from: Any):
        self.regime = regime
        self.previous_to = previous_to
        self.next_from = next_from
        super().__init__(
            "tax_slabs",
            regime,
            f"slab ending at {previous_to} is followed by slab starting "
            f"at {next_from}; active slabs must be contiguous",
        )


# Input exceptions


class InvalidPayrollInputError(PayrollEngineError):
    """Caller-supplied payroll input violates its contract."""

    code: str = "INVALID_PAYROLL_INPUT"

    def __init__(self, field: str, value: Any, reason: str = "must not be negative"):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid payroll input {field}={value!r}: {reason}")


# Persistence exceptions


class PayrollPersistenceError(PayrollEngineError):
    """Base exception for the payroll record store."""

    code: str = "PAYROLL_PERSISTENCE_ERROR"


class PayrollRecordNotFoundError(PayrollPersistenceError):
    """No payroll record is stored for the employee and period."""

    code: str = "PAYROLL_RECORD_NOT_FOUND"

    def __init__(self, employee_id: str, payroll_period_id: str):
        self.employee_id = employee_id
        self.payroll_period_id = payroll_period_id
        super().__init__(
            f"Payroll record not found for employee {employee_id} "
            f"in period {payroll_period_id}"
        )


# Batch exceptions


class BatchError(PayrollEngineError):
    """Base exception for batch payroll runs."""

    code: str = "BATCH_ERROR"


class DuplicateBatchItemError(BatchError):
    """The same employee appears more than once in a batch."""

    code: str = "DUPLICATE_BATCH_ITEM"

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(f"Employee {employee_id} appears more than once in batch")
