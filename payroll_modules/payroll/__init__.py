"""
Payroll Module (``payroll_modules.payroll``).

Responsibility
--------------
Gross-to-net statutory payroll for one employee and one period:
attendance pro-ration, overtime, provident fund, ESI, progressive income
tax (TDS), professional tax, record validation and pay-slip summary.

Architecture position
---------------------
**Modules layer** -- value objects and settings are exported here.  The
calculator composes ``payroll_engines`` and is imported from
``payroll_modules.payroll.calculator``; the engines import the models of
this package, so the package root stays free of engine imports.

Failure modes
-------------
* ``ConfigurationError`` for impossible rates, slabs or working days.
* ``InvalidPayrollInputError`` for negative amounts, days or hours.
* Business-rule findings are returned in ``ValidationResult``, not raised.
"""

from payroll_modules.payroll.config import PayrollEngineSettings
from payroll_modules.payroll.models import (
    DEFAULT_PT_BANDS,
    Adjustments,
    AttendanceSummary,
    PayrollRecord,
    PayrollStatus,
    ProfessionalTaxBand,
    SalaryStructure,
    StatutoryRateSnapshot,
    TaxRegime,
    TaxSlab,
    ValidationResult,
)

__all__ = [
    "Adjustments",
    "AttendanceSummary",
    "DEFAULT_PT_BANDS",
    "PayrollEngineSettings",
    "PayrollRecord",
    "PayrollStatus",
    "ProfessionalTaxBand",
    "SalaryStructure",
    "StatutoryRateSnapshot",
    "TaxRegime",
    "TaxSlab",
    "ValidationResult",
]
