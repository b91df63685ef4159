"""
Module: payroll_engines
Responsibility:
    Package entrypoint that re-exports all public symbols from the pure
    statutory calculation engines.  This is the canonical import surface
    for the payroll calculator (``payroll_modules.payroll.calculator``).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May import payroll_kernel and the payroll value objects in
    ``payroll_modules.payroll.models``.
    MUST NOT import the calculator, the ORM, or payroll_batch.

Invariants enforced:
    - Purity: engines never read the clock or the environment.
    - Decimal-only arithmetic: all monetary amounts use ``Decimal``.
    - One rounding rule: whole currency units, ROUND_HALF_UP, applied
      once per stage via ``payroll_kernel.domain.values.round_currency``.
    - Determinism: identical inputs always produce identical outputs.

Failure modes:
    - ConfigurationError for impossible configuration (zero working days,
      non-contiguous slabs, missing mandatory slabs).
    - InvalidPayrollInputError for negative amounts, hours or days.

Audit relevance:
    Every engine invocation is traced via ``@traced_engine`` (see
    ``payroll_engines.tracer``), emitting PAYROLL_ENGINE_TRACE log
    records with engine name, version, input fingerprint and duration.
"""

from payroll_engines.attendance import AttendanceProration, prorate_attendance
from payroll_engines.esi import EsiContribution, calculate_esi
from payroll_engines.income_tax import (
    SlabTaxLine,
    TdsResult,
    calculate_tds,
    compare_regimes,
    select_slabs,
)
from payroll_engines.overtime import calculate_overtime_pay, hourly_rate
from payroll_engines.professional_tax import calculate_professional_tax, find_band
from payroll_engines.provident_fund import (
    ProvidentFundContribution,
    calculate_provident_fund,
)

__all__ = [
    "AttendanceProration",
    "prorate_attendance",
    "calculate_overtime_pay",
    "hourly_rate",
    "ProvidentFundContribution",
    "calculate_provident_fund",
    "EsiContribution",
    "calculate_esi",
    "SlabTaxLine",
    "TdsResult",
    "calculate_tds",
    "compare_regimes",
    "select_slabs",
    "calculate_professional_tax",
    "find_band",
]
