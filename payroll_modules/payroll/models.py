"""
Payroll Domain Models (``payroll_modules.payroll.models``).

Responsibility
--------------
Frozen dataclass value objects representing the nouns of statutory
payroll: salary structures, attendance summaries, statutory rate
snapshots, tax slabs, professional-tax bands, manual adjustments, and the
calculated payroll record with its validation result.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by
the engines in ``payroll_engines`` and by the calculator, validator and
summary functions of this module.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields are ``Decimal`` -- NEVER ``float``.  Inputs given as
  ``int``/``str``/``float`` are coerced once, at construction.
* Caller-supplied amounts, day counts and hours are non-negative.
* A ``StatutoryRateSnapshot`` with an impossible rate or limit cannot be
  constructed.

Failure modes
-------------
* Negative input amounts -> ``InvalidPayrollInputError``.
* Malformed rates, limits or professional-tax bands -> ``ConfigurationError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from decimal import Decimal
from enum import Enum
from typing import Any

from payroll_kernel.domain.values import HUNDRED, ZERO, non_negative, to_decimal
from payroll_kernel.exceptions import ConfigurationError, InvalidPayrollInputError
from payroll_kernel.logging_config import get_logger

logger = get_logger("modules.payroll.models")


class TaxRegime(str, Enum):
    """Declared income-tax regime."""
    OLD = "old"
    NEW = "new"


class PayrollStatus(str, Enum):
    """Engine-owned payroll record states.

    Approval and payment states belong to the HR workflow, not the engine.
    """
    CALCULATED = "calculated"
    INVALID = "invalid"


def _coerce_non_negative(obj: Any, names: tuple[str, ...]) -> None:
    for name in names:
        object.__setattr__(obj, name, non_negative(getattr(obj, name), name))


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SalaryStructure:
    """Fixed monthly compensation for one employee."""
    basic_salary: Decimal
    hra: Decimal = ZERO  # housing
    da: Decimal = ZERO  # dearness
    conveyance_allowance: Decimal = ZERO
    medical_allowance: Decimal = ZERO
    special_allowance: Decimal = ZERO
    performance_incentive: Decimal = ZERO
    other_allowances: Decimal = ZERO
    voluntary_pf_contribution: Decimal = ZERO
    group_health_insurance: Decimal = ZERO
    term_insurance: Decimal = ZERO
    tax_regime: TaxRegime = TaxRegime.OLD
    employee_id: str | None = None

    ALLOWANCE_FIELDS = (
        "hra",
        "da",
        "conveyance_allowance",
        "medical_allowance",
        "special_allowance",
        "performance_incentive",
        "other_allowances",
    )

    def __post_init__(self):
        _coerce_non_negative(
            self,
            ("basic_salary",) + self.ALLOWANCE_FIELDS + (
                "voluntary_pf_contribution",
                "group_health_insurance",
                "term_insurance",
            ),
        )
        object.__setattr__(self, "tax_regime", TaxRegime(self.tax_regime))

    @property
    def total_allowances(self) -> Decimal:
        """Sum of the seven named allowances."""
        return sum((getattr(self, name) for name in self.ALLOWANCE_FIELDS), ZERO)


@dataclass(frozen=True)
class AttendanceSummary:
    """Attendance for one employee in one payroll period.

    ``present_days <= working_days`` is deliberately not enforced here; the
    validator reports it so the record can still be inspected.
    """
    working_days: Decimal
    present_days: Decimal
    absent_days: Decimal = ZERO
    paid_leaves: Decimal = ZERO
    unpaid_leaves: Decimal = ZERO
    overtime_hours: Decimal = ZERO

    def __post_init__(self):
        _coerce_non_negative(
            self,
            (
                "working_days",
                "present_days",
                "absent_days",
                "paid_leaves",
                "unpaid_leaves",
                "overtime_hours",
            ),
        )

    @property
    def paid_days(self) -> Decimal:
        return self.present_days + self.paid_leaves


@dataclass(frozen=True)
class Adjustments:
    """Ad hoc extra earnings and deductions for the period."""
    earnings: Decimal = ZERO
    deductions: Decimal = ZERO

    def __post_init__(self):
        _coerce_non_negative(self, ("earnings", "deductions"))


@dataclass(frozen=True)
class ProfessionalTaxBand:
    """One professional-tax band.

    ``upper_limit`` is inclusive; ``None`` marks the open-ended top band.
    A ``capped`` band is limited by the snapshot's ``pt_monthly_limit``.
    """
    upper_limit: Decimal | None
    amount: Decimal
    capped: bool = False

    def __post_init__(self):
        if self.upper_limit is not None:
            object.__setattr__(
                self, "upper_limit", to_decimal(self.upper_limit, "upper_limit")
            )
        object.__setattr__(self, "amount", to_decimal(self.amount, "amount"))
        if self.amount < ZERO:
            raise ConfigurationError("pt_bands.amount", self.amount, "must not be negative")


DEFAULT_PT_BANDS: tuple[ProfessionalTaxBand, ...] = (
    ProfessionalTaxBand(Decimal("15000"), Decimal("0")),
    ProfessionalTaxBand(Decimal("25000"), Decimal("150")),
    ProfessionalTaxBand(Decimal("40000"), Decimal("200")),
    ProfessionalTaxBand(None, Decimal("300"), capped=True),
)


@dataclass(frozen=True)
class StatutoryRateSnapshot:
    """
    Statutory rates in force for one payroll period.

    All ``*_rate`` fields are percentages (12 means 12%).  ``eps_rate``
    defaults to ``pf_employer_rate - epf_rate``, the share of the employer
    contribution that is not routed to the retirement fund.
    """
    pf_employee_rate: Decimal = Decimal("12")
    pf_employer_rate: Decimal = Decimal("12")
    pf_wage_limit: Decimal = Decimal("15000")
    epf_rate: Decimal = Decimal("8.33")
    eps_rate: Decimal | None = None
    edli_rate: Decimal = Decimal("0.5")
    pf_admin_charges_rate: Decimal = Decimal("1.1")
    esi_employee_rate: Decimal = Decimal("0.75")
    esi_employer_rate: Decimal = Decimal("3.25")
    esi_wage_limit: Decimal = Decimal("25000")
    pt_monthly_limit: Decimal = Decimal("200")
    pt_bands: tuple[ProfessionalTaxBand, ...] = DEFAULT_PT_BANDS

    RATE_FIELDS = (
        "pf_employee_rate",
        "pf_employer_rate",
        "epf_rate",
        "edli_rate",
        "pf_admin_charges_rate",
        "esi_employee_rate",
        "esi_employer_rate",
    )
    LIMIT_FIELDS = ("pf_wage_limit", "esi_wage_limit")

    def __post_init__(self):
        for name in self.RATE_FIELDS + self.LIMIT_FIELDS + ("pt_monthly_limit",):
            object.__setattr__(self, name, self._read(name, getattr(self, name)))

        for name in self.RATE_FIELDS:
            self._check_rate(name, getattr(self, name))

        if self.eps_rate is None:
            derived = self.pf_employer_rate - self.epf_rate
            if derived < ZERO:
                raise ConfigurationError(
                    "epf_rate",
                    self.epf_rate,
                    "cannot exceed pf_employer_rate when eps_rate is derived",
                )
            object.__setattr__(self, "eps_rate", derived)
        else:
            object.__setattr__(self, "eps_rate", self._read("eps_rate", self.eps_rate))
            self._check_rate("eps_rate", self.eps_rate)

        for name in self.LIMIT_FIELDS:
            if getattr(self, name) <= ZERO:
                raise ConfigurationError(name, getattr(self, name), "must be positive")
        if self.pt_monthly_limit < ZERO:
            raise ConfigurationError(
                "pt_monthly_limit", self.pt_monthly_limit, "must not be negative"
            )

        object.__setattr__(self, "pt_bands", tuple(self.pt_bands))
        self._check_pt_bands()

        logger.debug(
            "statutory_rates_initialized",
            extra={
                "pf_employee_rate": str(self.pf_employee_rate),
                "pf_wage_limit": str(self.pf_wage_limit),
                "esi_wage_limit": str(self.esi_wage_limit),
                "pt_band_count": len(self.pt_bands),
            },
        )

    @staticmethod
    def _read(name: str, value: Any) -> Decimal:
        if value is None:
            raise ConfigurationError(name, value, "is required")
        try:
            return to_decimal(value, name)
        except InvalidPayrollInputError as exc:
            raise ConfigurationError(name, value, "must be a number") from exc

    @staticmethod
    def _check_rate(name: str, rate: Decimal) -> None:
        if rate < ZERO:
            raise ConfigurationError(name, rate, "rate cannot be negative")
        if rate > HUNDRED:
            raise ConfigurationError(name, rate, "rate cannot exceed 100 percent")

    def _check_pt_bands(self) -> None:
        if not self.pt_bands:
            raise ConfigurationError("pt_bands", self.pt_bands, "at least one band is required")
        if self.pt_bands[-1].upper_limit is not None:
            raise ConfigurationError(
                "pt_bands", self.pt_bands[-1].upper_limit, "last band must be open-ended"
            )
        limits = [band.upper_limit for band in self.pt_bands[:-1]]
        if any(limit is None for limit in limits):
            raise ConfigurationError("pt_bands", None, "only the last band may be open-ended")
        if limits != sorted(limits) or len(set(limits)) != len(limits):
            raise ConfigurationError(
                "pt_bands", limits, "upper limits must be strictly ascending"
            )

    @property
    def pf_employee_cap(self) -> Decimal:
        """Largest statutory employee PF deduction (before voluntary PF)."""
        return self.pf_wage_limit * self.pf_employee_rate / HUNDRED


@dataclass(frozen=True)
class TaxSlab:
    """One marginal income-tax bracket ``[slab_from, slab_to)`` for a regime."""
    regime: TaxRegime
    slab_from: Decimal
    slab_to: Decimal | None
    tax_rate: Decimal
    surcharge: Decimal = ZERO
    cess: Decimal | None = None  # None -> configured default cess
    is_active: bool = True

    def __post_init__(self):
        object.__setattr__(self, "regime", TaxRegime(self.regime))
        for name in ("slab_from", "tax_rate", "surcharge"):
            value = to_decimal(getattr(self, name), name)
            if value < ZERO:
                raise ConfigurationError(name, value, "must not be negative")
            object.__setattr__(self, name, value)
        if self.slab_to is not None:
            slab_to = to_decimal(self.slab_to, "slab_to")
            if slab_to <= self.slab_from:
                raise ConfigurationError("slab_to", slab_to, "must exceed slab_from")
            object.__setattr__(self, "slab_to", slab_to)
        if self.cess is not None:
            cess = to_decimal(self.cess, "cess")
            if cess < ZERO:
                raise ConfigurationError("cess", cess, "must not be negative")
            object.__setattr__(self, "cess", cess)

    @property
    def is_open_ended(self) -> bool:
        return self.slab_to is None


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PayrollRecord:
    """
    Full gross-to-net breakdown for one employee and period.

    Created once per (employee, period) by ``calculate_payroll``; never
    mutated.  Re-running the calculation with the same inputs produces an
    equal record.
    """
    # Identity
    employee_id: str | None
    payroll_period_id: str | None

    # Attendance
    working_days: Decimal
    present_days: Decimal
    absent_days: Decimal
    paid_leaves: Decimal
    unpaid_leaves: Decimal
    overtime_hours: Decimal
    attendance_ratio: Decimal
    attendance_clamped: bool

    # Earnings (pro-rated)
    basic_salary: Decimal
    hra: Decimal
    da: Decimal
    conveyance_allowance: Decimal
    medical_allowance: Decimal
    special_allowance: Decimal
    performance_incentive: Decimal
    other_allowances: Decimal
    prorated_allowances: Decimal
    overtime_pay: Decimal
    other_earnings: Decimal
    gross_earnings: Decimal
    loss_of_pay: Decimal

    # Provident fund
    pf_wage_base: Decimal
    pf_employee: Decimal
    voluntary_pf: Decimal
    pf_employer: Decimal
    epf: Decimal
    eps: Decimal
    edli: Decimal
    pf_admin_charges: Decimal

    # ESI
    esi_employee: Decimal
    esi_employer: Decimal
    esi_applicable: bool

    # Income tax
    tax_regime: TaxRegime
    annual_tax: Decimal
    tds_amount: Decimal
    effective_tax_rate: Decimal
    professional_tax: Decimal

    # Other deductions
    group_health_insurance: Decimal
    term_insurance: Decimal
    salary_advance_deduction: Decimal
    other_deductions: Decimal

    # Totals
    total_deductions: Decimal
    net_pay: Decimal
    status: PayrollStatus = PayrollStatus.CALCULATED

    @property
    def employer_contributions(self) -> Decimal:
        """Employer statutory outlay on top of gross (PF + ESI)."""
        return self.pf_employer + self.esi_employer

    @property
    def cost_to_company(self) -> Decimal:
        return self.gross_earnings + self.employer_contributions

    def as_dict(self) -> dict[str, Any]:
        """Plain dict with Decimal amounts rendered as strings."""
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Decimal):
                value = str(value)
            elif isinstance(value, Enum):
                value = value.value
            out[f.name] = value
        return out


@dataclass(frozen=True)
class ValidationResult:
    """Errors block finalization; warnings are surfaced only."""
    errors: tuple[str, ...] = field(default_factory=tuple)
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def status(self) -> PayrollStatus:
        return PayrollStatus.CALCULATED if self.is_valid else PayrollStatus.INVALID
