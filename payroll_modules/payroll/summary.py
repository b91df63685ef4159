"""
Pay-slip summary for a calculated ``PayrollRecord``.

Groups the deductions the way a pay slip prints them (statutory,
insurance, other) and derives two whole-number percentages.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any

from payroll_kernel.domain.values import whole_percentage
from payroll_modules.payroll.models import PayrollRecord


@dataclass(frozen=True)
class StatutoryDeductions:
    pf: Decimal
    esi: Decimal
    tds: Decimal
    professional_tax: Decimal

    @property
    def total(self) -> Decimal:
        return self.pf + self.esi + self.tds + self.professional_tax


@dataclass(frozen=True)
class InsuranceDeductions:
    health: Decimal
    term: Decimal

    @property
    def total(self) -> Decimal:
        return self.health + self.term


@dataclass(frozen=True)
class OtherDeductions:
    advance: Decimal
    other: Decimal

    @property
    def total(self) -> Decimal:
        return self.advance + self.other


@dataclass(frozen=True)
class DeductionBreakdown:
    statutory: StatutoryDeductions
    insurance: InsuranceDeductions
    other: OtherDeductions


@dataclass(frozen=True)
class SalarySummary:
    """Pay-slip view of one payroll record."""

    employee_id: str | None
    payroll_period_id: str | None
    gross_earnings: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    deduction_breakdown: DeductionBreakdown
    take_home_percentage: Decimal
    attendance_ratio_percent: Decimal

    def as_dict(self) -> dict[str, Any]:
        """Nested dict with Decimal amounts rendered as strings."""
        return _stringify(asdict(self))


def _stringify(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _stringify(item) for key, item in value.items()}
    if isinstance(value, Decimal):
        return str(value)
    return value


def generate_salary_summary(record: PayrollRecord) -> SalarySummary:
    """Build the pay-slip summary of ``record``.

    ``pf`` is the full employee PF deduction, voluntary contribution
    included, so the statutory group adds up to what was withheld.
    """
    breakdown = DeductionBreakdown(
        statutory=StatutoryDeductions(
            pf=record.pf_employee,
            esi=record.esi_employee,
            tds=record.tds_amount,
            professional_tax=record.professional_tax,
        ),
        insurance=InsuranceDeductions(
            health=record.group_health_insurance,
            term=record.term_insurance,
        ),
        other=OtherDeductions(
            advance=record.salary_advance_deduction,
            other=record.other_deductions,
        ),
    )

    return SalarySummary(
        employee_id=record.employee_id,
        payroll_period_id=record.payroll_period_id,
        gross_earnings=record.gross_earnings,
        total_deductions=record.total_deductions,
        net_pay=record.net_pay,
        deduction_breakdown=breakdown,
        take_home_percentage=whole_percentage(record.net_pay, record.gross_earnings),
        attendance_ratio_percent=whole_percentage(record.present_days, record.working_days),
    )
