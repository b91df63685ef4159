"""
Payroll Calculator (``payroll_modules.payroll.calculator``).

Responsibility
--------------
Compose the statutory engines into one gross-to-net ``PayrollRecord`` for
an employee and period.

Stage order is fixed:

    pro-ration -> overtime -> PF -> provisional gross -> ESI -> TDS -> PT

PF is a deduction from net pay, not from the gross used for ESI, TDS and
PT eligibility, so gross is assembled before any deduction is applied.

Architecture position
---------------------
**Modules layer** -- pure orchestration over ``payroll_engines``.  No I/O,
no clock, no database access.

Invariants enforced
-------------------
* ``net_pay == gross_earnings - total_deductions`` exactly; every input to
  that subtraction was already rounded at its own stage.
* Same inputs produce an equal record (no randomness, no clock).

Failure modes
-------------
* ``InvalidWorkingDaysError`` for a period with no working days.
* ``InvalidPayrollInputError`` for a negative advance recovery.
* ``MissingTaxSlabsError`` / ``TaxSlabOverlapError`` from the tax engine.
"""

from __future__ import annotations

import time
from decimal import Decimal
from typing import Sequence

from payroll_engines.attendance import prorate_attendance
from payroll_engines.esi import calculate_esi
from payroll_engines.income_tax import calculate_tds
from payroll_engines.overtime import calculate_overtime_pay
from payroll_engines.professional_tax import calculate_professional_tax
from payroll_engines.provident_fund import calculate_provident_fund
from payroll_kernel.domain.values import MONTHS_PER_YEAR, ZERO, non_negative
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_modules.payroll.config import PayrollEngineSettings
from payroll_modules.payroll.models import (
    Adjustments,
    AttendanceSummary,
    PayrollRecord,
    PayrollStatus,
    SalaryStructure,
    StatutoryRateSnapshot,
    TaxSlab,
)

logger = get_logger("modules.payroll.calculator")

_DEFAULT_SETTINGS = PayrollEngineSettings()


def calculate_payroll(
    salary_structure: SalaryStructure,
    attendance: AttendanceSummary,
    statutory_rates: StatutoryRateSnapshot,
    tax_slabs: Sequence[TaxSlab],
    advance_deduction: Decimal = ZERO,
    adjustments: Adjustments | None = None,
    *,
    payroll_period_id: str | None = None,
    settings: PayrollEngineSettings | None = None,
) -> PayrollRecord:
    """
    Calculate the payroll record for one employee and period.

    Args:
        salary_structure: Fixed monthly compensation and declared regime.
        attendance: Working/present/leave days and overtime hours.
        statutory_rates: PF, ESI and PT rates in force for the period.
        tax_slabs: Progressive tax slab table (all regimes).
        advance_deduction: Salary-advance recovery for this period.
        adjustments: Ad hoc extra earnings and deductions.
        payroll_period_id: Carried onto the record for persistence.
        settings: Engine constants; defaults when omitted.

    Returns:
        PayrollRecord with status ``CALCULATED``.
    """
    settings = settings or _DEFAULT_SETTINGS
    adjustments = adjustments or Adjustments()
    advance = non_negative(advance_deduction, "advance_deduction")

    with LogContext.bind(
        employee_id=salary_structure.employee_id,
        payroll_period_id=payroll_period_id,
    ):
        t0 = time.monotonic()
        logger.info(
            "payroll_calculation_started",
            extra={
                "tax_regime": salary_structure.tax_regime.value,
                "working_days": str(attendance.working_days),
                "paid_days": str(attendance.paid_days),
            },
        )

        proration = prorate_attendance(
            basic_salary=salary_structure.basic_salary,
            allowances=salary_structure.total_allowances,
            working_days=attendance.working_days,
            present_days=attendance.present_days,
            paid_leaves=attendance.paid_leaves,
        )

        overtime_pay = calculate_overtime_pay(
            prorated_basic=proration.prorated_basic,
            overtime_hours=attendance.overtime_hours,
            multiplier=settings.overtime_multiplier,
            working_days_per_month=settings.working_days_per_month,
            hours_per_day=settings.hours_per_day,
        )

        pf = calculate_provident_fund(
            prorated_basic=proration.prorated_basic,
            rates=statutory_rates,
            voluntary_contribution=salary_structure.voluntary_pf_contribution,
        )

        gross = proration.prorated_gross + overtime_pay + adjustments.earnings

        esi = calculate_esi(gross_earnings=gross, rates=statutory_rates)

        tds = calculate_tds(
            annual_gross=gross * MONTHS_PER_YEAR,
            tax_slabs=tax_slabs,
            regime=salary_structure.tax_regime,
            default_cess_rate=settings.default_cess_rate,
            require_slabs=settings.require_tax_slabs,
        )

        professional_tax = calculate_professional_tax(
            gross_earnings=gross, rates=statutory_rates
        )

        total_deductions = (
            pf.employee_total
            + esi.employee
            + tds.monthly_tds
            + professional_tax
            + salary_structure.group_health_insurance
            + salary_structure.term_insurance
            + advance
            + adjustments.deductions
        )
        net_pay = gross - total_deductions

        record = PayrollRecord(
            employee_id=salary_structure.employee_id,
            payroll_period_id=payroll_period_id,
            working_days=attendance.working_days,
            present_days=attendance.present_days,
            absent_days=attendance.absent_days,
            paid_leaves=attendance.paid_leaves,
            unpaid_leaves=attendance.unpaid_leaves,
            overtime_hours=attendance.overtime_hours,
            attendance_ratio=proration.reported_ratio,
            attendance_clamped=proration.was_clamped,
            basic_salary=proration.prorated_basic,
            hra=proration.scale(salary_structure.hra),
            da=proration.scale(salary_structure.da),
            conveyance_allowance=proration.scale(salary_structure.conveyance_allowance),
            medical_allowance=proration.scale(salary_structure.medical_allowance),
            special_allowance=proration.scale(salary_structure.special_allowance),
            performance_incentive=proration.scale(salary_structure.performance_incentive),
            other_allowances=proration.scale(salary_structure.other_allowances),
            prorated_allowances=proration.prorated_allowances,
            overtime_pay=overtime_pay,
            other_earnings=adjustments.earnings,
            gross_earnings=gross,
            loss_of_pay=proration.loss_of_pay,
            pf_wage_base=pf.wage_base,
            pf_employee=pf.employee_total,
            voluntary_pf=pf.voluntary,
            pf_employer=pf.employer_total,
            epf=pf.epf,
            eps=pf.eps,
            edli=pf.edli,
            pf_admin_charges=pf.admin_charges,
            esi_employee=esi.employee,
            esi_employer=esi.employer,
            esi_applicable=esi.applicable,
            tax_regime=salary_structure.tax_regime,
            annual_tax=tds.annual_tax,
            tds_amount=tds.monthly_tds,
            effective_tax_rate=tds.effective_rate,
            professional_tax=professional_tax,
            group_health_insurance=salary_structure.group_health_insurance,
            term_insurance=salary_structure.term_insurance,
            salary_advance_deduction=advance,
            other_deductions=adjustments.deductions,
            total_deductions=total_deductions,
            net_pay=net_pay,
            status=PayrollStatus.CALCULATED,
        )

        logger.info(
            "payroll_calculation_completed",
            extra={
                "gross_earnings": str(gross),
                "total_deductions": str(total_deductions),
                "net_pay": str(net_pay),
                "esi_applicable": esi.applicable,
                "attendance_clamped": proration.was_clamped,
                "duration_ms": round((time.monotonic() - t0) * 1000, 2),
            },
        )

    return record
