"""
Payroll Record Validation (``payroll_modules.payroll.validation``).

Pure check function over a finished ``PayrollRecord``.  Business-rule
findings are returned, not raised: errors block finalization, warnings
are surfaced for review.

Errors
    * net pay differs from gross minus deductions by more than the
      rounding tolerance (one currency unit by default)
    * gross earnings are not positive
    * present days exceed working days

Warnings
    * net pay is negative
    * employee PF exceeds 12% of the pro-rated basic
    * paid days exceeded working days and pro-ration was capped
"""

from __future__ import annotations

from payroll_kernel.domain.values import HUNDRED, ZERO
from payroll_kernel.logging_config import get_logger
from payroll_modules.payroll.config import PayrollEngineSettings
from payroll_modules.payroll.models import PayrollRecord, ValidationResult

logger = get_logger("modules.payroll.validation")

NET_PAY_MISMATCH = "Net pay calculation mismatch"
NON_POSITIVE_GROSS = "Gross earnings must be positive"
PRESENT_EXCEEDS_WORKING = "Present days cannot exceed working days"
NEGATIVE_NET_PAY = "Net pay is negative - please review deductions"
PF_SEEMS_HIGH = "PF deduction seems high - please verify"
ATTENDANCE_CAPPED = "Paid days exceed working days - attendance ratio was capped at 1"

_DEFAULT_SETTINGS = PayrollEngineSettings()


def validate_payroll_calculation(
    record: PayrollRecord,
    settings: PayrollEngineSettings | None = None,
) -> ValidationResult:
    """Cross-check a calculated record for arithmetic and logical consistency."""
    settings = settings or _DEFAULT_SETTINGS
    errors: list[str] = []
    warnings: list[str] = []

    gross = record.gross_earnings
    deductions = record.total_deductions
    net = record.net_pay

    if abs((gross - deductions) - net) > settings.net_pay_tolerance:
        errors.append(NET_PAY_MISMATCH)

    if gross <= ZERO:
        errors.append(NON_POSITIVE_GROSS)

    if net < ZERO:
        warnings.append(NEGATIVE_NET_PAY)

    if record.present_days > record.working_days:
        errors.append(PRESENT_EXCEEDS_WORKING)
    elif record.attendance_clamped:
        warnings.append(ATTENDANCE_CAPPED)

    if record.pf_employee > record.basic_salary * settings.pf_warning_rate / HUNDRED:
        warnings.append(PF_SEEMS_HIGH)

    result = ValidationResult(errors=tuple(errors), warnings=tuple(warnings))

    log = logger.info if result.is_valid else logger.warning
    log(
        "payroll_validation_completed",
        extra={
            "employee_id": record.employee_id,
            "payroll_period_id": record.payroll_period_id,
            "is_valid": result.is_valid,
            "error_count": len(errors),
            "warning_count": len(warnings),
        },
    )
    return result
