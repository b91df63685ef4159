"""
Attendance Pro-rator -- scale fixed pay by paid days over working days.

Pure function, no I/O.  The ratio is clamped to ``[0, 1]``: more paid
days than working days is tolerated here and flagged by the payroll
validator, never silently corrected upstream.

Usage:
    from payroll_engines.attendance import prorate_attendance

    result = prorate_attendance(
        basic_salary=Decimal("20000"),
        allowances=Decimal("10850"),
        working_days=Decimal("26"),
        present_days=Decimal("22"),
        paid_leaves=Decimal("2"),
    )
    print(result.prorated_basic)  # 18462
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from payroll_engines.tracer import traced_engine
from payroll_kernel.domain.values import (
    ONE,
    ZERO,
    non_negative,
    round_currency,
    round_ratio,
    to_decimal,
)
from payroll_kernel.exceptions import InvalidWorkingDaysError
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.attendance")


@dataclass(frozen=True)
class AttendanceProration:
    """Result of pro-rating basic pay and allowances."""

    raw_ratio: Decimal  # paid days / working days, unclamped
    ratio: Decimal  # clamped to [0, 1]
    basic_salary: Decimal
    allowances: Decimal
    prorated_basic: Decimal
    prorated_allowances: Decimal
    loss_of_pay: Decimal

    @property
    def was_clamped(self) -> bool:
        return self.raw_ratio != self.ratio

    @property
    def prorated_gross(self) -> Decimal:
        return self.prorated_basic + self.prorated_allowances

    @property
    def reported_ratio(self) -> Decimal:
        """Ratio rounded to two places for the payroll record."""
        return round_ratio(self.ratio)

    def scale(self, amount: Decimal) -> Decimal:
        """Pro-rate a single earnings line with the same ratio."""
        return round_currency(to_decimal(amount) * self.ratio)


@traced_engine(
    "attendance_proration",
    "1.0",
    fingerprint_fields=("basic_salary", "allowances", "working_days", "present_days", "paid_leaves"),
)
def prorate_attendance(
    basic_salary: Decimal,
    allowances: Decimal,
    working_days: Decimal,
    present_days: Decimal,
    paid_leaves: Decimal = ZERO,
) -> AttendanceProration:
    """
    Pro-rate basic salary and allowances by attendance.

    Args:
        basic_salary: Monthly basic salary.
        allowances: Sum of all monthly allowances.
        working_days: Working days in the period (must be positive).
        present_days: Days present.
        paid_leaves: Paid-leave days.

    Returns:
        AttendanceProration with rounded scaled amounts and loss of pay.

    Raises:
        InvalidWorkingDaysError: If working_days <= 0.
        InvalidPayrollInputError: If any amount or day count is negative.
    """
    working = to_decimal(working_days, "working_days")
    if working <= ZERO:
        logger.error("attendance_invalid_working_days", extra={"working_days": str(working)})
        raise InvalidWorkingDaysError(working_days)

    basic = non_negative(basic_salary, "basic_salary")
    allowance_total = non_negative(allowances, "allowances")
    present = non_negative(present_days, "present_days")
    leaves = non_negative(paid_leaves, "paid_leaves")

    raw_ratio = (present + leaves) / working
    ratio = min(max(raw_ratio, ZERO), ONE)

    prorated_basic = round_currency(basic * ratio)
    prorated_allowances = round_currency(allowance_total * ratio)
    loss_of_pay = (basic + allowance_total) - (prorated_basic + prorated_allowances)

    if ratio != raw_ratio:
        logger.warning(
            "attendance_ratio_clamped",
            extra={
                "paid_days": str(present + leaves),
                "working_days": str(working),
            },
        )

    return AttendanceProration(
        raw_ratio=raw_ratio,
        ratio=ratio,
        basic_salary=basic,
        allowances=allowance_total,
        prorated_basic=prorated_basic,
        prorated_allowances=prorated_allowances,
        loss_of_pay=loss_of_pay,
    )
