"""
Overtime Calculator -- surplus hours paid off the pro-rated basic.

``hourly_rate = basic / (working_days_per_month * hours_per_day)`` and
``overtime_pay = round(hours * hourly_rate * multiplier)``.
"""

from __future__ import annotations

from decimal import Decimal

from payroll_engines.tracer import traced_engine
from payroll_kernel.domain.values import ZERO, non_negative, round_currency, to_decimal
from payroll_kernel.exceptions import ConfigurationError

DEFAULT_OVERTIME_MULTIPLIER = Decimal("1.5")
DEFAULT_WORKING_DAYS_PER_MONTH = Decimal("26")
DEFAULT_HOURS_PER_DAY = Decimal("8")


def hourly_rate(
    prorated_basic: Decimal,
    working_days_per_month: Decimal = DEFAULT_WORKING_DAYS_PER_MONTH,
    hours_per_day: Decimal = DEFAULT_HOURS_PER_DAY,
) -> Decimal:
    """Unrounded straight-time hourly rate."""
    days = to_decimal(working_days_per_month, "working_days_per_month")
    hours = to_decimal(hours_per_day, "hours_per_day")
    if days <= ZERO:
        raise ConfigurationError("working_days_per_month", days, "must be positive")
    if hours <= ZERO:
        raise ConfigurationError("hours_per_day", hours, "must be positive")
    return to_decimal(prorated_basic, "prorated_basic") / (days * hours)


@traced_engine(
    "overtime",
    "1.0",
    fingerprint_fields=("prorated_basic", "overtime_hours", "multiplier"),
)
def calculate_overtime_pay(
    prorated_basic: Decimal,
    overtime_hours: Decimal,
    multiplier: Decimal = DEFAULT_OVERTIME_MULTIPLIER,
    working_days_per_month: Decimal = DEFAULT_WORKING_DAYS_PER_MONTH,
    hours_per_day: Decimal = DEFAULT_HOURS_PER_DAY,
) -> Decimal:
    """
    Overtime pay for the period.

    Zero hours return zero without touching the divisors.

    Raises:
        InvalidPayrollInputError: If hours or basic are negative.
        ConfigurationError: If the multiplier or a divisor is not positive.
    """
    hours = non_negative(overtime_hours, "overtime_hours")
    if hours == ZERO:
        return ZERO

    basic = non_negative(prorated_basic, "prorated_basic")
    factor = to_decimal(multiplier, "multiplier")
    if factor <= ZERO:
        raise ConfigurationError("overtime_multiplier", factor, "must be positive")

    rate = hourly_rate(basic, working_days_per_month, hours_per_day)
    return round_currency(hours * rate * factor)
