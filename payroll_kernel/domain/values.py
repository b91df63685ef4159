"""
Values -- Decimal helpers shared by every payroll engine.

Responsibility:
    One rounding rule and one coercion rule for the whole engine. Every
    stage (pro-ration, overtime, PF, ESI, TDS, PT) rounds through
    ``round_currency`` so that no two stages can disagree by a unit.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Monetary amounts are ``Decimal``; floats are converted through
      ``str()`` so binary artefacts never enter a calculation.
    - Rounding is to whole currency units, ROUND_HALF_UP.

Failure modes:
    - InvalidPayrollInputError when a value cannot be read as a number
      or is negative where a non-negative value is required.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from payroll_kernel.exceptions import InvalidPayrollInputError

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
MONTHS_PER_YEAR = Decimal("12")

# Whole currency units
CURRENCY_QUANTUM = Decimal("1")
RATIO_QUANTUM = Decimal("0.01")


def to_decimal(value: Any, field: str = "value") -> Decimal:
    """Coerce ``value`` to ``Decimal`` (None reads as zero).

    Raises:
        InvalidPayrollInputError: If the value is not numeric, or is NaN
            or infinite.
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise InvalidPayrollInputError(field, value, "must be a number")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
        except (InvalidOperation, TypeError, ValueError) as exc:
            raise InvalidPayrollInputError(field, value, "must be a number") from exc
    if not amount.is_finite():
        raise InvalidPayrollInputError(field, value, "must be a finite number")
    return amount


def non_negative(value: Any, field: str) -> Decimal:
    """Coerce and reject negatives."""
    amount = to_decimal(value, field)
    if amount < ZERO:
        raise InvalidPayrollInputError(field, value)
    return amount


def round_currency(amount: Decimal) -> Decimal:
    """Round to whole currency units, half away from zero."""
    return amount.quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def round_ratio(ratio: Decimal) -> Decimal:
    """Round a ratio to two places for reporting."""
    return ratio.quantize(RATIO_QUANTUM, rounding=ROUND_HALF_UP)


def percent_of(amount: Decimal, rate_percent: Decimal) -> Decimal:
    """Unrounded ``amount * rate%``."""
    return amount * rate_percent / HUNDRED


def rounded_percent_of(amount: Decimal, rate_percent: Decimal) -> Decimal:
    """``round(amount * rate%)`` with the engine rounding rule."""
    return round_currency(percent_of(amount, rate_percent))


def whole_percentage(numerator: Decimal, denominator: Decimal) -> Decimal:
    """``round(numerator / denominator * 100)``; zero when denominator is zero."""
    if denominator == ZERO:
        return ZERO
    return round_currency(numerator / denominator * HUNDRED)
