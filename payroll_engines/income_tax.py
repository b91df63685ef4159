"""
Progressive Tax (TDS) Engine -- marginal-bracket income tax withheld monthly.

Walks the active slabs of the declared regime in ascending order and taxes
the slice of annual income falling inside each ``[slab_from, slab_to)``
bracket.  Each slice's tax gets its slab surcharge, then cess on the
surcharged amount.  The annual total is rounded and spread over twelve
months.

Pure functions with no I/O -- slabs are provided as parameters.

Usage:
    from payroll_engines.income_tax import calculate_tds

    result = calculate_tds(
        annual_gross=Decimal("370200"),
        tax_slabs=slabs,
        regime=TaxRegime.OLD,
    )
    print(result.annual_tax)   # 6250
    print(result.monthly_tds)  # 521
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from payroll_engines.tracer import traced_engine
from payroll_kernel.domain.values import (
    MONTHS_PER_YEAR,
    ZERO,
    non_negative,
    percent_of,
    round_currency,
    round_ratio,
)
from payroll_kernel.exceptions import MissingTaxSlabsError, TaxSlabOverlapError
from payroll_kernel.logging_config import get_logger
from payroll_modules.payroll.models import TaxRegime, TaxSlab

logger = get_logger("engines.income_tax")

DEFAULT_CESS_RATE = Decimal("4")


@dataclass(frozen=True)
class SlabTaxLine:
    """Tax attributed to one bracket."""

    slab_from: Decimal
    slab_to: Decimal | None
    taxable_amount: Decimal
    base_tax: Decimal
    surcharge: Decimal
    cess: Decimal

    @property
    def total(self) -> Decimal:
        return self.base_tax + self.surcharge + self.cess


@dataclass(frozen=True)
class TdsResult:
    """Annual tax and the monthly withholding derived from it."""

    regime: TaxRegime
    annual_gross: Decimal
    slab_lines: tuple[SlabTaxLine, ...]
    annual_tax: Decimal  # rounded
    monthly_tds: Decimal

    @property
    def unrounded_annual_tax(self) -> Decimal:
        return sum((line.total for line in self.slab_lines), ZERO)

    @property
    def effective_rate(self) -> Decimal:
        """Unrounded annual tax as a percentage of annual gross (reporting only)."""
        if self.annual_gross == ZERO:
            return ZERO
        return round_ratio(self.unrounded_annual_tax / self.annual_gross * Decimal("100"))


def select_slabs(tax_slabs: Sequence[TaxSlab], regime: TaxRegime) -> list[TaxSlab]:
    """
    Active slabs for ``regime`` sorted by ``slab_from``.

    Raises:
        TaxSlabOverlapError: If consecutive active slabs overlap, leave a
            gap, or an open-ended slab is not the last one.
    """
    regime = TaxRegime(regime)
    applicable = sorted(
        (s for s in tax_slabs if s.regime == regime and s.is_active),
        key=lambda s: s.slab_from,
    )

    for previous, current in zip(applicable, applicable[1:]):
        if previous.slab_to is None or previous.slab_to != current.slab_from:
            logger.error(
                "tax_slabs_not_contiguous",
                extra={
                    "regime": regime.value,
                    "previous_to": str(previous.slab_to),
                    "next_from": str(current.slab_from),
                },
            )
            raise TaxSlabOverlapError(regime.value, previous.slab_to, current.slab_from)

    return applicable


def _tax_slab(slab: TaxSlab, income: Decimal, default_cess_rate: Decimal) -> SlabTaxLine | None:
    if income <= slab.slab_from:
        return None
    upper = income if slab.slab_to is None else min(income, slab.slab_to)
    taxable = upper - slab.slab_from

    base_tax = percent_of(taxable, slab.tax_rate)
    surcharge = percent_of(base_tax, slab.surcharge) if slab.surcharge > ZERO else ZERO
    cess_rate = default_cess_rate if slab.cess is None else slab.cess
    cess = percent_of(base_tax + surcharge, cess_rate)

    return SlabTaxLine(
        slab_from=slab.slab_from,
        slab_to=slab.slab_to,
        taxable_amount=taxable,
        base_tax=base_tax,
        surcharge=surcharge,
        cess=cess,
    )


@traced_engine(
    "income_tax",
    "1.0",
    fingerprint_fields=("annual_gross", "regime", "default_cess_rate"),
)
def calculate_tds(
    annual_gross: Decimal,
    tax_slabs: Sequence[TaxSlab],
    regime: TaxRegime = TaxRegime.OLD,
    default_cess_rate: Decimal = DEFAULT_CESS_RATE,
    require_slabs: bool = False,
) -> TdsResult:
    """
    Calculate annual income tax and monthly TDS.

    Args:
        annual_gross: Projected annual gross (monthly gross x 12).
        tax_slabs: Full slab table; filtered to the active slabs of ``regime``.
        regime: Declared tax regime.
        default_cess_rate: Cess percent for slabs that do not set one.
        require_slabs: Treat an empty slab set as a configuration error
            instead of "nothing owed".

    Returns:
        TdsResult with per-slab lines, rounded annual tax and monthly TDS.

    Raises:
        MissingTaxSlabsError: If no slab applies and ``require_slabs``.
        TaxSlabOverlapError: If the active slabs are not contiguous.
    """
    t0 = time.monotonic()
    income = non_negative(annual_gross, "annual_gross")
    regime = TaxRegime(regime)

    slabs = select_slabs(tax_slabs, regime)
    if not slabs:
        if require_slabs:
            logger.error("tax_slabs_missing", extra={"regime": regime.value})
            raise MissingTaxSlabsError(regime.value)
        logger.info("tds_no_applicable_slabs", extra={"regime": regime.value})
        return TdsResult(
            regime=regime,
            annual_gross=income,
            slab_lines=(),
            annual_tax=ZERO,
            monthly_tds=ZERO,
        )

    lines: list[SlabTaxLine] = []
    for slab in slabs:
        line = _tax_slab(slab, income, default_cess_rate)
        if line is None:
            break
        lines.append(line)

    total = sum((line.total for line in lines), ZERO)
    annual_tax = round_currency(total)
    monthly_tds = round_currency(annual_tax / MONTHS_PER_YEAR)

    result = TdsResult(
        regime=regime,
        annual_gross=income,
        slab_lines=tuple(lines),
        annual_tax=annual_tax,
        monthly_tds=monthly_tds,
    )

    logger.info(
        "tds_calculated",
        extra={
            "regime": regime.value,
            "annual_gross": str(income),
            "slabs_applied": len(lines),
            "annual_tax": str(annual_tax),
            "monthly_tds": str(monthly_tds),
            "effective_rate": str(result.effective_rate),
            "duration_ms": round((time.monotonic() - t0) * 1000, 2),
        },
    )
    return result


def compare_regimes(
    annual_gross: Decimal,
    tax_slabs: Sequence[TaxSlab],
    default_cess_rate: Decimal = DEFAULT_CESS_RATE,
    require_slabs: bool = False,
) -> dict[TaxRegime, TdsResult]:
    """TDS under each regime, for regime-selection reporting.

    Takes the same cess default and slab requirement as ``calculate_tds``
    so the comparison matches what ``calculate_payroll`` withholds.
    """
    return {
        regime: calculate_tds(
            annual_gross,
            tax_slabs,
            regime,
            default_cess_rate=default_cess_rate,
            require_slabs=require_slabs,
        )
        for regime in TaxRegime
    }
