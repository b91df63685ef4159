"""
ESI Calculator -- threshold-gated health-insurance contribution.

Unlike PF, the wage limit is an eligibility gate, not a cap: gross above
the limit means no contribution at all for the period.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from payroll_engines.tracer import traced_engine
from payroll_kernel.domain.values import ZERO, non_negative, rounded_percent_of
from payroll_modules.payroll.models import StatutoryRateSnapshot


@dataclass(frozen=True)
class EsiContribution:
    employee: Decimal
    employer: Decimal
    applicable: bool
    wage_limit: Decimal


@traced_engine("esi", "1.0", fingerprint_fields=("gross_earnings",))
def calculate_esi(
    gross_earnings: Decimal,
    rates: StatutoryRateSnapshot,
) -> EsiContribution:
    """ESI on the full gross when gross is at or below the wage limit."""
    gross = non_negative(gross_earnings, "gross_earnings")

    if gross > rates.esi_wage_limit:
        return EsiContribution(
            employee=ZERO,
            employer=ZERO,
            applicable=False,
            wage_limit=rates.esi_wage_limit,
        )

    return EsiContribution(
        employee=rounded_percent_of(gross, rates.esi_employee_rate),
        employer=rounded_percent_of(gross, rates.esi_employer_rate),
        applicable=True,
        wage_limit=rates.esi_wage_limit,
    )
