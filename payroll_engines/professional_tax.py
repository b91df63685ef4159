"""
Professional Tax Calculator -- flat banded monthly levy.

The band table lives on the ``StatutoryRateSnapshot`` so a jurisdiction
can replace it through configuration.  The default table is
``<=15000 -> 0``, ``<=25000 -> 150``, ``<=40000 -> 200`` and
``>40000 -> min(300, pt_monthly_limit)``.
"""

from __future__ import annotations

from decimal import Decimal

from payroll_engines.tracer import traced_engine
from payroll_kernel.domain.values import non_negative
from payroll_modules.payroll.models import ProfessionalTaxBand, StatutoryRateSnapshot


def find_band(
    gross_earnings: Decimal,
    bands: tuple[ProfessionalTaxBand, ...],
) -> ProfessionalTaxBand:
    """First band whose inclusive upper limit covers ``gross_earnings``."""
    for band in bands:
        if band.upper_limit is None or gross_earnings <= band.upper_limit:
            return band
    # Snapshot construction guarantees an open-ended last band
    return bands[-1]


@traced_engine("professional_tax", "1.0", fingerprint_fields=("gross_earnings",))
def calculate_professional_tax(
    gross_earnings: Decimal,
    rates: StatutoryRateSnapshot,
) -> Decimal:
    """Monthly professional tax for ``gross_earnings``."""
    gross = non_negative(gross_earnings, "gross_earnings")
    band = find_band(gross, rates.pt_bands)
    if band.capped:
        return min(band.amount, rates.pt_monthly_limit)
    return band.amount
