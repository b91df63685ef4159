"""
Provident-Fund Calculator -- capped-base retirement contributions.

Every percentage is applied to ``min(prorated_basic, pf_wage_limit)``.
The employer side is kept as its four statutory sub-components (EPF,
EPS, EDLI, administration charge) because compliance filings need the
split, not only the total.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from payroll_engines.tracer import traced_engine
from payroll_kernel.domain.values import ZERO, non_negative, rounded_percent_of
from payroll_kernel.logging_config import get_logger
from payroll_modules.payroll.models import StatutoryRateSnapshot

logger = get_logger("engines.provident_fund")


@dataclass(frozen=True)
class ProvidentFundContribution:
    """PF contributions for one employee and period."""

    wage_base: Decimal  # capped basic used for every percentage
    employee_statutory: Decimal
    voluntary: Decimal
    epf: Decimal
    eps: Decimal
    edli: Decimal
    admin_charges: Decimal

    @property
    def employee_total(self) -> Decimal:
        """Deducted from the employee: statutory share plus voluntary PF."""
        return self.employee_statutory + self.voluntary

    @property
    def employer_total(self) -> Decimal:
        return self.epf + self.eps + self.edli + self.admin_charges


@traced_engine(
    "provident_fund",
    "1.0",
    fingerprint_fields=("prorated_basic", "voluntary_contribution"),
)
def calculate_provident_fund(
    prorated_basic: Decimal,
    rates: StatutoryRateSnapshot,
    voluntary_contribution: Decimal = ZERO,
) -> ProvidentFundContribution:
    """
    Calculate employee and employer PF on the capped wage base.

    Raises:
        InvalidPayrollInputError: If basic or voluntary PF is negative.
    """
    basic = non_negative(prorated_basic, "prorated_basic")
    voluntary = non_negative(voluntary_contribution, "voluntary_contribution")
    base = min(basic, rates.pf_wage_limit)

    contribution = ProvidentFundContribution(
        wage_base=base,
        employee_statutory=rounded_percent_of(base, rates.pf_employee_rate),
        voluntary=voluntary,
        epf=rounded_percent_of(base, rates.epf_rate),
        eps=rounded_percent_of(base, rates.eps_rate),
        edli=rounded_percent_of(base, rates.edli_rate),
        admin_charges=rounded_percent_of(base, rates.pf_admin_charges_rate),
    )

    logger.debug(
        "provident_fund_calculated",
        extra={
            "wage_base": str(base),
            "capped": basic > rates.pf_wage_limit,
            "employee_total": str(contribution.employee_total),
            "employer_total": str(contribution.employer_total),
        },
    )
    return contribution
