"""
Property-based tests for the payroll calculation.

Hypothesis generates salary structures and attendance; each test pins an
invariant that must hold for every generated employee:

- Conservation: net pay is exactly gross minus total deductions
- PF cap: statutory employee PF never exceeds 12% of the wage limit
- ESI gating: ESI applies exactly when gross is within the wage limit
- Attendance bound: the ratio stays in [0, 1] and never inflates pay
- Tax monotonicity: more annual income never means less annual tax
- Determinism: identical inputs give identical records
"""

from decimal import Decimal

from hypothesis import HealthCheck, assume, given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from payroll_engines.income_tax import calculate_tds
from payroll_modules.payroll.calculator import calculate_payroll
from payroll_modules.payroll.models import (
    AttendanceSummary,
    SalaryStructure,
    StatutoryRateSnapshot,
    TaxRegime,
    TaxSlab,
)
from payroll_modules.payroll.validation import validate_payroll_calculation

RATES = StatutoryRateSnapshot()

TAX_SLABS = [
    TaxSlab(TaxRegime.OLD, Decimal("0"), Decimal("250000"), Decimal("0")),
    TaxSlab(TaxRegime.OLD, Decimal("250000"), Decimal("500000"), Decimal("5")),
    TaxSlab(TaxRegime.OLD, Decimal("500000"), Decimal("1000000"), Decimal("20")),
    TaxSlab(TaxRegime.OLD, Decimal("1000000"), None, Decimal("30"), surcharge=Decimal("10")),
    TaxSlab(TaxRegime.NEW, Decimal("0"), Decimal("300000"), Decimal("0")),
    TaxSlab(TaxRegime.NEW, Decimal("300000"), Decimal("700000"), Decimal("5")),
    TaxSlab(TaxRegime.NEW, Decimal("700000"), None, Decimal("10")),
]

FUZZ_SETTINGS = settings(
    max_examples=50,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)


def amounts(max_value: int = 200_000):
    """Whole-unit non-negative amounts."""
    return st.integers(min_value=0, max_value=max_value).map(Decimal)


@composite
def salary_structures(draw):
    return SalaryStructure(
        employee_id="EMP-FUZZ",
        basic_salary=draw(amounts()),
        hra=draw(amounts(80_000)),
        da=draw(amounts(20_000)),
        conveyance_allowance=draw(amounts(5_000)),
        medical_allowance=draw(amounts(5_000)),
        special_allowance=draw(amounts(50_000)),
        performance_incentive=draw(amounts(50_000)),
        voluntary_pf_contribution=draw(amounts(5_000)),
        group_health_insurance=draw(amounts(2_000)),
        term_insurance=draw(amounts(2_000)),
        tax_regime=draw(st.sampled_from(list(TaxRegime))),
    )


@composite
def attendances(draw):
    working = draw(st.integers(min_value=1, max_value=31))
    present = draw(st.integers(min_value=0, max_value=working))
    leaves = draw(st.integers(min_value=0, max_value=working - present))
    return AttendanceSummary(
        working_days=Decimal(working),
        present_days=Decimal(present),
        paid_leaves=Decimal(leaves),
        overtime_hours=Decimal(draw(st.integers(min_value=0, max_value=60))),
    )


def _calculate(salary, attendance, advance=Decimal("0")):
    return calculate_payroll(salary, attendance, RATES, TAX_SLABS, advance_deduction=advance)


class TestPayrollInvariants:

    @given(salary=salary_structures(), attendance=attendances(), advance=amounts(10_000))
    @FUZZ_SETTINGS
    def test_net_pay_conserves_gross(self, salary, attendance, advance):
        record = _calculate(salary, attendance, advance)

        assert record.net_pay == record.gross_earnings - record.total_deductions
        assert record.total_deductions == (
            record.pf_employee
            + record.esi_employee
            + record.tds_amount
            + record.professional_tax
            + record.group_health_insurance
            + record.term_insurance
            + record.salary_advance_deduction
            + record.other_deductions
        )

    @given(salary=salary_structures(), attendance=attendances())
    @FUZZ_SETTINGS
    def test_statutory_pf_is_capped(self, salary, attendance):
        record = _calculate(salary, attendance)

        statutory = record.pf_employee - record.voluntary_pf
        assert record.pf_wage_base <= RATES.pf_wage_limit
        assert Decimal("0") <= statutory <= Decimal("1800")
        assert record.voluntary_pf == salary.voluntary_pf_contribution

    @given(salary=salary_structures(), attendance=attendances())
    @FUZZ_SETTINGS
    def test_esi_applies_only_within_wage_limit(self, salary, attendance):
        record = _calculate(salary, attendance)

        if record.gross_earnings > RATES.esi_wage_limit:
            assert not record.esi_applicable
            assert record.esi_employee == Decimal("0")
            assert record.esi_employer == Decimal("0")
        else:
            assert record.esi_applicable

    @given(salary=salary_structures(), attendance=attendances())
    @FUZZ_SETTINGS
    def test_attendance_never_inflates_pay(self, salary, attendance):
        record = _calculate(salary, attendance)

        assert Decimal("0") <= record.attendance_ratio <= Decimal("1")
        assert record.basic_salary <= salary.basic_salary
        assert record.prorated_allowances <= salary.total_allowances
        assert record.loss_of_pay >= Decimal("0")

    @given(salary=salary_structures(), attendance=attendances())
    @FUZZ_SETTINGS
    def test_valid_attendance_validates(self, salary, attendance):
        record = _calculate(salary, attendance)
        assume(record.gross_earnings > 0)

        assert validate_payroll_calculation(record).is_valid

    @given(salary=salary_structures(), attendance=attendances())
    @FUZZ_SETTINGS
    def test_calculation_is_deterministic(self, salary, attendance):
        assert _calculate(salary, attendance) == _calculate(salary, attendance)


class TestIncomeTaxInvariants:

    @given(
        low=st.integers(min_value=0, max_value=5_000_000),
        delta=st.integers(min_value=0, max_value=5_000_000),
        regime=st.sampled_from(list(TaxRegime)),
    )
    @FUZZ_SETTINGS
    def test_tax_is_monotonic_in_income(self, low, delta, regime):
        lower = calculate_tds(Decimal(low), TAX_SLABS, regime)
        higher = calculate_tds(Decimal(low + delta), TAX_SLABS, regime)

        assert lower.annual_tax <= higher.annual_tax
        assert lower.monthly_tds <= higher.monthly_tds

    @given(income=st.integers(min_value=0, max_value=10_000_000))
    @FUZZ_SETTINGS
    def test_tax_never_exceeds_income(self, income):
        result = calculate_tds(Decimal(income), TAX_SLABS, TaxRegime.OLD)

        assert Decimal("0") <= result.annual_tax <= Decimal(income)
