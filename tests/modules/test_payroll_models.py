"""
Tests for payroll value objects and engine settings.

Covers:
- Decimal coercion and negative-input rejection
- Statutory rate snapshot validation
- Tax slab and professional-tax band validation
- Immutability
"""

from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from payroll_kernel.exceptions import ConfigurationError, InvalidPayrollInputError
from payroll_modules.payroll.config import PayrollEngineSettings
from payroll_modules.payroll.models import (
    Adjustments,
    AttendanceSummary,
    PayrollStatus,
    ProfessionalTaxBand,
    SalaryStructure,
    StatutoryRateSnapshot,
    TaxRegime,
    TaxSlab,
    ValidationResult,
)


class TestSalaryStructure:

    def test_coerces_to_decimal(self):
        salary = SalaryStructure(basic_salary=20000, hra="5000", da=1250.5)

        assert salary.basic_salary == Decimal("20000")
        assert salary.hra == Decimal("5000")
        assert salary.da == Decimal("1250.5")

    def test_total_allowances(self):
        salary = SalaryStructure(
            basic_salary=Decimal("20000"),
            hra=Decimal("1"),
            da=Decimal("2"),
            conveyance_allowance=Decimal("3"),
            medical_allowance=Decimal("4"),
            special_allowance=Decimal("5"),
            performance_incentive=Decimal("6"),
            other_allowances=Decimal("7"),
            voluntary_pf_contribution=Decimal("100"),
        )

        assert salary.total_allowances == Decimal("28")

    def test_regime_from_string(self):
        salary = SalaryStructure(basic_salary=Decimal("1"), tax_regime="new")
        assert salary.tax_regime == TaxRegime.NEW

    def test_unknown_regime_rejected(self):
        with pytest.raises(ValueError):
            SalaryStructure(basic_salary=Decimal("1"), tax_regime="flat")

    def test_negative_allowance_rejected(self):
        with pytest.raises(InvalidPayrollInputError) as exc_info:
            SalaryStructure(basic_salary=Decimal("20000"), hra=Decimal("-1"))

        assert exc_info.value.field == "hra"

    def test_non_numeric_rejected(self):
        with pytest.raises(InvalidPayrollInputError):
            SalaryStructure(basic_salary="twenty thousand")

    def test_bool_rejected(self):
        with pytest.raises(InvalidPayrollInputError):
            SalaryStructure(basic_salary=True)

    @pytest.mark.parametrize("amount", ["NaN", "Infinity", "-Infinity", float("nan"), float("inf")])
    def test_non_finite_rejected(self, amount):
        with pytest.raises(InvalidPayrollInputError) as exc_info:
            SalaryStructure(basic_salary=amount)

        assert exc_info.value.field == "basic_salary"
        assert exc_info.value.reason == "must be a finite number"

    def test_non_finite_decimal_rejected(self):
        with pytest.raises(InvalidPayrollInputError):
            SalaryStructure(basic_salary=Decimal("20000"), hra=Decimal("NaN"))

    def test_frozen(self):
        salary = SalaryStructure(basic_salary=Decimal("1"))
        with pytest.raises(FrozenInstanceError):
            salary.basic_salary = Decimal("2")


class TestAttendanceAndAdjustments:

    def test_paid_days(self):
        attendance = AttendanceSummary(
            working_days=Decimal("26"), present_days=Decimal("20"), paid_leaves=Decimal("3")
        )
        assert attendance.paid_days == Decimal("23")

    def test_negative_overtime_rejected(self):
        with pytest.raises(InvalidPayrollInputError):
            AttendanceSummary(
                working_days=Decimal("26"),
                present_days=Decimal("26"),
                overtime_hours=Decimal("-2"),
            )

    def test_present_above_working_allowed(self):
        attendance = AttendanceSummary(working_days=Decimal("26"), present_days=Decimal("27"))
        assert attendance.present_days == Decimal("27")

    def test_negative_adjustment_rejected(self):
        with pytest.raises(InvalidPayrollInputError):
            Adjustments(deductions=Decimal("-10"))


class TestStatutoryRateSnapshot:

    def test_defaults(self):
        rates = StatutoryRateSnapshot()

        assert rates.pf_employee_rate == Decimal("12")
        assert rates.pf_wage_limit == Decimal("15000")
        assert rates.eps_rate == Decimal("3.67")
        assert rates.esi_wage_limit == Decimal("25000")
        assert rates.pt_monthly_limit == Decimal("200")
        assert len(rates.pt_bands) == 4
        assert rates.pf_employee_cap == Decimal("1800")

    def test_rate_above_hundred_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            StatutoryRateSnapshot(esi_employee_rate=Decimal("101"))

        assert exc_info.value.field == "esi_employee_rate"

    def test_negative_rate_rejected(self):
        with pytest.raises(ConfigurationError):
            StatutoryRateSnapshot(edli_rate=Decimal("-0.5"))

    def test_non_positive_wage_limit_rejected(self):
        with pytest.raises(ConfigurationError):
            StatutoryRateSnapshot(pf_wage_limit=Decimal("0"))

    def test_negative_pt_limit_rejected(self):
        with pytest.raises(ConfigurationError):
            StatutoryRateSnapshot(pt_monthly_limit=Decimal("-1"))

    def test_non_numeric_rate_rejected(self):
        with pytest.raises(ConfigurationError):
            StatutoryRateSnapshot(pf_employee_rate="twelve")

    def test_derived_eps_cannot_be_negative(self):
        with pytest.raises(ConfigurationError):
            StatutoryRateSnapshot(pf_employer_rate=Decimal("8"), epf_rate=Decimal("8.33"))

    def test_pt_bands_must_ascend(self):
        with pytest.raises(ConfigurationError):
            StatutoryRateSnapshot(
                pt_bands=(
                    ProfessionalTaxBand(Decimal("25000"), Decimal("150")),
                    ProfessionalTaxBand(Decimal("15000"), Decimal("0")),
                    ProfessionalTaxBand(None, Decimal("200")),
                )
            )

    def test_pt_bands_need_open_last_band(self):
        with pytest.raises(ConfigurationError):
            StatutoryRateSnapshot(
                pt_bands=(ProfessionalTaxBand(Decimal("15000"), Decimal("0")),)
            )

    def test_only_last_pt_band_open(self):
        with pytest.raises(ConfigurationError):
            StatutoryRateSnapshot(
                pt_bands=(
                    ProfessionalTaxBand(None, Decimal("0")),
                    ProfessionalTaxBand(None, Decimal("200")),
                )
            )

    def test_empty_pt_bands_rejected(self):
        with pytest.raises(ConfigurationError):
            StatutoryRateSnapshot(pt_bands=())

    def test_negative_band_amount_rejected(self):
        with pytest.raises(ConfigurationError):
            ProfessionalTaxBand(None, Decimal("-1"))


class TestTaxSlab:

    def test_coercion(self):
        slab = TaxSlab("old", "250000", "500000", "5")

        assert slab.regime == TaxRegime.OLD
        assert slab.slab_from == Decimal("250000")
        assert slab.cess is None
        assert not slab.is_open_ended

    def test_open_ended(self):
        assert TaxSlab(TaxRegime.NEW, Decimal("0"), None, Decimal("5")).is_open_ended

    def test_slab_to_must_exceed_from(self):
        with pytest.raises(ConfigurationError):
            TaxSlab(TaxRegime.OLD, Decimal("500000"), Decimal("250000"), Decimal("5"))

    def test_negative_rate_rejected(self):
        with pytest.raises(ConfigurationError):
            TaxSlab(TaxRegime.OLD, Decimal("0"), None, Decimal("-5"))

    def test_negative_cess_rejected(self):
        with pytest.raises(ConfigurationError):
            TaxSlab(TaxRegime.OLD, Decimal("0"), None, Decimal("5"), cess=Decimal("-1"))


class TestValidationResult:

    def test_empty_is_valid(self):
        result = ValidationResult()
        assert result.is_valid
        assert result.status == PayrollStatus.CALCULATED

    def test_errors_make_invalid(self):
        result = ValidationResult(errors=("x",), warnings=("y",))
        assert not result.is_valid
        assert result.status == PayrollStatus.INVALID


class TestPayrollEngineSettings:

    def test_defaults(self):
        settings = PayrollEngineSettings.with_defaults()

        assert settings.overtime_multiplier == Decimal("1.5")
        assert settings.working_days_per_month == Decimal("26")
        assert settings.hours_per_day == Decimal("8")
        assert settings.default_cess_rate == Decimal("4")
        assert settings.require_tax_slabs is False

    def test_from_dict_coerces(self):
        settings = PayrollEngineSettings.from_dict(
            {"overtime_multiplier": "2", "require_tax_slabs": True}
        )

        assert settings.overtime_multiplier == Decimal("2")
        assert settings.require_tax_slabs is True

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ConfigurationError) as exc_info:
            PayrollEngineSettings.from_dict({"overtime_multipler": "2"})

        assert exc_info.value.value == ["overtime_multipler"]

    def test_non_positive_hours_rejected(self):
        with pytest.raises(ConfigurationError):
            PayrollEngineSettings(hours_per_day=Decimal("0"))

    def test_non_numeric_rejected(self):
        with pytest.raises(ConfigurationError):
            PayrollEngineSettings(default_cess_rate="four")

    def test_non_finite_rejected(self):
        with pytest.raises(ConfigurationError):
            PayrollEngineSettings(overtime_multiplier="Infinity")

    @pytest.mark.parametrize("flag", ["false", "true", 0, 1, None])
    def test_require_tax_slabs_must_be_bool(self, flag):
        with pytest.raises(ConfigurationError) as exc_info:
            PayrollEngineSettings.from_dict({"require_tax_slabs": flag})

        assert exc_info.value.field == "require_tax_slabs"
