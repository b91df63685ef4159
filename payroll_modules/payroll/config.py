"""
Payroll Engine Settings.

Defines the tunable constants of the calculation engine and their
defaults.  Jurisdiction-specific values are loaded from YAML at runtime
(see ``payroll_config``).
"""

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Self

from payroll_kernel.domain.values import ZERO, to_decimal
from payroll_kernel.exceptions import ConfigurationError, InvalidPayrollInputError
from payroll_kernel.logging_config import get_logger

logger = get_logger("modules.payroll.config")


@dataclass(frozen=True)
class PayrollEngineSettings:
    """
    Configuration schema for the payroll engine.

    Override at instantiation with jurisdiction-specific values:

        settings = PayrollEngineSettings(
            overtime_multiplier=Decimal("2"),
            require_tax_slabs=True,
        )
    """

    # Overtime
    overtime_multiplier: Decimal = Decimal("1.5")
    working_days_per_month: Decimal = Decimal("26")
    hours_per_day: Decimal = Decimal("8")

    # Income tax
    default_cess_rate: Decimal = Decimal("4")
    require_tax_slabs: bool = False

    # Validation
    net_pay_tolerance: Decimal = Decimal("1")
    pf_warning_rate: Decimal = Decimal("12")

    def __post_init__(self):
        # bool only; a quoted YAML "false" is a str
        if not isinstance(self.require_tax_slabs, bool):
            raise ConfigurationError(
                "require_tax_slabs", self.require_tax_slabs, "must be true or false"
            )

        for f in fields(self):
            if f.name == "require_tax_slabs":
                continue
            value = getattr(self, f.name)
            try:
                object.__setattr__(self, f.name, to_decimal(value, f.name))
            except InvalidPayrollInputError as exc:
                raise ConfigurationError(f.name, value, "must be a number") from exc

        if self.overtime_multiplier <= ZERO:
            raise ConfigurationError(
                "overtime_multiplier", self.overtime_multiplier, "must be positive"
            )
        if self.working_days_per_month <= ZERO:
            raise ConfigurationError(
                "working_days_per_month", self.working_days_per_month, "must be positive"
            )
        if self.hours_per_day <= ZERO:
            raise ConfigurationError("hours_per_day", self.hours_per_day, "must be positive")
        if self.default_cess_rate < ZERO:
            raise ConfigurationError(
                "default_cess_rate", self.default_cess_rate, "cannot be negative"
            )
        if self.net_pay_tolerance < ZERO:
            raise ConfigurationError(
                "net_pay_tolerance", self.net_pay_tolerance, "cannot be negative"
            )
        if self.pf_warning_rate < ZERO:
            raise ConfigurationError(
                "pf_warning_rate", self.pf_warning_rate, "cannot be negative"
            )

        logger.debug(
            "payroll_settings_initialized",
            extra={
                "overtime_multiplier": str(self.overtime_multiplier),
                "working_days_per_month": str(self.working_days_per_month),
                "hours_per_day": str(self.hours_per_day),
                "default_cess_rate": str(self.default_cess_rate),
                "require_tax_slabs": self.require_tax_slabs,
            },
        )

    @classmethod
    def with_defaults(cls) -> Self:
        """Create settings with the engine defaults."""
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create settings from a dictionary (e.g., a YAML ``engine`` block)."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError("engine", unknown, "unknown settings")
        logger.info(
            "payroll_settings_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)
