"""
Jurisdiction configuration schema.

A ``JurisdictionConfig`` is the human-authored, reviewable source of the
statutory parameters for one jurisdiction and effective window: the rate
snapshot, the tax slab table of every regime, and the engine settings.
YAML files are parsed into this type by ``payroll_config.loader``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from payroll_modules.payroll.config import PayrollEngineSettings
from payroll_modules.payroll.models import StatutoryRateSnapshot, TaxRegime, TaxSlab


@dataclass(frozen=True)
class JurisdictionConfig:
    """Statutory parameters in force for one jurisdiction."""

    name: str
    version: int
    effective_from: date
    statutory_rates: StatutoryRateSnapshot
    tax_slabs: tuple[TaxSlab, ...]
    settings: PayrollEngineSettings = field(default_factory=PayrollEngineSettings)
    effective_to: date | None = None
    description: str = ""
    checksum: str = ""

    def is_effective_on(self, as_of: date) -> bool:
        if as_of < self.effective_from:
            return False
        return self.effective_to is None or as_of <= self.effective_to

    def slabs_for(self, regime: TaxRegime) -> tuple[TaxSlab, ...]:
        regime = TaxRegime(regime)
        return tuple(slab for slab in self.tax_slabs if slab.regime == regime)
