"""
Configuration Loader (``payroll_config.loader``).

Responsibility
--------------
Loads jurisdiction YAML files and parses them into the typed
``payroll_config.schema`` and ``payroll_modules.payroll.models``
dataclasses.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Runtime callers go through
``payroll_config.get_default_config()`` or ``load_jurisdiction_config()``;
the engines never read files.

Invariants enforced
-------------------
* Missing required keys raise ``ConfigurationError`` naming the key; no
  silent defaults for required fields.
* Every parsed object is a frozen dataclass.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing keys or impossible values  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import fields
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from payroll_kernel.exceptions import ConfigurationError
from payroll_kernel.logging_config import get_logger
from payroll_modules.payroll.config import PayrollEngineSettings
from payroll_modules.payroll.models import (
    ProfessionalTaxBand,
    StatutoryRateSnapshot,
    TaxRegime,
    TaxSlab,
)
from payroll_config.schema import JurisdictionConfig

logger = get_logger("config.loader")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _require(data: dict[str, Any], key: str, where: str) -> Any:
    if key not in data:
        raise ConfigurationError(f"{where}.{key}", None, "is required")
    return data[key]


def parse_date(value: Any, field: str = "date") -> date:
    """Parse a date from YAML (string or date object)."""
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as exc:
            raise ConfigurationError(field, value, "must be an ISO date") from exc
    raise ConfigurationError(field, value, "must be an ISO date")


def parse_pt_bands(data: list[dict[str, Any]]) -> tuple[ProfessionalTaxBand, ...]:
    """Parse the professional-tax band list (ascending, open-ended last)."""
    return tuple(
        ProfessionalTaxBand(
            upper_limit=band.get("upper_limit"),
            amount=_require(band, "amount", "pt_bands"),
            capped=bool(band.get("capped", False)),
        )
        for band in data
    )


def parse_rates(data: dict[str, Any]) -> StatutoryRateSnapshot:
    """
    Parse a ``StatutoryRateSnapshot`` from the ``statutory_rates`` block.

    Keys that are absent keep the snapshot defaults; unknown keys are
    rejected so a misspelt rate cannot be silently ignored.
    """
    data = dict(data)
    known = {f.name for f in fields(StatutoryRateSnapshot)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError("statutory_rates", unknown, "unknown keys")
    if "pt_bands" in data:
        data["pt_bands"] = parse_pt_bands(data["pt_bands"])
    return StatutoryRateSnapshot(**data)


def parse_tax_slabs(data: dict[str, list[dict[str, Any]]]) -> tuple[TaxSlab, ...]:
    """
    Parse the ``tax_slabs`` block: one list of brackets per regime.

    Each bracket needs ``from`` and ``rate``; ``to`` is omitted or null on
    the open-ended top bracket, and ``cess`` is omitted to take the
    engine's default cess rate.
    """
    slabs: list[TaxSlab] = []
    for regime_key, brackets in data.items():
        try:
            regime = TaxRegime(regime_key)
        except ValueError as exc:
            raise ConfigurationError("tax_slabs", regime_key, "unknown tax regime") from exc
        for bracket in brackets or ():
            slabs.append(
                TaxSlab(
                    regime=regime,
                    slab_from=_require(bracket, "from", f"tax_slabs.{regime.value}"),
                    slab_to=bracket.get("to"),
                    tax_rate=_require(bracket, "rate", f"tax_slabs.{regime.value}"),
                    surcharge=bracket.get("surcharge", 0),
                    cess=bracket.get("cess"),
                    is_active=bool(bracket.get("active", True)),
                )
            )
    return tuple(slabs)


def parse_jurisdiction(data: dict[str, Any]) -> JurisdictionConfig:
    """Parse a whole jurisdiction document."""
    return JurisdictionConfig(
        name=_require(data, "name", "jurisdiction"),
        version=int(data.get("version", 1)),
        effective_from=parse_date(
            _require(data, "effective_from", "jurisdiction"), "effective_from"
        ),
        effective_to=(
            parse_date(data["effective_to"], "effective_to")
            if data.get("effective_to")
            else None
        ),
        description=data.get("description", ""),
        statutory_rates=parse_rates(data.get("statutory_rates") or {}),
        tax_slabs=parse_tax_slabs(data.get("tax_slabs") or {}),
        settings=PayrollEngineSettings.from_dict(data.get("engine") or {}),
        checksum=compute_checksum(data),
    )


def load_jurisdiction_config(path: Path) -> JurisdictionConfig:
    """Load and parse one jurisdiction YAML file."""
    path = Path(path)
    config = parse_jurisdiction(load_yaml_file(path))
    logger.info(
        "jurisdiction_config_loaded",
        extra={
            "path": str(path),
            "jurisdiction": config.name,
            "version": config.version,
            "effective_from": config.effective_from.isoformat(),
            "slab_count": len(config.tax_slabs),
            "checksum": config.checksum,
        },
    )
    return config


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
