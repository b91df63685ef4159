"""
payroll_config -- statutory configuration for the payroll engine.

Responsibility:
    Provides the packaged default jurisdiction through
    ``get_default_config()`` and loads alternative jurisdictions from YAML
    through ``load_jurisdiction_config()``.

Architecture position:
    Configuration -- sits above ``payroll_kernel`` and the payroll value
    objects.  The engines never import this package; callers pass the
    parsed snapshot, slabs and settings into ``calculate_payroll``.

Failure modes:
    - ``FileNotFoundError`` -- the requested YAML file does not exist.
    - ``ConfigurationError`` -- missing keys or impossible values.
"""

from __future__ import annotations

from pathlib import Path

from payroll_config.loader import load_jurisdiction_config
from payroll_config.schema import JurisdictionConfig

# Packaged configuration sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"
DEFAULT_JURISDICTION = "india_default"


def get_default_config(config_dir: Path | None = None) -> JurisdictionConfig:
    """Load the packaged default jurisdiction (``sets/india_default.yaml``)."""
    base = config_dir or _DEFAULT_CONFIG_DIR
    return load_jurisdiction_config(base / f"{DEFAULT_JURISDICTION}.yaml")


__all__ = [
    "DEFAULT_JURISDICTION",
    "JurisdictionConfig",
    "get_default_config",
    "load_jurisdiction_config",
]
