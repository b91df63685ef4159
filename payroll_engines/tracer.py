"""
payroll_engines.tracer -- ``@traced_engine`` decorator for the statutory engines.

Each call of a decorated engine logs one ``PAYROLL_ENGINE_TRACE`` record
with the engine name and version, how long the call took, and a short
fingerprint of the inputs that determine its result.  Two calls with the
same fingerprint and version must return equal results, which is what
makes a recalculated payroll comparable with the stored one.

The decorator only reads arguments; engines stay free of I/O apart from
this log record.  A call that raises is traced with ``outcome="error"``
and the exception propagates unchanged.

Usage:
    @traced_engine("esi", "1.0", fingerprint_fields=("gross_earnings",))
    def calculate_esi(gross_earnings, rates):
        ...
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import json
import time
from collections.abc import Callable
from enum import Enum
from typing import Any

from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.tracer")

FINGERPRINT_LENGTH = 16


def _fingerprint_value(value: Any) -> Any:
    """JSON-ready form of an engine argument with a stable rendering."""
    if isinstance(value, Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            "__type__": type(value).__name__,
            **{
                f.name: _fingerprint_value(getattr(value, f.name))
                for f in dataclasses.fields(value)
            },
        }
    if isinstance(value, dict):
        return {str(k): _fingerprint_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_fingerprint_value(v) for v in value]
    if value is None or isinstance(value, (bool, int, str)):
        return value
    # Decimal and anything else: the str form is exact
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: dict[str, Any],
) -> str:
    """SHA-256 over the named arguments, truncated to 16 hex chars.

    A field missing from ``arguments`` hashes the same as ``None``.
    """
    selected = {name: _fingerprint_value(arguments.get(name)) for name in fingerprint_fields}
    canonical = json.dumps(selected, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorate a pure engine function so that every call is traced.

    Args:
        engine_name: Engine identifier, e.g. ``"provident_fund"``.
        engine_version: Bumped whenever the engine's arithmetic changes.
        fingerprint_fields: Parameters hashed into ``input_fingerprint``.
            Arguments are bound against the signature with defaults
            applied, so positional, keyword and defaulted calls with the
            same effective inputs share a fingerprint.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = ""
            if fingerprint_fields:
                bound = signature.bind(*args, **kwargs)
                bound.apply_defaults()
                fingerprint = compute_input_fingerprint(fingerprint_fields, bound.arguments)

            outcome = "error"
            started = time.monotonic()
            try:
                result = func(*args, **kwargs)
                outcome = "ok"
                return result
            finally:
                logger.info(
                    "PAYROLL_ENGINE_TRACE",
                    extra={
                        "trace_type": "PAYROLL_ENGINE_TRACE",
                        "engine_name": engine_name,
                        "engine_version": engine_version,
                        "input_fingerprint": fingerprint,
                        "outcome": outcome,
                        "duration_ms": round((time.monotonic() - started) * 1000, 2),
                    },
                )

        return wrapper

    return decorator
