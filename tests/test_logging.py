"""Tests for the structured logging system (payroll_kernel/logging_config.py)."""

import json
import logging
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from payroll_kernel.exceptions import InvalidPayrollInputError, TaxSlabOverlapError
from payroll_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)
from payroll_modules.payroll.models import TaxRegime


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


def _parse_all_logs(stream: StringIO) -> list[dict]:
    """Parse all JSON log lines from a stream."""
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "payroll_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("calculated", extra={"slabs_applied": 2, "regime": "old"})

        record = _parse_log(stream)
        assert record["slabs_applied"] == 2
        assert record["regime"] == "old"

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        LogContext.set(correlation_id="abc-123", employee_id="EMP-9")
        logger.info("test_msg")

        record = _parse_log(stream)
        assert record["correlation_id"] == "abc-123"
        assert record["employee_id"] == "EMP-9"

    def test_exception_fields(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        try:
            raise ValueError("boom")
        except ValueError:
            logger.error("failed", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "traceback" in record

    def test_payroll_exception_code_extracted(self):
        """Payroll exceptions carry a .code attribute and structured fields."""
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")

        try:
            raise TaxSlabOverlapError("old", Decimal("300000"), Decimal("250000"))
        except TaxSlabOverlapError:
            logger.error("slab_error", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "TAX_SLAB_OVERLAP"
        assert record["exc_type"] == "TaxSlabOverlapError"
        assert record["exc_regime"] == "old"
        assert record["exc_previous_to"] == "300000"
        assert record["exc_next_from"] == "250000"

    def test_input_error_fields(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")

        try:
            raise InvalidPayrollInputError("advance_deduction", Decimal("-5"))
        except InvalidPayrollInputError:
            logger.warning("bad_input", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "INVALID_PAYROLL_INPUT"
        assert record["exc_field"] == "advance_deduction"
        assert record["exc_reason"] == "must not be negative"

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("bare_message")

        record = _parse_log(stream)
        assert "correlation_id" not in record
        assert "employee_id" not in record

    def test_uuid_decimal_and_enum_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        uid = uuid4()
        logger.info(
            "typed_values",
            extra={"record_id": uid, "amount": Decimal("12.50"), "tax_regime": TaxRegime.NEW},
        )

        record = _parse_log(stream)
        assert record["record_id"] == str(uid)
        assert record["amount"] == "12.50"
        assert record["tax_regime"] == "new"

    def test_valid_json_every_line(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("first")
        logger.warning("second", extra={"k": "v"})
        logger.debug("third")

        logs = _parse_all_logs(stream)
        # Default level is INFO, so the debug line is dropped
        assert len(logs) == 2
        for record in logs:
            assert "ts" in record
            assert "level" in record
            assert "logger" in record
            assert "message" in record


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    """Tests for context propagation."""

    def test_set_and_get(self):
        LogContext.set(correlation_id="x", payroll_period_id="2024-05")
        ctx = LogContext.get_all()
        assert ctx == {"correlation_id": "x", "payroll_period_id": "2024-05"}

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_context_manager(self):
        LogContext.set(employee_id="outer")
        with LogContext.bind(employee_id="inner"):
            assert LogContext.get_all()["employee_id"] == "inner"
        assert LogContext.get_all()["employee_id"] == "outer"

    def test_bind_restores_none(self):
        """bind() restores to None if there was no previous value."""
        assert "batch_id" not in LogContext.get_all()
        with LogContext.bind(batch_id="temp"):
            assert LogContext.get_all()["batch_id"] == "temp"
        assert "batch_id" not in LogContext.get_all()

    def test_bind_skips_none_values(self):
        LogContext.set(employee_id="kept")
        with LogContext.bind(employee_id=None, payroll_period_id="P1"):
            ctx = LogContext.get_all()
            assert ctx["employee_id"] == "kept"
            assert ctx["payroll_period_id"] == "P1"

    def test_bind_stringifies_values(self):
        batch_id = uuid4()
        with LogContext.bind(batch_id=batch_id):
            assert LogContext.get_all()["batch_id"] == str(batch_id)

    def test_all_fields(self):
        LogContext.set(
            correlation_id="c",
            employee_id="e",
            payroll_period_id="p",
            batch_id="b",
            actor_id="a",
        )
        ctx = LogContext.get_all()
        assert len(ctx) == 5
        assert ctx["actor_id"] == "a"


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    """Tests for initialization."""

    def test_idempotent(self):
        h1, _ = _make_handler()
        configure_logging(handler=h1)
        h2, _ = _make_handler()
        configure_logging(handler=h2)  # second call is no-op
        namespace = logging.getLogger("payroll_kernel")
        structured = [
            h for h in namespace.handlers if isinstance(h.formatter, StructuredFormatter)
        ]
        assert structured == [h1]
        assert h2 not in namespace.handlers

    def test_get_logger_returns_child(self):
        logger = get_logger("engines.income_tax")
        assert logger.name == "payroll_kernel.engines.income_tax"

    def test_logger_hierarchy(self):
        """Child loggers inherit the payroll_kernel root config."""
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.DEBUG)
        child = get_logger("deep.nested.module")
        child.debug("hierarchy_test")

        record = _parse_log(stream)
        assert record["message"] == "hierarchy_test"
        assert record["logger"] == "payroll_kernel.deep.nested.module"
