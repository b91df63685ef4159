"""
Pytest fixtures for the payroll engine test suite.
"""

import json
import logging
from decimal import Decimal
from io import StringIO
from typing import Generator
from uuid import UUID

import pytest
from sqlalchemy.orm import Session

from payroll_kernel.db.engine import (
    create_tables,
    drop_tables,
    init_engine_from_url,
    reset_engine,
)
from payroll_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from payroll_modules.payroll.models import (
    AttendanceSummary,
    SalaryStructure,
    StatutoryRateSnapshot,
    TaxRegime,
    TaxSlab,
)

TEST_ACTOR_ID = UUID("00000000-0000-0000-0000-000000000001")


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture payroll_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            calculate_payroll(...)
            logs = captured_logs()
            assert any(r["message"] == "payroll_calculation_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("payroll_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture(scope="session")
def db_engine():
    """In-memory SQLite engine with every payroll table created."""
    engine = init_engine_from_url("sqlite://")
    create_tables()
    yield engine
    drop_tables()
    reset_engine()


@pytest.fixture(scope="function")
def session(db_engine) -> Generator[Session, None, None]:
    """Provide a database session for testing.

    The session joins an outer transaction that is rolled back at
    teardown, undoing every change made during the test.
    """
    conn = db_engine.connect()
    trans = conn.begin()
    sess = Session(bind=conn, join_transaction_mode="create_savepoint", expire_on_commit=False)
    yield sess
    try:
        sess.close()
    finally:
        try:
            trans.rollback()
        finally:
            conn.close()


@pytest.fixture
def test_actor_id() -> UUID:
    """Provide a consistent test actor ID."""
    return TEST_ACTOR_ID


# =============================================================================
# Statutory data fixtures
# =============================================================================


@pytest.fixture
def default_rates() -> StatutoryRateSnapshot:
    return StatutoryRateSnapshot()


@pytest.fixture
def old_regime_slabs() -> list[TaxSlab]:
    """0-250,000 @0%, 250,000-500,000 @5% + 4% cess, above @20%."""
    return [
        TaxSlab(TaxRegime.OLD, Decimal("0"), Decimal("250000"), Decimal("0")),
        TaxSlab(
            TaxRegime.OLD, Decimal("250000"), Decimal("500000"), Decimal("5"),
            cess=Decimal("4"),
        ),
        TaxSlab(TaxRegime.OLD, Decimal("500000"), None, Decimal("20")),
    ]


@pytest.fixture
def new_regime_slabs() -> list[TaxSlab]:
    return [
        TaxSlab(TaxRegime.NEW, Decimal("0"), Decimal("300000"), Decimal("0")),
        TaxSlab(TaxRegime.NEW, Decimal("300000"), Decimal("700000"), Decimal("5")),
        TaxSlab(TaxRegime.NEW, Decimal("700000"), None, Decimal("10")),
    ]


@pytest.fixture
def tax_slabs(old_regime_slabs, new_regime_slabs) -> list[TaxSlab]:
    return old_regime_slabs + new_regime_slabs


@pytest.fixture
def reference_salary() -> SalaryStructure:
    """Basic 20,000 with allowances summing to 10,850."""
    return SalaryStructure(
        employee_id="EMP-001",
        basic_salary=Decimal("20000"),
        hra=Decimal("5000"),
        conveyance_allowance=Decimal("1600"),
        medical_allowance=Decimal("1250"),
        special_allowance=Decimal("3000"),
        tax_regime=TaxRegime.OLD,
    )


@pytest.fixture
def full_attendance() -> AttendanceSummary:
    """24 present plus 2 paid leave over 26 working days."""
    return AttendanceSummary(
        working_days=Decimal("26"),
        present_days=Decimal("24"),
        paid_leaves=Decimal("2"),
    )
