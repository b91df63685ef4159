"""
Payroll ORM Persistence Models (``payroll_modules.payroll.orm``).

Responsibility:
    SQLAlchemy ORM model that persists the frozen ``PayrollRecord`` defined
    in ``payroll_modules.payroll.models``.  The ORM class mirrors the DTO
    and provides ``to_dto()`` / ``from_dto()`` round-trip conversion.

Architecture position:
    **Modules layer** -- persistence companion to the pure record model.
    Inherits from ``TrackedBase`` (kernel DB base) which provides:
    id (UUID PK, auto-generated), created_at, updated_at,
    created_by_id (NOT NULL UUID), updated_by_id (nullable UUID).
    The calculator never imports this module.

Invariants enforced:
    - All monetary fields use Decimal (maps to Numeric(38,9)) -- NEVER float.
    - Enum fields stored as String(50) containing the enum .value string.
    - One row per (employee_id, payroll_period_id)
      (uq_payroll_record_employee_period).
"""

from dataclasses import fields
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from payroll_kernel.db.base import TrackedBase


class PayrollRecordModel(TrackedBase):
    """
    ORM model for ``PayrollRecord`` -- one employee's gross-to-net result
    for one payroll period.

    Contract:
        Recalculating a period replaces the computed columns of the existing
        row (see ``PayrollRecordRepository.upsert``); the row id and
        ``created_at`` survive.

    Guarantees:
        - ``tax_regime`` and ``status`` store enum .value strings.
        - Every amount is Decimal (Numeric(38,9)).
    """

    __tablename__ = "payroll_records"

    employee_id: Mapped[str] = mapped_column(String(64), nullable=False)
    payroll_period_id: Mapped[str] = mapped_column(String(64), nullable=False)

    # Attendance
    working_days: Mapped[Decimal] = mapped_column(nullable=False)
    present_days: Mapped[Decimal] = mapped_column(nullable=False)
    absent_days: Mapped[Decimal] = mapped_column(nullable=False)
    paid_leaves: Mapped[Decimal] = mapped_column(nullable=False)
    unpaid_leaves: Mapped[Decimal] = mapped_column(nullable=False)
    overtime_hours: Mapped[Decimal] = mapped_column(nullable=False)
    attendance_ratio: Mapped[Decimal] = mapped_column(nullable=False)
    attendance_clamped: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Earnings
    basic_salary: Mapped[Decimal] = mapped_column(nullable=False)
    hra: Mapped[Decimal] = mapped_column(nullable=False)
    da: Mapped[Decimal] = mapped_column(nullable=False)
    conveyance_allowance: Mapped[Decimal] = mapped_column(nullable=False)
    medical_allowance: Mapped[Decimal] = mapped_column(nullable=False)
    special_allowance: Mapped[Decimal] = mapped_column(nullable=False)
    performance_incentive: Mapped[Decimal] = mapped_column(nullable=False)
    other_allowances: Mapped[Decimal] = mapped_column(nullable=False)
    prorated_allowances: Mapped[Decimal] = mapped_column(nullable=False)
    overtime_pay: Mapped[Decimal] = mapped_column(nullable=False)
    other_earnings: Mapped[Decimal] = mapped_column(nullable=False)
    gross_earnings: Mapped[Decimal] = mapped_column(nullable=False)
    loss_of_pay: Mapped[Decimal] = mapped_column(nullable=False)

    # Provident fund
    pf_wage_base: Mapped[Decimal] = mapped_column(nullable=False)
    pf_employee: Mapped[Decimal] = mapped_column(nullable=False)
    voluntary_pf: Mapped[Decimal] = mapped_column(nullable=False)
    pf_employer: Mapped[Decimal] = mapped_column(nullable=False)
    epf: Mapped[Decimal] = mapped_column(nullable=False)
    eps: Mapped[Decimal] = mapped_column(nullable=False)
    edli: Mapped[Decimal] = mapped_column(nullable=False)
    pf_admin_charges: Mapped[Decimal] = mapped_column(nullable=False)

    # ESI
    esi_employee: Mapped[Decimal] = mapped_column(nullable=False)
    esi_employer: Mapped[Decimal] = mapped_column(nullable=False)
    esi_applicable: Mapped[bool] = mapped_column(Boolean, nullable=False)

    # Taxes
    tax_regime: Mapped[str] = mapped_column(String(50), nullable=False)
    annual_tax: Mapped[Decimal] = mapped_column(nullable=False)
    tds_amount: Mapped[Decimal] = mapped_column(nullable=False)
    effective_tax_rate: Mapped[Decimal] = mapped_column(nullable=False)
    professional_tax: Mapped[Decimal] = mapped_column(nullable=False)

    # Other deductions
    group_health_insurance: Mapped[Decimal] = mapped_column(nullable=False)
    term_insurance: Mapped[Decimal] = mapped_column(nullable=False)
    salary_advance_deduction: Mapped[Decimal] = mapped_column(nullable=False)
    other_deductions: Mapped[Decimal] = mapped_column(nullable=False)

    # Totals
    total_deductions: Mapped[Decimal] = mapped_column(nullable=False)
    net_pay: Mapped[Decimal] = mapped_column(nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "employee_id", "payroll_period_id", name="uq_payroll_record_employee_period"
        ),
        Index("idx_payroll_record_period", "payroll_period_id"),
        Index("idx_payroll_record_status", "status"),
    )

    def to_dto(self):
        from payroll_modules.payroll.models import PayrollRecord, PayrollStatus, TaxRegime

        values = {f.name: getattr(self, f.name) for f in fields(PayrollRecord)}
        values["tax_regime"] = TaxRegime(self.tax_regime)
        values["status"] = PayrollStatus(self.status)
        return PayrollRecord(**values)

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "PayrollRecordModel":
        return cls(**_column_values(dto), created_by_id=created_by_id)

    def apply_dto(self, dto, updated_by_id: UUID) -> None:
        """Overwrite the computed columns with a recalculated record."""
        for name, value in _column_values(dto).items():
            setattr(self, name, value)
        self.updated_by_id = updated_by_id

    def __repr__(self) -> str:
        return (
            f"<PayrollRecordModel {self.employee_id}/{self.payroll_period_id}: "
            f"net {self.net_pay} ({self.status})>"
        )


def _column_values(dto) -> dict:
    values = {f.name: getattr(dto, f.name) for f in fields(dto)}
    for name in ("tax_regime", "status"):
        value = values[name]
        values[name] = value.value if hasattr(value, "value") else value
    return values
