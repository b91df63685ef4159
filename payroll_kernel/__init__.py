"""
Payroll Kernel

Shared foundations for the statutory payroll engine:
- Typed exceptions with machine-readable codes
- Structured JSON logging with request-scoped context
- Decimal rounding helpers (whole currency units, half-up)
- SQLAlchemy declarative base for the persistence adapter
"""

__version__ = "0.1.0"
