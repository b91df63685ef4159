"""
Payroll Modules.

Thin orchestration over the Payroll Kernel and Engines.  The payroll
module contains:
- Domain models (the nouns)
- The calculator, validator and pay-slip summary (the verbs)
- Engine settings
- ORM persistence and a record repository

Actual statutory arithmetic lives in ``payroll_engines``.
"""

from payroll_modules import payroll

__all__ = [
    "payroll",
]
