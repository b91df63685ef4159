"""Database infrastructure for the payroll persistence adapter."""
