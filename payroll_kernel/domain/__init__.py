"""Pure value helpers shared by payroll engines."""
