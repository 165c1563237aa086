"""Payroll template generators, grouped by topic."""
