"""Settle Calc - payroll, termination and revenue tax settlement engine."""

__version__ = "0.1.0"
