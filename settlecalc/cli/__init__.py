"""Settle Calc CLI."""
