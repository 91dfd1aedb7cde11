"""Benefit fund deposit and dismissal penalty (flat rates, no brackets)."""

from ..errors import SettlementInputError
from .schemas import TaxRules


def calc_fund_deposit(base: float, rules: TaxRules) -> float:
    """Employer deposit over the fund-flagged earnings."""
    if base < 0:
        raise SettlementInputError(f"Fund base must not be negative, got {base}")
    return base * rules.fund.rate


def calc_fund_penalty(balance: float, rules: TaxRules) -> float:
    """Penalty over the accumulated fund balance (dismissal without cause)."""
    if balance < 0:
        raise SettlementInputError(f"Fund balance must not be negative, got {balance}")
    return balance * rules.fund.penalty_rate
