"""taxes - Bracket tables and tax/contribution calculations.

Scope:
- Progressive bracket lookup (marginal and effective-rate modes)
- Social contribution, income withholding, benefit fund
- Revenue tax for the simplified regime, with per-tax distribution

Constraints:
- Pure calculation - receives numbers, returns results
- No ledger access (that's in payroll/)
- Year-specific rules loaded from tax_rules/{year}.yaml

Usage:
    from settlecalc.sdk.taxes import calc_contribution, load_tax_rules

    rules = load_tax_rules(2024)
    contribution = calc_contribution(3000.0, rules)
"""

# Rules
from .schemas import Bracket, TaxRules
from .rules import load_tax_rules, clear_rules_cache, get_available_years

# Bracket resolution
from .brackets import resolve_bracket, marginal_amount, effective_rate, EffectiveRate

# Period calculations
from .contribution import calc_contribution
from .withholding import calc_income_withholding
from .fund import calc_fund_deposit, calc_fund_penalty

# Revenue tax
from .revenue import (
    RevenueSegment,
    calc_revenue_tax,
    calc_revenue_tax_by_category,
    tax_distribution,
    total_tax,
)

__all__ = [
    # Rules
    "Bracket",
    "TaxRules",
    "load_tax_rules",
    "clear_rules_cache",
    "get_available_years",
    # Brackets
    "resolve_bracket",
    "marginal_amount",
    "effective_rate",
    "EffectiveRate",
    # Period calculations
    "calc_contribution",
    "calc_income_withholding",
    "calc_fund_deposit",
    "calc_fund_penalty",
    # Revenue tax
    "RevenueSegment",
    "calc_revenue_tax",
    "calc_revenue_tax_by_category",
    "tax_distribution",
    "total_tax",
]
