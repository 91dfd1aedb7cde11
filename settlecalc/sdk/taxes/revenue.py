"""Revenue tax for the simplified regime.

The trailing 12-period revenue selects a bracket of the category's annex
table. Its nominal rate and deduction become an effective rate, which is
applied to the current period revenue.

Usage:
    from settlecalc.sdk.taxes import calc_revenue_tax, load_tax_rules

    rules = load_tax_rules(2024)
    result = calc_revenue_tax(50_000, 400_000, "anexo-iii", rules)
"""

import logging
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..errors import SettlementInputError
from ..schemas import NoApplicableRevenue, RevenueTaxResult
from .brackets import effective_rate
from .schemas import AnnexRules, TaxRules

logger = logging.getLogger(__name__)

RevenueTaxOutcome = Union[RevenueTaxResult, NoApplicableRevenue]


class RevenueSegment(BaseModel):
    """Revenue of one category for the current period and trailing window."""

    model_config = ConfigDict(extra="forbid")

    category: str
    current_revenue: float = Field(..., ge=0)
    trailing_revenue: float = Field(..., ge=0)


def get_annex(annex: str, rules: TaxRules) -> AnnexRules:
    try:
        return rules.revenue_tax.annexes[annex]
    except KeyError:
        known = ", ".join(sorted(rules.revenue_tax.annexes))
        raise SettlementInputError(f"Unknown annex {annex!r} (known: {known})") from None


def annex_for_category(category: str, rules: TaxRules) -> str:
    try:
        return rules.revenue_tax.categories[category]
    except KeyError:
        known = ", ".join(sorted(rules.revenue_tax.categories))
        raise SettlementInputError(f"Unknown revenue category {category!r} (known: {known})") from None


def tax_distribution(annex: str, trailing_revenue: float, rules: TaxRules) -> Dict[str, float]:
    """Shares (percent) of each component tax for a trailing revenue.

    Rows are matched the same way as brackets; an annex without a
    distribution table returns an empty dict.
    """
    rows = get_annex(annex, rules).distribution
    if not rows:
        return {}
    for row in rows:
        if trailing_revenue <= row.limit:
            return dict(row.shares)
    return dict(rows[-1].shares)


def distribute_tax(tax_amount: float, shares: Dict[str, float]) -> Dict[str, float]:
    """Split a tax amount proportionally to the shares."""
    total = sum(shares.values())
    if total <= 0:
        return {}
    return {name: tax_amount * share / total for name, share in shares.items()}


def calc_revenue_tax(
    current_revenue: float,
    trailing_revenue: float,
    annex: str,
    rules: TaxRules,
    category: Optional[str] = None,
) -> RevenueTaxOutcome:
    """Calculate the revenue tax for one annex.

    Args:
        current_revenue: Revenue of the period being assessed
        trailing_revenue: Revenue of the 12 periods before it
        annex: Annex key (e.g. 'anexo-i')
        rules: Tax rules for the year
        category: Revenue category, echoed on the result

    Returns:
        RevenueTaxResult, or NoApplicableRevenue when current revenue is 0

    Raises:
        SettlementInputError: On negative revenue or unknown annex
    """
    if current_revenue < 0 or trailing_revenue < 0:
        raise SettlementInputError("Revenue must not be negative")

    annex_rules = get_annex(annex, rules)

    if current_revenue == 0:
        logger.debug("No revenue for %s in the period", category or annex)
        return NoApplicableRevenue(category=category, annex=annex, trailing_revenue=trailing_revenue)

    rate = effective_rate(annex_rules.brackets, trailing_revenue)
    tax_amount = max(0.0, current_revenue * rate.effective_rate)
    shares = tax_distribution(annex, trailing_revenue, rules)

    return RevenueTaxResult(
        category=category,
        annex=annex,
        current_revenue=current_revenue,
        trailing_revenue=trailing_revenue,
        nominal_rate=rate.nominal_rate,
        deduction=rate.deduction,
        effective_rate=rate.effective_rate,
        tax_amount=tax_amount,
        distribution=distribute_tax(tax_amount, shares),
    )


def calc_revenue_tax_by_category(
    segments: Iterable[Union[RevenueSegment, dict]],
    rules: TaxRules,
) -> List[RevenueTaxOutcome]:
    """Calculate the revenue tax for each category segment.

    Each category maps to its own annex table through
    ``revenue_tax.categories`` in the rules file.
    """
    results = []
    for segment in segments:
        if not isinstance(segment, RevenueSegment):
            segment = RevenueSegment.model_validate(segment)
        annex = annex_for_category(segment.category, rules)
        results.append(
            calc_revenue_tax(
                segment.current_revenue,
                segment.trailing_revenue,
                annex,
                rules,
                category=segment.category,
            )
        )
    return results


def total_tax(outcomes: Iterable[RevenueTaxOutcome]) -> float:
    """Sum of tax over the outcomes that produced a tax result."""
    return sum(o.tax_amount for o in outcomes if isinstance(o, RevenueTaxResult))
