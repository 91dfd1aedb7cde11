"""Social contribution withholding.

The base is the sum of earnings flagged for contribution, capped at the
configured ceiling. Employees pay through the marginal bracket table;
partners pay a flat rate on the capped base.
"""

from ..errors import SettlementInputError
from ..schemas import ContributionResult
from .brackets import marginal_amount, resolve_bracket
from .schemas import TaxRules


def calc_contribution(
    base: float,
    rules: TaxRules,
    subject_kind: str = "employee",
) -> ContributionResult:
    """Calculate social contribution for a period.

    Args:
        base: Sum of contribution-flagged earnings
        rules: Tax rules for the year
        subject_kind: 'employee' (brackets) or 'partner' (flat rate)

    Returns:
        ContributionResult with the capped base, rate and amount
    """
    if base < 0:
        raise SettlementInputError(f"Contribution base must not be negative, got {base}")

    ceiling = rules.contribution.ceiling
    taxable = min(base, ceiling)

    if subject_kind == "partner":
        rate = rules.contribution.partner_rate
        amount = taxable * rate
    else:
        brackets = rules.contribution.brackets
        rate = resolve_bracket(brackets, taxable).rate if taxable > 0 else 0.0
        amount = marginal_amount(brackets, taxable)

    return ContributionResult(
        base=base,
        taxable_base=taxable,
        capped=base > ceiling,
        rate=rate,
        amount=amount,
    )
