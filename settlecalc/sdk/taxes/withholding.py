"""Income tax withholding calculations.

The withholding base is the sum of withholding-flagged earnings minus the
contribution already withheld and a flat allowance per eligible dependent.
Because of that subtraction, contribution must be computed first in every
recalculation pass.
"""

from ..errors import SettlementInputError
from ..schemas import WithholdingResult
from .brackets import marginal_amount, resolve_bracket
from .schemas import TaxRules


def calc_income_withholding(
    base: float,
    contribution_amount: float,
    dependents: int,
    rules: TaxRules,
) -> WithholdingResult:
    """Calculate income tax withholding for a period.

    Args:
        base: Sum of withholding-flagged earnings
        contribution_amount: Contribution withheld in the same pass
        dependents: Number of withholding-eligible dependents
        rules: Tax rules for the year

    Returns:
        WithholdingResult with the deductions, taxable base, rate and amount

    Example:
        # 2024 tables: 3000.00 gross, 258.82 contribution, no dependents
        # taxable 2741.18 -> 7.5% bracket -> 2741.18 * 0.075 - 169.44 = 36.15
    """
    if base < 0 or contribution_amount < 0:
        raise SettlementInputError("Withholding base and contribution must not be negative")
    if dependents < 0:
        raise SettlementInputError(f"Dependent count must not be negative, got {dependents}")

    dependent_deduction = dependents * rules.withholding.dependent_allowance
    taxable = max(0.0, base - contribution_amount - dependent_deduction)

    brackets = rules.withholding.brackets
    amount = marginal_amount(brackets, taxable)
    rate = resolve_bracket(brackets, taxable).rate if amount > 0 else 0.0

    return WithholdingResult(
        gross_base=base,
        contribution_deduction=contribution_amount,
        dependents=dependents,
        dependent_deduction=dependent_deduction,
        taxable_base=taxable,
        rate=rate,
        amount=amount,
    )
