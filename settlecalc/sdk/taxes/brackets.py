"""Progressive bracket resolution.

Two modes share the same lookup rule (walk ascending, first bracket whose
limit is >= the base; the last bracket catches everything above):

- marginal: ``base * rate - deduction`` of the matched bracket, floored at 0.
  Used by the social contribution and income withholding tables.
- effective rate: the matched bracket's nominal rate and deduction are
  converted into ``((trailing * nominal) - deduction) / trailing`` and the
  result is applied to a different (current period) amount. Used by the
  revenue tax.
"""

from typing import NamedTuple, Sequence

from ..errors import SettlementInputError
from .schemas import Bracket


class EffectiveRate(NamedTuple):
    bracket: Bracket
    nominal_rate: float
    deduction: float
    effective_rate: float


def resolve_bracket(brackets: Sequence[Bracket], base: float) -> Bracket:
    """Return the bracket that applies to base.

    Args:
        brackets: Table ordered ascending by limit
        base: Non-negative amount to classify

    Raises:
        SettlementInputError: If base is negative or the table is empty
    """
    if base < 0:
        raise SettlementInputError(f"Bracket base must not be negative, got {base}")
    if not brackets:
        raise SettlementInputError("Bracket table is empty")

    for bracket in brackets:
        if base <= bracket.limit:
            return bracket
    return brackets[-1]


def marginal_amount(brackets: Sequence[Bracket], base: float) -> float:
    """Apply the matched bracket marginally: base * rate - deduction, >= 0."""
    bracket = resolve_bracket(brackets, base)
    if base == 0:
        return 0.0
    return max(0.0, base * bracket.rate - bracket.deduction)


def effective_rate(brackets: Sequence[Bracket], trailing_amount: float) -> EffectiveRate:
    """Convert the bracket matched by trailing_amount into an effective rate.

    A zero trailing amount falls back to the nominal rate. The effective rate
    is clamped at 0.
    """
    bracket = resolve_bracket(brackets, trailing_amount)
    if trailing_amount > 0:
        rate = (trailing_amount * bracket.rate - bracket.deduction) / trailing_amount
    else:
        rate = bracket.rate
    return EffectiveRate(
        bracket=bracket,
        nominal_rate=bracket.rate,
        deduction=bracket.deduction,
        effective_rate=max(0.0, rate),
    )
