"""Period settlement recompute.

``recompute`` is the single gross-to-net pass for a ledger:

1. Strip system-derived events (never trusted from storage or UI).
2. Social contribution over contribution-flagged earnings -> append event.
3. Income withholding over withholding-flagged earnings, net of the
   contribution from step 2 -> append event.
4. Benefit fund deposit over fund-flagged earnings (informational only,
   employer-borne, not a ledger line).
5. Sum earnings and deductions over the final event list.

The pass is a pure function of its inputs, so running it twice on the same
ledger yields identical results.
"""

import logging
from typing import Iterable, List

from ..schemas import (
    CONTRIBUTION_RUBRICA,
    WITHHOLDING_RUBRICA,
    PayrollEvent,
    SettlementResult,
)
from ..subjects import CompensationSubject, count_withholding_dependents
from ..taxes.contribution import calc_contribution
from ..taxes.fund import calc_fund_deposit
from ..taxes.schemas import TaxRules
from ..taxes.withholding import calc_income_withholding

logger = logging.getLogger(__name__)


def strip_system_events(events: Iterable[PayrollEvent]) -> List[PayrollEvent]:
    """Drop previously derived contribution/withholding events."""
    return [e for e in events if not e.rubrica.is_system]


def _earnings_base(events: Iterable[PayrollEvent], flag: str) -> float:
    return sum(
        e.earning_amount
        for e in events
        if e.rubrica.kind == "earning" and getattr(e.rubrica, flag)
    )


def recompute(
    events: Iterable[PayrollEvent],
    subject: CompensationSubject,
    rules: TaxRules,
) -> SettlementResult:
    """Recompute the full settlement for a ledger.

    Args:
        events: Ledger events; any system-derived events are discarded
        subject: Employee or partner the ledger belongs to
        rules: Tax rules for the period's year

    Returns:
        SettlementResult whose events end with the contribution and
        withholding events
    """
    user_events = strip_system_events(events)

    contribution_base = _earnings_base(user_events, "affects_contribution")
    withholding_base = _earnings_base(user_events, "affects_withholding")
    fund_base = _earnings_base(user_events, "affects_fund")

    contribution = calc_contribution(contribution_base, rules, subject.kind)
    withholding = calc_income_withholding(
        withholding_base,
        contribution.amount,
        count_withholding_dependents(subject),
        rules,
    )
    fund_amount = calc_fund_deposit(fund_base, rules) if subject.kind == "employee" else 0.0

    final_events = user_events + [
        PayrollEvent.for_rubrica(
            CONTRIBUTION_RUBRICA,
            reference=contribution.rate * 100,
            deduction_amount=contribution.amount,
        ),
        PayrollEvent.for_rubrica(
            WITHHOLDING_RUBRICA,
            reference=withholding.rate * 100,
            deduction_amount=withholding.amount,
        ),
    ]

    total_earnings = sum(e.earning_amount for e in final_events)
    total_deductions = sum(e.deduction_amount for e in final_events)

    logger.debug(
        "Recomputed %d events: contribution %.4f on %.4f, withholding %.4f on %.4f",
        len(final_events),
        contribution.amount,
        contribution.taxable_base,
        withholding.amount,
        withholding.taxable_base,
    )

    return SettlementResult(
        events=final_events,
        total_earnings=total_earnings,
        total_deductions=total_deductions,
        net=total_earnings - total_deductions,
        contribution_base=contribution_base,
        withholding_base=withholding_base,
        fund_base=fund_base,
        fund_amount=fund_amount,
        contribution=contribution,
        withholding=withholding,
    )
