"""Automatic event rules.

Some rubricas carry an ``auto_rule`` tag: their amount is derived from the
subject and the current ledger state instead of being typed in. Rules
return the fields to set on the event, or None when the rubrica has no
applicable rule.
"""

from typing import Callable, Dict, List, Optional

from ..errors import SettlementInputError
from ..schemas import PayrollEvent, Rubrica
from ..subjects import CompensationSubject, count_family_allowance_dependents
from ..taxes.schemas import TaxRules

EventFields = Dict[str, float]
RuleFn = Callable[[Rubrica, CompensationSubject, List[PayrollEvent], TaxRules, Optional[float]], Optional[EventFields]]


def _base_salary(subject: CompensationSubject, events: List[PayrollEvent]) -> float:
    """Base compensation from the ledger's base event, else from the subject."""
    base_id = subject.base_rubrica().id
    for event in events:
        if event.id == base_id:
            return event.earning_amount
    return subject.base_compensation()


def _hourly_rate(subject, events, rules) -> float:
    return _base_salary(subject, events) / rules.automatic_events.hours_per_month


def _family_allowance(rubrica, subject, events, rules, reference):
    dependents = count_family_allowance_dependents(subject)
    income = sum(
        e.earning_amount
        for e in events
        if e.rubrica.affects_contribution and e.rubrica.kind == "earning" and e.id != rubrica.id
    )
    allowance = rules.family_allowance
    if dependents > 0 and income <= allowance.income_limit:
        return {
            "reference": dependents,
            "earning_amount": dependents * allowance.value_per_dependent,
            "deduction_amount": 0.0,
        }
    return {"reference": dependents, "earning_amount": 0.0, "deduction_amount": 0.0}


def _transport_voucher(rubrica, subject, events, rules, reference):
    rate = rules.automatic_events.transport_voucher_rate
    return {
        "reference": rate * 100,
        "earning_amount": 0.0,
        "deduction_amount": _base_salary(subject, events) * rate,
    }


def _overtime(rubrica, subject, events, rules, reference):
    hours = reference or 0.0
    multiplier = rules.automatic_events.overtime_multiplier
    return {
        "reference": hours,
        "earning_amount": _hourly_rate(subject, events, rules) * multiplier * hours,
        "deduction_amount": 0.0,
    }


def _night_shift(rubrica, subject, events, rules, reference):
    hours = reference or 0.0
    rate = rules.automatic_events.night_shift_rate
    return {
        "reference": hours,
        "earning_amount": _hourly_rate(subject, events, rules) * rate * hours,
        "deduction_amount": 0.0,
    }


def _hazard(rubrica, subject, events, rules, reference):
    rate = rules.automatic_events.hazard_rate
    return {
        "reference": rate * 100,
        "earning_amount": _base_salary(subject, events) * rate,
        "deduction_amount": 0.0,
    }


def _unhealthy(rubrica, subject, events, rules, reference):
    # Graded on the minimum wage, not on the salary
    if not rubrica.auto_rate:
        raise SettlementInputError(
            f"Rubrica {rubrica.id!r} uses the unhealthy rule but has no auto_rate grade"
        )
    return {
        "reference": rubrica.auto_rate * 100,
        "earning_amount": rules.minimum_wage * rubrica.auto_rate,
        "deduction_amount": 0.0,
    }


AUTO_RULES: Dict[str, RuleFn] = {
    "family_allowance": _family_allowance,
    "transport_voucher": _transport_voucher,
    "overtime": _overtime,
    "night_shift": _night_shift,
    "hazard": _hazard,
    "unhealthy": _unhealthy,
}


def calc_automatic_event(
    rubrica: Rubrica,
    subject: CompensationSubject,
    events: List[PayrollEvent],
    rules: TaxRules,
    reference: Optional[float] = None,
) -> Optional[EventFields]:
    """Compute the event fields for a rubrica with an automatic rule.

    Args:
        rubrica: Rubrica being added or updated
        subject: Employee or partner the ledger belongs to
        events: Current ledger events, without system-derived events
        rules: Tax rules for the year
        reference: Unit count entered by the user (hours for overtime)

    Returns:
        Dict of reference/earning_amount/deduction_amount, or None if the
        rubrica has no automatic rule
    """
    if rubrica.auto_rule is None:
        return None
    return AUTO_RULES[rubrica.auto_rule](rubrica, subject, events, rules, reference)
