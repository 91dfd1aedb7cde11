"""Vacation settlement.

Vacation pay plus the 1/3 bonus, optionally converting part of the leave
into cash and advancing half of the 13th salary. Contribution and
withholding apply to vacation pay and bonus only; the cash conversion and
the 13th advance are taxed separately.
"""

from typing import List

from .errors import SettlementInputError
from .schemas import SettlementLine, VacationResult
from .subjects import CompensationSubject, count_withholding_dependents
from .taxes.contribution import calc_contribution
from .taxes.schemas import TaxRules
from .taxes.withholding import calc_income_withholding


def calc_vacation(
    subject: CompensationSubject,
    vacation_days: int,
    rules: TaxRules,
    sell_days: bool = False,
    advance_thirteenth: bool = False,
) -> VacationResult:
    """Calculate a vacation settlement.

    Args:
        subject: Employee taking leave
        vacation_days: Days of leave taken
        rules: Tax rules for the year
        sell_days: Convert the configured number of days into cash
        advance_thirteenth: Pay half the 13th salary with the vacation

    Raises:
        SettlementInputError: If the days don't fit in one month of leave
    """
    vac_rules = rules.vacation
    max_days = vac_rules.days_per_month - (vac_rules.cash_conversion_days if sell_days else 0)
    if vacation_days is None or not 0 < vacation_days <= max_days:
        raise SettlementInputError(f"vacation days must be between 1 and {max_days}, got {vacation_days!r}")

    salary = subject.base_compensation()
    daily = salary / vac_rules.days_per_month
    lines: List[SettlementLine] = []

    pay = daily * vacation_days
    bonus = pay / 3
    lines.append(SettlementLine(
        description="Vacation", reference=vacation_days, reference_label=f"{vacation_days} days", earning=pay,
    ))
    lines.append(SettlementLine(description="1/3 vacation bonus", earning=bonus))

    if sell_days:
        days = vac_rules.cash_conversion_days
        cash = daily * days
        lines.append(SettlementLine(
            description="Vacation cash conversion", reference=days, reference_label=f"{days} days", earning=cash,
        ))
        lines.append(SettlementLine(description="1/3 on vacation cash conversion", earning=cash / 3))

    if advance_thirteenth:
        lines.append(SettlementLine(description="13th salary advance", earning=salary / 2))

    contribution = calc_contribution(pay + bonus, rules, subject.kind)
    if contribution.amount > 0:
        lines.append(SettlementLine(
            description="Contribution on vacation",
            reference=contribution.rate * 100,
            reference_label=f"{contribution.rate * 100:.2f}%",
            deduction=contribution.amount,
        ))
    withholding = calc_income_withholding(
        pay + bonus, contribution.amount, count_withholding_dependents(subject), rules
    )
    if withholding.amount > 0:
        lines.append(SettlementLine(
            description="Withholding on vacation",
            reference=withholding.rate * 100,
            reference_label=f"{withholding.rate * 100:.2f}%",
            deduction=withholding.amount,
        ))

    return VacationResult(lines=lines, **VacationResult.totals(lines), vacation_days=vacation_days)
