"""Termination (severance) settlement.

Stateless: takes the subject, termination date, reason, notice modality and
the fund balance supplied by the caller, and returns the line items of the
settlement. The three termination fields are never defaulted; missing or
unknown values fail validation before anything is computed.

Entitlements by reason:

    reason          notice (indemnified)   leave + 1/3   13th   fund penalty
    without-cause   earning                yes           yes    yes
    resignation     deduction              yes           yes    no
    with-cause      none                   no            no     no

Worked notice adds no line in any case.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional, get_args

from .errors import SettlementInputError
from .periods import count_months, days_in_month, last_anniversary
from .schemas import NoticeModality, SettlementLine, TerminationReason, TerminationResult
from .subjects import CompensationSubject, count_withholding_dependents
from .taxes.contribution import calc_contribution
from .taxes.fund import calc_fund_deposit, calc_fund_penalty
from .taxes.schemas import TaxRules
from .taxes.withholding import calc_income_withholding

logger = logging.getLogger(__name__)

REASONS = get_args(TerminationReason)
NOTICE_MODALITIES = get_args(NoticeModality)


def _pct(rate: float) -> str:
    return f"{rate * 100:.2f}%"


def validate_termination_inputs(
    subject: CompensationSubject,
    termination_date: Optional[date],
    reason: Optional[str],
    notice: Optional[str],
    fund_balance: float,
) -> None:
    """Reject missing or invalid inputs before any calculation.

    Raises:
        SettlementInputError: Listing every problem found
    """
    errors = []
    if termination_date is None:
        errors.append("termination date is required")
    if not reason:
        errors.append("termination reason is required")
    elif reason not in REASONS:
        errors.append(f"unknown termination reason {reason!r} (expected one of {', '.join(REASONS)})")
    if not notice:
        errors.append("notice modality is required")
    elif notice not in NOTICE_MODALITIES:
        errors.append(f"unknown notice modality {notice!r} (expected one of {', '.join(NOTICE_MODALITIES)})")
    if fund_balance is None or fund_balance < 0:
        errors.append("fund balance must be a non-negative number")

    admission = subject.admission_date()
    if admission is None:
        errors.append("subject has no admission date")
    elif termination_date is not None and termination_date < admission:
        errors.append(f"termination date {termination_date} is before admission {admission}")

    if errors:
        raise SettlementInputError("Invalid termination input: " + "; ".join(errors))


def calc_termination(
    subject: CompensationSubject,
    termination_date: Optional[date],
    reason: Optional[str],
    notice: Optional[str],
    rules: TaxRules,
    fund_balance: float = 0.0,
) -> TerminationResult:
    """Calculate the termination settlement.

    Args:
        subject: Employee being terminated
        termination_date: Last day of the contract
        reason: 'without-cause', 'resignation' or 'with-cause'
        notice: 'indemnified' or 'worked'
        rules: Tax rules for the termination year
        fund_balance: Accumulated benefit fund balance (from the caller)

    Returns:
        TerminationResult with one line per entitlement and deduction

    Raises:
        SettlementInputError: If any required input is missing or invalid
    """
    validate_termination_inputs(subject, termination_date, reason, notice, fund_balance)

    term_rules = rules.termination
    salary = subject.base_compensation()
    admission = subject.admission_date()
    lines: List[SettlementLine] = []

    # Salary balance for the days worked in the termination month
    month_start = max(admission, termination_date.replace(day=1))
    worked_days = (termination_date - month_start).days + 1
    salary_balance = salary / days_in_month(termination_date) * worked_days
    lines.append(SettlementLine(
        description="Salary balance",
        reference=worked_days,
        reference_label=f"{worked_days} days",
        earning=salary_balance,
    ))

    # Notice
    employer_paid_notice = reason == "without-cause" and notice == "indemnified"
    notice_earning = 0.0
    if employer_paid_notice:
        notice_earning = salary
        lines.append(SettlementLine(
            description="Indemnified notice",
            reference=term_rules.notice_days,
            reference_label=f"{term_rules.notice_days} days",
            earning=notice_earning,
        ))
    elif reason == "resignation" and notice == "indemnified":
        lines.append(SettlementLine(
            description="Unworked notice",
            reference=term_rules.notice_days,
            reference_label=f"{term_rules.notice_days} days",
            deduction=salary,
        ))

    counting_end = termination_date
    if employer_paid_notice and term_rules.project_indemnified_notice:
        counting_end = termination_date + timedelta(days=term_rules.notice_days)

    # Proportional leave and 13th salary
    leave_months = 0
    thirteenth_months = 0
    leave = leave_bonus = thirteenth = 0.0
    if reason != "with-cause":
        cycle_start = last_anniversary(admission, termination_date)
        leave_months = min(12, count_months(cycle_start, counting_end, term_rules.min_days_per_month))
        leave = salary * leave_months / 12
        leave_bonus = leave / 3
        lines.append(SettlementLine(
            description="Proportional leave",
            reference=leave_months,
            reference_label=f"{leave_months}/12",
            earning=leave,
        ))
        lines.append(SettlementLine(description="1/3 bonus on proportional leave", earning=leave_bonus))

        year_start = max(date(termination_date.year, 1, 1), admission)
        thirteenth_months = min(12, count_months(year_start, counting_end, term_rules.min_days_per_month))
        thirteenth = salary * thirteenth_months / 12
        lines.append(SettlementLine(
            description="Proportional 13th salary",
            reference=thirteenth_months,
            reference_label=f"{thirteenth_months}/12",
            earning=thirteenth,
        ))

    # Contribution is assessed separately on the salary balance and the 13th
    salary_contribution = calc_contribution(salary_balance, rules, subject.kind)
    if salary_contribution.amount > 0:
        lines.append(SettlementLine(
            description="Contribution on salary balance",
            reference=salary_contribution.rate * 100,
            reference_label=_pct(salary_contribution.rate),
            deduction=salary_contribution.amount,
        ))
    thirteenth_contribution = calc_contribution(thirteenth, rules, subject.kind)
    if thirteenth_contribution.amount > 0:
        lines.append(SettlementLine(
            description="Contribution on 13th salary",
            reference=thirteenth_contribution.rate * 100,
            reference_label=_pct(thirteenth_contribution.rate),
            deduction=thirteenth_contribution.amount,
        ))

    withholding = calc_income_withholding(
        salary_balance + leave + leave_bonus + thirteenth,
        salary_contribution.amount + thirteenth_contribution.amount,
        count_withholding_dependents(subject),
        rules,
    )
    if withholding.amount > 0:
        lines.append(SettlementLine(
            description="Withholding on termination",
            reference=withholding.rate * 100,
            reference_label=_pct(withholding.rate),
            deduction=withholding.amount,
        ))

    fund_penalty = 0.0
    if reason == "without-cause" and fund_balance > 0:
        fund_penalty = calc_fund_penalty(fund_balance, rules)
        lines.append(SettlementLine(
            description="Fund penalty",
            reference=rules.fund.penalty_rate * 100,
            reference_label=_pct(rules.fund.penalty_rate),
            earning=fund_penalty,
        ))

    fund_deposit = 0.0
    if subject.kind == "employee":
        fund_deposit = calc_fund_deposit(salary_balance + notice_earning + thirteenth, rules)

    logger.debug(
        "Termination %s/%s on %s: leave %d/12, 13th %d/12",
        reason, notice, termination_date, leave_months, thirteenth_months,
    )

    return TerminationResult(
        lines=lines,
        **TerminationResult.totals(lines),
        termination_date=termination_date,
        reason=reason,
        notice=notice,
        leave_months=leave_months,
        thirteenth_months=thirteenth_months,
        fund_deposit=fund_deposit,
        fund_penalty=fund_penalty,
    )
