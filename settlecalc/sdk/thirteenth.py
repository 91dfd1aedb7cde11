"""13th-month salary settlement.

Paid as a first installment (advance, half the prorated amount, no
withholding), a second installment (full amount less the advance, with
contribution and withholding) or in a single installment.
"""

from datetime import date
from typing import List, get_args

from .errors import SettlementInputError
from .periods import count_months
from .schemas import SettlementLine, ThirteenthInstallment, ThirteenthResult
from .subjects import CompensationSubject, count_withholding_dependents
from .taxes.contribution import calc_contribution
from .taxes.schemas import TaxRules
from .taxes.withholding import calc_income_withholding

INSTALLMENTS = get_args(ThirteenthInstallment)


def thirteenth_months(subject: CompensationSubject, year: int, min_days_per_month: int) -> int:
    """Months of the year worked, counting from admission, capped at 12."""
    admission = subject.admission_date()
    if admission is None:
        raise SettlementInputError("subject has no admission date")
    if admission.year > year:
        raise SettlementInputError(f"subject was admitted after {year}")
    start = max(date(year, 1, 1), admission)
    return min(12, count_months(start, date(year, 12, 31), min_days_per_month))


def calc_thirteenth(
    subject: CompensationSubject,
    year: int,
    installment: str,
    rules: TaxRules,
) -> ThirteenthResult:
    """Calculate one 13th salary installment.

    Args:
        subject: Employee or partner
        year: Reference year
        installment: 'first', 'second' or 'single'
        rules: Tax rules for the year

    Raises:
        SettlementInputError: On unknown installment or admission after year
    """
    if installment not in INSTALLMENTS:
        raise SettlementInputError(
            f"unknown installment {installment!r} (expected one of {', '.join(INSTALLMENTS)})"
        )

    months = thirteenth_months(subject, year, rules.termination.min_days_per_month)
    full = subject.base_compensation() * months / 12
    advance = full / 2
    label = f"{months}/12"
    lines: List[SettlementLine] = []

    if installment == "first":
        lines.append(SettlementLine(
            description="13th salary advance (first installment)",
            reference=months, reference_label=label, earning=advance,
        ))
    else:
        if installment == "second":
            lines.append(SettlementLine(
                description="13th salary", reference=months, reference_label=label, earning=full,
            ))
            lines.append(SettlementLine(
                description="13th salary advance paid in first installment", deduction=advance,
            ))
        else:
            lines.append(SettlementLine(
                description="13th salary (single installment)",
                reference=months, reference_label=label, earning=full,
            ))

        contribution = calc_contribution(full, rules, subject.kind)
        if contribution.amount > 0:
            lines.append(SettlementLine(
                description="Contribution on 13th salary",
                reference=contribution.rate * 100,
                reference_label=f"{contribution.rate * 100:.2f}%",
                deduction=contribution.amount,
            ))
        withholding = calc_income_withholding(
            full, contribution.amount, count_withholding_dependents(subject), rules
        )
        if withholding.amount > 0:
            lines.append(SettlementLine(
                description="Withholding on 13th salary",
                reference=withholding.rate * 100,
                reference_label=f"{withholding.rate * 100:.2f}%",
                deduction=withholding.amount,
            ))

    return ThirteenthResult(
        lines=lines,
        **ThirteenthResult.totals(lines),
        year=year,
        installment=installment,
        months=months,
    )
