"""Pydantic schemas for settle-calc data.

All schemas use extra='forbid' to reject unknown fields, ensuring
typos in ledger files cause clear errors rather than silent ignoring.

Monetary fields hold full float precision. Results expose ``rounded()``
for the presentation boundary, where values are rounded to cents.
"""

from datetime import date
from typing import ClassVar, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


RubricaKind = Literal["earning", "deduction", "system"]

AutoRule = Literal[
    "family_allowance",
    "transport_voucher",
    "overtime",
    "night_shift",
    "hazard",
    "unhealthy",
]

EVENT_FIELDS = ("reference", "earning_amount", "deduction_amount")


def round_money(value: float) -> float:
    """Round to cents (presentation boundary only)."""
    return round(value, 2)


class _Rounded:
    """Mixin adding rounded() for the fields named in money_fields."""

    money_fields: ClassVar[Tuple[str, ...]] = ()

    def rounded(self) -> dict:
        data = self.model_dump(mode="json")
        for name in self.money_fields:
            if data.get(name) is not None:
                data[name] = round_money(data[name])
        return data


# =============================================================================
# Reference data
# =============================================================================


class Rubrica(BaseModel):
    """Pay-code definition.

    The incidence flags control which taxable bases the code's earning
    amount feeds. ``protected`` rubricas (base compensation and the two
    system-derived events) can't be removed or edited through a ledger.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(..., min_length=1)
    code: str = Field(..., pattern=r"^\d+$", description="Numeric pay code")
    description: str
    kind: RubricaKind
    protected: bool = False
    affects_contribution: bool = False
    affects_fund: bool = False
    affects_withholding: bool = False
    auto_rule: Optional[AutoRule] = Field(
        default=None, description="Automatic calculation rule keyed to the ledger state"
    )
    auto_rate: Optional[float] = Field(
        default=None, ge=0, le=1, description="Rate used by rules that need one (e.g. unhealthy grade)"
    )

    @property
    def is_system(self) -> bool:
        return self.kind == "system"


CONTRIBUTION_RUBRICA = Rubrica(
    id="contribution",
    code="901",
    description="Social contribution on salary",
    kind="system",
    protected=True,
)

WITHHOLDING_RUBRICA = Rubrica(
    id="withholding",
    code="902",
    description="Income tax withholding on salary",
    kind="system",
    protected=True,
)

BASE_SALARY_RUBRICA = Rubrica(
    id="base_salary",
    code="100",
    description="Base salary",
    kind="earning",
    protected=True,
    affects_contribution=True,
    affects_fund=True,
    affects_withholding=True,
)

PRO_LABORE_RUBRICA = Rubrica(
    id="pro_labore",
    code="101",
    description="Pro-labore",
    kind="earning",
    protected=True,
    affects_contribution=True,
    affects_withholding=True,
)


class Dependent(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = ""
    withholding_eligible: bool = False
    family_allowance_eligible: bool = False


# =============================================================================
# Ledger events
# =============================================================================


class PayrollEvent(BaseModel):
    """One rubrica entry in a period ledger."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    rubrica: Rubrica
    reference: float = Field(default=0, ge=0, description="Unit count (days, hours, percent)")
    earning_amount: float = Field(default=0, ge=0)
    deduction_amount: float = Field(default=0, ge=0)

    @classmethod
    def for_rubrica(cls, rubrica: Rubrica, **amounts) -> "PayrollEvent":
        return cls(id=rubrica.id, rubrica=rubrica, **amounts)


# =============================================================================
# Calculator results
# =============================================================================


class ContributionResult(BaseModel, _Rounded):
    """Social contribution withheld from a base."""

    model_config = ConfigDict(extra="forbid")
    money_fields: ClassVar[Tuple[str, ...]] = ("base", "taxable_base", "amount")

    base: float = Field(..., ge=0, description="Sum of contribution-flagged earnings")
    taxable_base: float = Field(..., ge=0, description="Base after applying the ceiling")
    capped: bool = Field(..., description="Whether the ceiling reduced the base")
    rate: float = Field(..., ge=0, description="Rate of the matched bracket (or flat partner rate)")
    amount: float = Field(..., ge=0)


class WithholdingResult(BaseModel, _Rounded):
    """Income tax withheld from a base net of contribution and dependents."""

    model_config = ConfigDict(extra="forbid")
    money_fields: ClassVar[Tuple[str, ...]] = (
        "gross_base", "contribution_deduction", "dependent_deduction", "taxable_base", "amount",
    )

    gross_base: float = Field(..., ge=0)
    contribution_deduction: float = Field(..., ge=0)
    dependents: int = Field(..., ge=0)
    dependent_deduction: float = Field(..., ge=0)
    taxable_base: float = Field(..., ge=0, description="Base after deductions, floored at 0")
    rate: float = Field(..., ge=0)
    amount: float = Field(..., ge=0)


class SettlementResult(BaseModel, _Rounded):
    """Gross-to-net result for one subject and period.

    Totals are summed once over ``events``, which includes the two
    system-derived events.
    """

    model_config = ConfigDict(extra="forbid")
    money_fields: ClassVar[Tuple[str, ...]] = (
        "total_earnings", "total_deductions", "net",
        "contribution_base", "withholding_base", "fund_base", "fund_amount",
    )

    events: List[PayrollEvent]
    total_earnings: float
    total_deductions: float
    net: float
    contribution_base: float
    withholding_base: float
    fund_base: float
    fund_amount: float
    contribution: ContributionResult
    withholding: WithholdingResult

    @model_validator(mode="after")
    def totals_match_events(self) -> "SettlementResult":
        if self.total_earnings != sum(e.earning_amount for e in self.events):
            raise ValueError("total_earnings must equal the sum of event earnings")
        if self.total_deductions != sum(e.deduction_amount for e in self.events):
            raise ValueError("total_deductions must equal the sum of event deductions")
        if self.net != self.total_earnings - self.total_deductions:
            raise ValueError("net must equal total_earnings - total_deductions")
        return self

    def rounded(self) -> dict:
        data = super().rounded()
        data["contribution"] = self.contribution.rounded()
        data["withholding"] = self.withholding.rounded()
        for event in data["events"]:
            event["earning_amount"] = round_money(event["earning_amount"])
            event["deduction_amount"] = round_money(event["deduction_amount"])
        return data


class SettlementLine(BaseModel):
    """Line item of a termination, 13th salary or vacation settlement."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    description: str
    reference: float = Field(default=0, ge=0, description="Quantity (days, months, rate)")
    reference_label: str = Field(default="", description="Display form, e.g. '7/12' or '30 days'")
    earning: float = Field(default=0, ge=0)
    deduction: float = Field(default=0, ge=0)


class LineItemResult(BaseModel, _Rounded):
    """Line items plus totals. ``net = total_earnings - total_deductions``."""

    model_config = ConfigDict(extra="forbid")
    money_fields: ClassVar[Tuple[str, ...]] = ("total_earnings", "total_deductions", "net")

    lines: List[SettlementLine]
    total_earnings: float
    total_deductions: float
    net: float

    @staticmethod
    def totals(lines: List[SettlementLine]) -> Dict[str, float]:
        """Compute the totals fields for a list of lines."""
        total_earnings = sum(line.earning for line in lines)
        total_deductions = sum(line.deduction for line in lines)
        return {
            "total_earnings": total_earnings,
            "total_deductions": total_deductions,
            "net": total_earnings - total_deductions,
        }

    def line(self, description: str) -> Optional[SettlementLine]:
        """First line with the given description, or None."""
        for line in self.lines:
            if line.description == description:
                return line
        return None

    def rounded(self) -> dict:
        data = super().rounded()
        for line in data["lines"]:
            line["earning"] = round_money(line["earning"])
            line["deduction"] = round_money(line["deduction"])
        return data


TerminationReason = Literal["without-cause", "resignation", "with-cause"]
NoticeModality = Literal["indemnified", "worked"]


class TerminationResult(LineItemResult):
    money_fields: ClassVar[Tuple[str, ...]] = LineItemResult.money_fields + (
        "fund_deposit", "fund_penalty",
    )

    termination_date: date
    reason: TerminationReason
    notice: NoticeModality
    leave_months: int = Field(..., ge=0, le=12)
    thirteenth_months: int = Field(..., ge=0, le=12)
    fund_deposit: float = Field(..., ge=0, description="Employer deposit on fund-eligible entitlements")
    fund_penalty: float = Field(..., ge=0)


ThirteenthInstallment = Literal["first", "second", "single"]


class ThirteenthResult(LineItemResult):
    year: int
    installment: ThirteenthInstallment
    months: int = Field(..., ge=0, le=12)


class VacationResult(LineItemResult):
    vacation_days: int = Field(..., gt=0)


class RevenueTaxResult(BaseModel, _Rounded):
    """Revenue tax for one category/annex."""

    model_config = ConfigDict(extra="forbid")
    money_fields: ClassVar[Tuple[str, ...]] = (
        "current_revenue", "trailing_revenue", "deduction", "tax_amount",
    )

    category: Optional[str] = None
    annex: str
    current_revenue: float = Field(..., gt=0)
    trailing_revenue: float = Field(..., ge=0)
    nominal_rate: float = Field(..., ge=0)
    deduction: float = Field(..., ge=0)
    effective_rate: float = Field(..., ge=0)
    tax_amount: float = Field(..., ge=0)
    distribution: Dict[str, float] = Field(
        default_factory=dict, description="Tax amount split per component tax"
    )

    def rounded(self) -> dict:
        data = super().rounded()
        data["distribution"] = {k: round_money(v) for k, v in self.distribution.items()}
        return data


class NoApplicableRevenue(BaseModel, _Rounded):
    """Reported instead of a tax result when the period has no revenue."""

    model_config = ConfigDict(extra="forbid")
    money_fields: ClassVar[Tuple[str, ...]] = ("trailing_revenue",)

    category: Optional[str] = None
    annex: str
    trailing_revenue: float = Field(..., ge=0)
    message: str = "No applicable revenue in the period"


class ReconciliationResult(BaseModel):
    """Comparison of a computed total against a caller-declared total."""

    model_config = ConfigDict(extra="forbid")

    status: Literal["match", "gap", "not_declared"]
    computed: float
    declared: Optional[float] = None
    variance: float = Field(default=0, description="declared - computed")
