"""Pydantic schemas for tax rules validation.

These schemas validate the tax_rules/*.yaml files and provide typed access
to bracket tables, contribution ceiling, fund rates and the other constants
the calculators consume.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Bracket(BaseModel):
    """Single progressive bracket entry.

    Used both in marginal mode (``base * rate - deduction``) and in the
    effective-rate mode of the revenue tax.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    up_to: Optional[float] = Field(default=None, gt=0, description="Upper limit (None for the open top bracket)")
    rate: float = Field(..., ge=0, le=1, description="Rate as decimal")
    deduction: float = Field(default=0, ge=0, description="Flat deduction subtracted after applying the rate")

    @property
    def limit(self) -> float:
        """Upper limit with the open top bracket mapped to infinity."""
        return self.up_to if self.up_to is not None else float("inf")


def _check_ascending(brackets: List[Bracket], name: str) -> None:
    if not brackets:
        raise ValueError(f"{name}: bracket table is empty")
    limits = [b.limit for b in brackets]
    if any(lo >= hi for lo, hi in zip(limits, limits[1:])):
        raise ValueError(f"{name}: brackets must ascend strictly by up_to, got {limits}")


class ContributionRules(BaseModel):
    """Social contribution rules (employee portion)."""
    model_config = ConfigDict(extra="forbid")

    ceiling: float = Field(..., gt=0, description="Contribution base ceiling (max taxable)")
    partner_rate: float = Field(..., ge=0, le=1, description="Flat rate applied to partner pro-labore")
    brackets: List[Bracket]

    @model_validator(mode="after")
    def brackets_ascending(self) -> "ContributionRules":
        _check_ascending(self.brackets, "contribution")
        return self


class WithholdingRules(BaseModel):
    """Income tax withholding rules."""
    model_config = ConfigDict(extra="forbid")

    dependent_allowance: float = Field(..., ge=0, description="Deduction per eligible dependent")
    brackets: List[Bracket]

    @model_validator(mode="after")
    def brackets_ascending(self) -> "WithholdingRules":
        _check_ascending(self.brackets, "withholding")
        return self


class FundRules(BaseModel):
    """Benefit fund deposit and termination penalty."""
    model_config = ConfigDict(extra="forbid")

    rate: float = Field(..., ge=0, le=1, description="Monthly deposit rate over the fund base")
    penalty_rate: float = Field(..., ge=0, le=1, description="Penalty over the fund balance on dismissal without cause")


class FamilyAllowanceRules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    income_limit: float = Field(..., ge=0)
    value_per_dependent: float = Field(..., ge=0)


class AutomaticEventRules(BaseModel):
    """Parameters for rubricas whose amount is derived from the ledger."""
    model_config = ConfigDict(extra="forbid")

    hours_per_month: float = Field(default=220, gt=0)
    overtime_multiplier: float = Field(default=1.5, gt=0)
    night_shift_rate: float = Field(default=0.20, ge=0)
    hazard_rate: float = Field(default=0.30, ge=0)
    transport_voucher_rate: float = Field(default=0.06, ge=0, le=1)


class TerminationRules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    min_days_per_month: int = Field(
        default=15, ge=1, le=31,
        description="Days a trailing partial month needs to count as a full month",
    )
    notice_days: int = Field(default=30, ge=0)
    project_indemnified_notice: bool = Field(
        default=False,
        description="Extend the 13th/leave counting period by the indemnified notice",
    )


class VacationRules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    days_per_month: int = Field(default=30, gt=0)
    cash_conversion_days: int = Field(default=10, ge=0)


class DistributionRow(BaseModel):
    """Per-tax shares (percent) of the revenue tax for a trailing-revenue range."""
    model_config = ConfigDict(extra="forbid")

    up_to: Optional[float] = None
    shares: Dict[str, float]

    @property
    def limit(self) -> float:
        return self.up_to if self.up_to is not None else float("inf")


class AnnexRules(BaseModel):
    """Bracket table and tax distribution for one revenue annex."""
    model_config = ConfigDict(extra="forbid")

    description: str = ""
    brackets: List[Bracket]
    distribution: List[DistributionRow] = Field(default_factory=list)

    @model_validator(mode="after")
    def brackets_ascending(self) -> "AnnexRules":
        _check_ascending(self.brackets, "annex")
        return self


class RevenueTaxRules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    categories: Dict[str, str] = Field(..., description="Revenue category -> annex key")
    annexes: Dict[str, AnnexRules]

    @model_validator(mode="after")
    def categories_reference_annexes(self) -> "RevenueTaxRules":
        unknown = sorted(set(self.categories.values()) - set(self.annexes))
        if unknown:
            raise ValueError(f"revenue_tax.categories references unknown annexes: {unknown}")
        return self


class TaxRules(BaseModel):
    """Complete tax rules for a year."""
    model_config = ConfigDict(extra="ignore")  # Allow unknown fields for forward compat

    year: int
    minimum_wage: float = Field(..., gt=0)
    contribution: ContributionRules
    withholding: WithholdingRules
    fund: FundRules
    family_allowance: FamilyAllowanceRules
    automatic_events: AutomaticEventRules = Field(default_factory=AutomaticEventRules)
    termination: TerminationRules = Field(default_factory=TerminationRules)
    vacation: VacationRules = Field(default_factory=VacationRules)
    revenue_tax: RevenueTaxRules
