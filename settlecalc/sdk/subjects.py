"""Compensation subjects.

The calculators only depend on the CompensationSubject interface. Two
variants implement it: Employee (salaried, fund-eligible, bracket-based
contribution) and Partner (pro-labore, flat contribution rate, no fund).
"""

from datetime import date
from typing import ClassVar, List, Literal, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from .schemas import BASE_SALARY_RUBRICA, PRO_LABORE_RUBRICA, Dependent, Rubrica

SubjectKind = Literal["employee", "partner"]


@runtime_checkable
class CompensationSubject(Protocol):
    kind: SubjectKind

    def base_compensation(self) -> float: ...

    def dependents(self) -> List[Dependent]: ...

    def admission_date(self) -> Optional[date]: ...

    def base_rubrica(self) -> Rubrica: ...


class Employee(BaseModel):
    """Salaried employee."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)
    kind: ClassVar[SubjectKind] = "employee"

    name: str = ""
    salary: float = Field(..., ge=0, description="Monthly base salary")
    admitted_on: date
    dependent_list: List[Dependent] = Field(default_factory=list, alias="dependents")

    def base_compensation(self) -> float:
        return self.salary

    def dependents(self) -> List[Dependent]:
        return list(self.dependent_list)

    def admission_date(self) -> Optional[date]:
        return self.admitted_on

    def base_rubrica(self) -> Rubrica:
        return BASE_SALARY_RUBRICA


class Partner(BaseModel):
    """Company partner paid through pro-labore.

    Partners have no dependents for withholding purposes and are not
    covered by the benefit fund.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)
    kind: ClassVar[SubjectKind] = "partner"

    name: str = ""
    pro_labore: float = Field(..., ge=0, description="Monthly pro-labore")
    joined_on: Optional[date] = None
    ownership_share: Optional[float] = Field(default=None, ge=0, le=100)

    def base_compensation(self) -> float:
        return self.pro_labore

    def dependents(self) -> List[Dependent]:
        return []

    def admission_date(self) -> Optional[date]:
        return self.joined_on

    def base_rubrica(self) -> Rubrica:
        return PRO_LABORE_RUBRICA


def count_withholding_dependents(subject: CompensationSubject) -> int:
    return sum(1 for d in subject.dependents() if d.withholding_eligible)


def count_family_allowance_dependents(subject: CompensationSubject) -> int:
    return sum(1 for d in subject.dependents() if d.family_allowance_eligible)


def subject_from_dict(data: dict) -> CompensationSubject:
    """Build an Employee or Partner from a plain dict (ledger input files).

    A ``kind`` key selects the variant; without it, a ``pro_labore`` key
    means Partner.
    """
    data = dict(data)
    kind = data.pop("kind", None) or ("partner" if "pro_labore" in data else "employee")
    if kind == "partner":
        return Partner.model_validate(data)
    if kind == "employee":
        return Employee.model_validate(data)
    raise ValueError(f"Unknown subject kind: {kind!r}")
