"""Settle Calc SDK - settlement calculations for payroll, termination and revenue tax."""

from .config import (
    get_config_dir,
    get_settings_path,
    get_rules_override_dir,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
)

from .errors import SettlementInputError, TaxRulesNotFoundError

from .schemas import (
    Rubrica,
    PayrollEvent,
    Dependent,
    SettlementResult,
    SettlementLine,
    TerminationResult,
    ThirteenthResult,
    VacationResult,
    RevenueTaxResult,
    NoApplicableRevenue,
    ReconciliationResult,
    BASE_SALARY_RUBRICA,
    PRO_LABORE_RUBRICA,
    CONTRIBUTION_RUBRICA,
    WITHHOLDING_RUBRICA,
)

from .subjects import CompensationSubject, Employee, Partner, subject_from_dict

from .taxes import (
    TaxRules,
    load_tax_rules,
    calc_contribution,
    calc_income_withholding,
    calc_fund_deposit,
    calc_fund_penalty,
    calc_revenue_tax,
    calc_revenue_tax_by_category,
)

from .payroll import RubricaLedger, recompute

from .termination import calc_termination
from .thirteenth import calc_thirteenth
from .vacation import calc_vacation
from .reconcile import reconcile_declared_total

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "get_rules_override_dir",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    # Errors
    "SettlementInputError",
    "TaxRulesNotFoundError",
    # Schemas
    "Rubrica",
    "PayrollEvent",
    "Dependent",
    "SettlementResult",
    "SettlementLine",
    "TerminationResult",
    "ThirteenthResult",
    "VacationResult",
    "RevenueTaxResult",
    "NoApplicableRevenue",
    "ReconciliationResult",
    "BASE_SALARY_RUBRICA",
    "PRO_LABORE_RUBRICA",
    "CONTRIBUTION_RUBRICA",
    "WITHHOLDING_RUBRICA",
    # Subjects
    "CompensationSubject",
    "Employee",
    "Partner",
    "subject_from_dict",
    # Taxes
    "TaxRules",
    "load_tax_rules",
    "calc_contribution",
    "calc_income_withholding",
    "calc_fund_deposit",
    "calc_fund_penalty",
    "calc_revenue_tax",
    "calc_revenue_tax_by_category",
    # Payroll
    "RubricaLedger",
    "recompute",
    # Other settlements
    "calc_termination",
    "calc_thirteenth",
    "calc_vacation",
    "reconcile_declared_total",
]
