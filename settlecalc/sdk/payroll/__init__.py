"""payroll - Period ledger and gross-to-net settlement.

Scope:
- Rubrica ledger with add/update/remove and protected events (ledger.py)
- Automatic event rules keyed to the ledger state (auto_events.py)
- The recompute pass producing a SettlementResult (calculator.py)

Usage:
    from settlecalc.sdk.payroll import RubricaLedger
    from settlecalc.sdk.taxes import load_tax_rules

    ledger = RubricaLedger(employee, load_tax_rules(2024))
    result = ledger.add_event(overtime_rubrica, reference=10)
"""

from .calculator import recompute, strip_system_events
from .auto_events import calc_automatic_event, AUTO_RULES
from .ledger import RubricaLedger

__all__ = [
    "recompute",
    "strip_system_events",
    "calc_automatic_event",
    "AUTO_RULES",
    "RubricaLedger",
]
