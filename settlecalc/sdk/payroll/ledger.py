"""Rubrica ledger for one subject and period.

The ledger owns the user-entered events. Every mutation replaces the
event list and reruns the full recompute pass; the system-derived events
only ever exist on the returned SettlementResult.
"""

import logging
from typing import Iterable, List, Optional

from ..errors import SettlementInputError
from ..schemas import (
    CONTRIBUTION_RUBRICA,
    EVENT_FIELDS,
    WITHHOLDING_RUBRICA,
    PayrollEvent,
    Rubrica,
    SettlementResult,
)
from ..subjects import CompensationSubject
from ..taxes.schemas import TaxRules
from .auto_events import calc_automatic_event
from .calculator import recompute, strip_system_events

logger = logging.getLogger(__name__)

SYSTEM_EVENT_IDS = frozenset({CONTRIBUTION_RUBRICA.id, WITHHOLDING_RUBRICA.id})


class RubricaLedger:
    """Ordered pay-code events for one subject and period.

    Args:
        subject: Employee or partner
        rules: Tax rules for the period's year
        events: Previously stored events. Without them, the ledger is
            seeded with the subject's base compensation event.
    """

    def __init__(
        self,
        subject: CompensationSubject,
        rules: TaxRules,
        events: Optional[Iterable[PayrollEvent]] = None,
    ):
        self.subject = subject
        self.rules = rules
        if events is None:
            base_rubrica = subject.base_rubrica()
            events = [
                PayrollEvent.for_rubrica(
                    base_rubrica,
                    reference=30,
                    earning_amount=subject.base_compensation(),
                )
            ]
        self._events: List[PayrollEvent] = []
        for event in strip_system_events(events):
            self._check_reserved(event.id)
            self._check_unique(event.id)
            self._events.append(event)
        self._result = recompute(self._events, self.subject, self.rules)

    # === Read access ===

    @property
    def events(self) -> List[PayrollEvent]:
        """User-entered events in display order (no system-derived events)."""
        return list(self._events)

    @property
    def result(self) -> SettlementResult:
        """Settlement from the last recompute."""
        return self._result

    def get_event(self, event_id: str) -> PayrollEvent:
        event = self._find(event_id)
        if event is None:
            raise SettlementInputError(f"No event {event_id!r} in ledger")
        return event

    def snapshot(self) -> dict:
        """Plain-data snapshot for persistence by the caller."""
        return {
            "events": [e.model_dump(mode="json") for e in self._events],
            "result": self._result.rounded(),
        }

    # === Mutations ===

    def add_event(self, rubrica: Rubrica, reference: Optional[float] = None) -> SettlementResult:
        """Add an event for a rubrica.

        Rubricas with an automatic rule are pre-populated from the ledger
        state; others start at zero.

        Raises:
            SettlementInputError: If the rubrica is system-derived, uses a
                system event id, or already has an event in this ledger
        """
        if rubrica.is_system:
            raise SettlementInputError(f"Rubrica {rubrica.id!r} is system-derived and can't be added")
        self._check_reserved(rubrica.id)
        self._check_unique(rubrica.id)
        if reference is not None and reference < 0:
            raise SettlementInputError(f"reference must not be negative, got {reference}")

        fields = {"reference": reference or 0.0}
        automatic = calc_automatic_event(rubrica, self.subject, self._events, self.rules, reference)
        if automatic is not None:
            fields.update(automatic)

        event = PayrollEvent.for_rubrica(rubrica, **fields)
        logger.debug("Adding event %s (%s)", event.id, rubrica.description)
        self._events = self._events + [event]
        return self.recompute()

    def update_event(self, event_id: str, field: str, value: float) -> SettlementResult:
        """Set one numeric field of an event and recompute.

        Updating the reference of an automatic rubrica re-derives its
        amounts. Protected events are left unchanged (no-op).

        Raises:
            SettlementInputError: Unknown event or field, or negative value
        """
        if field not in EVENT_FIELDS:
            raise SettlementInputError(f"Unknown event field {field!r} (expected one of {EVENT_FIELDS})")
        if not isinstance(value, (int, float)) or value < 0:
            raise SettlementInputError(f"{field} must be a non-negative number, got {value!r}")

        event = self._find(event_id)
        if event is None:
            raise SettlementInputError(f"No event {event_id!r} in ledger")
        if event.rubrica.protected:
            logger.warning("Ignoring update of protected event %s", event_id)
            return self._result

        updated = event.model_copy(update={field: float(value)})
        if field == "reference":
            others = [e for e in self._events if e.id != event_id]
            automatic = calc_automatic_event(event.rubrica, self.subject, others, self.rules, value)
            if automatic is not None:
                updated = updated.model_copy(update=automatic)

        self._events = [updated if e.id == event_id else e for e in self._events]
        return self.recompute()

    def remove_event(self, event_id: str) -> bool:
        """Remove an event.

        Returns:
            True if removed. False when the event is protected (base
            compensation or system-derived); the ledger is left unchanged.

        Raises:
            SettlementInputError: If no such event exists
        """
        if event_id in (e.id for e in self._result.events if e.rubrica.is_system):
            logger.warning("Ignoring removal of system-derived event %s", event_id)
            return False

        event = self._find(event_id)
        if event is None:
            raise SettlementInputError(f"No event {event_id!r} in ledger")
        if event.rubrica.protected:
            logger.warning("Ignoring removal of protected event %s", event_id)
            return False

        self._events = [e for e in self._events if e.id != event_id]
        self.recompute()
        return True

    def refresh_automatic_events(self) -> SettlementResult:
        """Re-derive every automatic event from the current ledger state."""
        refreshed = []
        for event in self._events:
            others = [e for e in self._events if e.id != event.id]
            automatic = calc_automatic_event(
                event.rubrica, self.subject, others, self.rules, event.reference
            )
            refreshed.append(event.model_copy(update=automatic) if automatic else event)
        self._events = refreshed
        return self.recompute()

    def recompute(self) -> SettlementResult:
        """Rerun the full settlement pass over the current events."""
        self._result = recompute(self._events, self.subject, self.rules)
        return self._result

    # === Helpers ===

    def _find(self, event_id: str) -> Optional[PayrollEvent]:
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def _check_reserved(self, event_id: str) -> None:
        if event_id in SYSTEM_EVENT_IDS:
            raise SettlementInputError(f"Rubrica id {event_id!r} is reserved for a system-derived event")

    def _check_unique(self, event_id: str) -> None:
        if self._find(event_id) is not None:
            raise SettlementInputError(f"Ledger already has an event for rubrica {event_id!r}")
