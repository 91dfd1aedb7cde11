"""Reconcile a computed total against a caller-declared total.

The total summed from line items is authoritative. A declared total (typed
in by hand or read from an imported document) is only validated against
it: the result says whether the two match, and by how much they differ.
A declared total of zero or None counts as not declared.
"""

import logging
from typing import Optional

from .schemas import ReconciliationResult

logger = logging.getLogger(__name__)


def reconcile_declared_total(
    computed: float,
    declared: Optional[float],
    tolerance: float = 0.01,
) -> ReconciliationResult:
    """Compare a declared total with the computed one.

    Args:
        computed: Total summed from the line items
        declared: Caller-supplied total, if any
        tolerance: Largest absolute difference still treated as a match

    Returns:
        ReconciliationResult with status 'match', 'gap' or 'not_declared'
    """
    if not declared:
        return ReconciliationResult(status="not_declared", computed=computed)

    variance = declared - computed
    status = "match" if abs(variance) <= tolerance else "gap"
    if status == "gap":
        logger.warning(
            "Declared total %.2f differs from computed total %.2f by %.2f; using computed",
            declared, computed, variance,
        )
    return ReconciliationResult(status=status, computed=computed, declared=declared, variance=variance)
