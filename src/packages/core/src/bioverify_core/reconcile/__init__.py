"""Reconciliation of provider results with local records."""
from bioverify_core.reconcile.engine import (
    ReconciliationResult,
    Reconciler,
    apply_row,
    reconcile,
)

__all__ = ["ReconciliationResult", "Reconciler", "apply_row", "reconcile"]
