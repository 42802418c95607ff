"""ynab-sync - Sync N26 transactions into YNAB."""

from ynab_sync.n26 import N26Client
from ynab_sync.reconciler import reconcile
from ynab_sync.sync import run_sync
from ynab_sync.ynab import YNABClient

__version__ = "0.1.0"
__all__ = ["N26Client", "YNABClient", "reconcile", "run_sync"]
