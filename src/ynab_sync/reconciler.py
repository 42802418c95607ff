"""Decides which YNAB transactions to create, update or leave alone."""

from collections import Counter
from collections.abc import Iterable
from dataclasses import replace

from ynab_sync.models import Create, LedgerTransaction, Operation, Skip, Update


def index_by_import_id(
    transactions: Iterable[LedgerTransaction],
) -> dict[str, LedgerTransaction]:
    """Index ledger transactions by import id, ignoring those without one."""
    index: dict[str, LedgerTransaction] = {}
    for tx in transactions:
        if tx.import_id and tx.import_id not in index:
            index[tx.import_id] = tx
    return index


def merge(existing: LedgerTransaction, candidate: LedgerTransaction) -> LedgerTransaction:
    """Copy the synced fields of ``candidate`` onto ``existing``."""
    return replace(
        existing,
        category_id=candidate.category_id,
        memo=candidate.memo,
        approved=candidate.approved,
        cleared=candidate.cleared,
    )


def reconcile(
    candidates: Iterable[LedgerTransaction],
    existing: Iterable[LedgerTransaction],
    force_update: bool = False,
) -> list[Operation]:
    """
    Compute the operations that bring YNAB in line with the candidates.

    A candidate matches an existing transaction when both carry the same
    import id. Unmatched candidates are created. Matched candidates are
    skipped, or, with ``force_update``, written over the existing entry.
    Candidates repeating an import id already seen are dropped.

    Args:
        candidates: Transactions converted from the bank
        existing: Transactions already in the YNAB account for the window
        force_update: Overwrite matched transactions instead of skipping them

    Returns:
        One operation per distinct candidate, in candidate order
    """
    by_import_id = index_by_import_id(existing)
    seen: set[str] = set()
    operations: list[Operation] = []

    for candidate in candidates:
        key = candidate.import_id
        if key is not None:
            if key in seen:
                continue
            seen.add(key)

        match = by_import_id.get(key) if key else None
        if match is None:
            operations.append(Create(candidate))
        elif force_update and match.id is not None:
            operations.append(Update(match.id, merge(match, candidate)))
        else:
            operations.append(Skip(candidate))

    return operations


def summarize(operations: Iterable[Operation]) -> dict[str, int]:
    """Count operations by kind (``create``, ``update``, ``skip``)."""
    counts = Counter(type(op).__name__.lower() for op in operations)
    return {kind: counts.get(kind, 0) for kind in ("create", "update", "skip")}
