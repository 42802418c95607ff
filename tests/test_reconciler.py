"""Tests for the reconciler."""

from collections.abc import Callable

from ynab_sync.models import ClearedStatus, Create, LedgerTransaction, Skip, Update
from ynab_sync.reconciler import index_by_import_id, merge, reconcile, summarize

LedgerTxFactory = Callable[..., LedgerTransaction]


class TestReconcile:
    """Tests for reconcile function."""

    def test_unmatched_candidate_is_created(self, make_ledger_tx: LedgerTxFactory) -> None:
        """Test candidates without a ledger counterpart are created."""
        candidate = make_ledger_tx("new1")

        assert reconcile([candidate], [], force_update=False) == [Create(candidate)]

    def test_rerun_is_noop(self, make_ledger_tx: LedgerTxFactory) -> None:
        """Test reconciling a synced set against itself only skips."""
        synced = [
            make_ledger_tx(f"n26-{i}", id=f"ynab-{i}", amount=-1000 * i) for i in range(5)
        ]

        operations = reconcile(synced, synced, force_update=False)

        assert len(operations) == 5
        assert all(isinstance(op, Skip) for op in operations)

    def test_match_without_force_is_skipped(self, make_ledger_tx: LedgerTxFactory) -> None:
        """Test matched transactions are left alone by default."""
        existing = make_ledger_tx("abc", id="ynab-1", category_id="C1")
        candidate = make_ledger_tx("abc", category_id="C2")

        assert reconcile([candidate], [existing], force_update=False) == [Skip(candidate)]

    def test_force_update_overwrites(self, make_ledger_tx: LedgerTxFactory) -> None:
        """Test force_update writes the candidate's fields over the existing entry."""
        existing = make_ledger_tx("abc", id="ynab-1", category_id="C1", memo="old")
        candidate = make_ledger_tx(
            "abc",
            category_id="C2",
            memo="new",
            approved=False,
            cleared=ClearedStatus.CLEARED,
        )

        operations = reconcile([candidate], [existing], force_update=True)

        assert len(operations) == 1
        op = operations[0]
        assert isinstance(op, Update)
        assert op.existing_id == "ynab-1"
        assert op.transaction.category_id == "C2"
        assert op.transaction.memo == "new"
        assert op.transaction.approved is False
        assert op.transaction.id == "ynab-1"

    def test_force_update_keeps_identity_fields(self, make_ledger_tx: LedgerTxFactory) -> None:
        """Test fields outside the synced set keep their ledger values."""
        existing = make_ledger_tx(
            "abc", id="ynab-1", payee_name="Manual payee", date="2024-03-04", amount=-5000
        )
        candidate = make_ledger_tx("abc", date="2024-03-05", amount=-12340)

        op = reconcile([candidate], [existing], force_update=True)[0]

        assert isinstance(op, Update)
        assert op.transaction.payee_name == "Manual payee"
        assert op.transaction.date == "2024-03-04"
        assert op.transaction.amount == -5000

    def test_existing_without_import_id_never_matches(
        self, make_ledger_tx: LedgerTxFactory
    ) -> None:
        """Test manually entered transactions are not matched."""
        manual = make_ledger_tx(None, id="ynab-manual")
        candidate = make_ledger_tx("n26-1")

        assert reconcile([candidate], [manual], force_update=True) == [Create(candidate)]

    def test_import_id_match_is_exact(self, make_ledger_tx: LedgerTxFactory) -> None:
        """Test import ids are compared byte for byte."""
        existing = make_ledger_tx("ABC", id="ynab-1")
        candidate = make_ledger_tx("abc")

        assert reconcile([candidate], [existing]) == [Create(candidate)]

    def test_mixed_batch_keeps_candidate_order(self, make_ledger_tx: LedgerTxFactory) -> None:
        """Test a batch with creates and skips."""
        existing = [make_ledger_tx("b", id="ynab-b")]
        candidates = [make_ledger_tx("a"), make_ledger_tx("b"), make_ledger_tx("c")]

        operations = reconcile(candidates, existing)

        assert [type(op) for op in operations] == [Create, Skip, Create]

    def test_duplicate_candidates_collapse(self, make_ledger_tx: LedgerTxFactory) -> None:
        """Test a repeated import id yields a single operation."""
        first = make_ledger_tx("dup", memo="first")
        second = make_ledger_tx("dup", memo="second")

        assert reconcile([first, second], []) == [Create(first)]

    def test_unrelated_existing_are_ignored(self, make_ledger_tx: LedgerTxFactory) -> None:
        """Test existing transactions without candidates are never touched."""
        existing = [make_ledger_tx("old", id="ynab-old")]

        assert reconcile([], existing, force_update=True) == []


class TestHelpers:
    """Tests for reconciler helper functions."""

    def test_index_skips_missing_import_ids(self, make_ledger_tx: LedgerTxFactory) -> None:
        """Test only transactions with import ids are indexed."""
        index = index_by_import_id([make_ledger_tx(None), make_ledger_tx("x", id="1")])

        assert list(index) == ["x"]

    def test_merge_copies_synced_fields(self, make_ledger_tx: LedgerTxFactory) -> None:
        """Test merge copies category, memo, approval and cleared status."""
        existing = make_ledger_tx(
            "x", id="1", approved=True, cleared=ClearedStatus.UNCLEARED
        )
        candidate = make_ledger_tx("x", category_id=None, memo="m", approved=False)

        merged = merge(existing, candidate)

        assert merged.category_id is None
        assert merged.memo == "m"
        assert merged.approved is False
        assert merged.cleared == ClearedStatus.CLEARED
        assert merged.id == "1"

    def test_summarize(self, make_ledger_tx: LedgerTxFactory) -> None:
        """Test counting operations by kind."""
        tx = make_ledger_tx()
        operations = [Create(tx), Create(tx), Skip(tx), Update("1", tx)]

        assert summarize(operations) == {"create": 2, "update": 1, "skip": 1}

    def test_summarize_empty(self) -> None:
        """Test all kinds are reported even when absent."""
        assert summarize([]) == {"create": 0, "update": 0, "skip": 0}
