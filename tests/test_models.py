"""Tests for data models."""

import dataclasses
from collections.abc import Callable
from decimal import Decimal

import pytest

from ynab_sync.errors import ApplyError
from ynab_sync.models import ApplyReport, BankTransaction, LedgerTransaction


class TestBankTransaction:
    """Tests for BankTransaction model."""

    def test_is_immutable(self, make_bank_tx: Callable[..., BankTransaction]) -> None:
        """Test bank transactions cannot be modified."""
        tx = make_bank_tx()
        with pytest.raises(dataclasses.FrozenInstanceError):
            tx.amount = Decimal("1")  # type: ignore[misc]

    def test_raw_data_ignored_in_equality(
        self, make_bank_tx: Callable[..., BankTransaction]
    ) -> None:
        """Test raw API data does not affect comparison."""
        assert make_bank_tx(raw_data={"a": 1}) == make_bank_tx(raw_data={"b": 2})


class TestLedgerTransaction:
    """Tests for LedgerTransaction model."""

    def test_is_immutable(self, make_ledger_tx: Callable[..., LedgerTransaction]) -> None:
        """Test ledger transactions cannot be modified."""
        tx = make_ledger_tx()
        with pytest.raises(dataclasses.FrozenInstanceError):
            tx.memo = "changed"  # type: ignore[misc]


class TestApplyReport:
    """Tests for ApplyReport dataclass."""

    def test_applied_property(self) -> None:
        """Test applied counts creates and updates."""
        report = ApplyReport(created=10, updated=2, skipped=5)
        assert report.applied == 12
        assert report.ok is True

    def test_with_failures(self) -> None:
        """Test report with failures."""
        report = ApplyReport(created=1, failed=[ApplyError("n26-1", "boom")])
        assert report.ok is False
        assert str(report.failed[0]) == "n26-1: boom"

    def test_defaults_are_independent(self) -> None:
        """Test each report gets its own failure list."""
        first = ApplyReport()
        first.failed.append(ApplyError(None, "x"))
        assert ApplyReport().failed == []
