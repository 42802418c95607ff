"""Pytest configuration and fixtures."""

import json
import logging
from collections.abc import Callable, Iterator
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest

from ynab_sync import logging_setup
from ynab_sync.categories import CategoryMapper
from ynab_sync.models import BankTransaction, ClearedStatus, LedgerTransaction

# N26 category code -> N26 category name
N26_CATEGORIES = {
    "micro-v2-food-groceries": "Food & Groceries",
    "micro-v2-transport-car": "Transport & Car",
    "micro-v2-income": "Income",
}

# N26 category name -> YNAB category name
CATEGORY_MAPPING = {
    "Food & Groceries": "Groceries",
    "Transport & Car": "Transportation",
    "Income": "Inflow: Ready to Assign",
}

# YNAB category name -> YNAB category id
YNAB_CATEGORIES = {
    "Groceries": "cat-groceries",
    "Inflow: Ready to Assign": "cat-inflow",
}


@pytest.fixture(autouse=True)
def reset_logging(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Undo handlers and levels set by configure_logging during a test."""
    logger = logging.getLogger("ynab_sync")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    monkeypatch.setattr(logging_setup, "_handler", None)
    monkeypatch.delenv(logging_setup.LOG_LEVEL_ENV, raising=False)
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def today() -> date:
    """Return the fixed end date of test sync windows."""
    return date(2024, 3, 10)


@pytest.fixture
def n26_categories() -> dict[str, str]:
    """Return N26 category code to name index."""
    return dict(N26_CATEGORIES)


@pytest.fixture
def category_mapping() -> dict[str, str]:
    """Return N26 name to YNAB name mapping."""
    return dict(CATEGORY_MAPPING)


@pytest.fixture
def ynab_categories() -> dict[str, str]:
    """Return YNAB category name to id index."""
    return dict(YNAB_CATEGORIES)


@pytest.fixture
def mapper(
    n26_categories: dict[str, str],
    category_mapping: dict[str, str],
    ynab_categories: dict[str, str],
) -> CategoryMapper:
    """Return a mapper over the test category indices."""
    return CategoryMapper(n26_categories, category_mapping, ynab_categories)


@pytest.fixture
def mapping_file(tmp_path: Path) -> Path:
    """Return path to a valid category mapping file."""
    path = tmp_path / "categories.json"
    path.write_text(json.dumps(CATEGORY_MAPPING))
    return path


@pytest.fixture
def make_bank_tx() -> Callable[..., BankTransaction]:
    """Return a factory for N26 transactions with sensible defaults."""

    def factory(tx_id: str = "n26-1", **overrides: Any) -> BankTransaction:
        values: dict[str, Any] = {
            "id": tx_id,
            "visible_ts": datetime(2024, 3, 5, 14, 30, tzinfo=timezone.utc),
            "amount": Decimal("-12.34"),
            "category": "micro-v2-food-groceries",
        }
        values.update(overrides)
        return BankTransaction(**values)

    return factory


@pytest.fixture
def make_ledger_tx() -> Callable[..., LedgerTransaction]:
    """Return a factory for YNAB transactions with sensible defaults."""

    def factory(import_id: str | None = "n26-1", **overrides: Any) -> LedgerTransaction:
        values: dict[str, Any] = {
            "account_id": "acc-1",
            "date": "2024-03-05",
            "amount": -12340,
            "cleared": ClearedStatus.CLEARED,
            "approved": True,
            "category_id": "cat-groceries",
            "import_id": import_id,
        }
        values.update(overrides)
        return LedgerTransaction(**values)

    return factory
