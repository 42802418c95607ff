"""Data models for bank and ledger transactions."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any

from ynab_sync.errors import ApplyError


class ClearedStatus(str, Enum):
    """YNAB cleared status."""

    CLEARED = "cleared"
    UNCLEARED = "uncleared"
    RECONCILED = "reconciled"


class FlagColor(str, Enum):
    """YNAB transaction flag colors."""

    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"


@dataclass(frozen=True)
class BankTransaction:
    """A transaction as reported by N26."""

    id: str
    visible_ts: datetime
    amount: Decimal
    category: str
    reference_text: str | None = None
    merchant_name: str | None = None
    merchant_city: str | None = None
    raw_data: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class LedgerTransaction:
    """A transaction in a YNAB account.

    ``amount`` is in YNAB milliunits (1000 = 1.00). ``id`` is only set on
    transactions fetched from YNAB; ``import_id`` links a transaction to the
    bank transaction it was created from.
    """

    account_id: str
    date: str
    amount: int
    cleared: ClearedStatus = ClearedStatus.UNCLEARED
    approved: bool = False
    payee_id: str | None = None
    payee_name: str | None = None
    category_id: str | None = None
    memo: str | None = None
    flag_color: FlagColor | None = None
    import_id: str | None = None
    id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Convert to a YNAB ``SaveTransaction`` body."""
        return {
            "account_id": self.account_id,
            "date": self.date,
            "amount": self.amount,
            "payee_id": self.payee_id,
            "payee_name": self.payee_name,
            "category_id": self.category_id,
            "memo": self.memo,
            "cleared": self.cleared.value,
            "approved": self.approved,
            "flag_color": self.flag_color.value if self.flag_color else None,
            "import_id": self.import_id,
        }

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "LedgerTransaction":
        """Build from a YNAB ``TransactionDetail`` object."""
        flag = data.get("flag_color")
        return cls(
            account_id=data["account_id"],
            date=data["date"],
            amount=int(data["amount"]),
            cleared=ClearedStatus(data.get("cleared", "uncleared")),
            approved=bool(data.get("approved", False)),
            payee_id=data.get("payee_id"),
            payee_name=data.get("payee_name"),
            category_id=data.get("category_id"),
            memo=data.get("memo"),
            flag_color=FlagColor(flag) if flag else None,
            import_id=data.get("import_id"),
            id=data.get("id"),
        )


@dataclass(frozen=True)
class Create:
    """Create ``transaction`` in the ledger."""

    transaction: LedgerTransaction


@dataclass(frozen=True)
class Update:
    """Overwrite the ledger transaction ``existing_id`` with ``transaction``."""

    existing_id: str
    transaction: LedgerTransaction


@dataclass(frozen=True)
class Skip:
    """Leave an already-synced transaction untouched."""

    transaction: LedgerTransaction


Operation = Create | Update | Skip


@dataclass
class ApplyReport:
    """Result of applying operations to YNAB."""

    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: list[ApplyError] = field(default_factory=list)

    @property
    def applied(self) -> int:
        """Operations successfully written to the ledger."""
        return self.created + self.updated

    @property
    def ok(self) -> bool:
        """Return True if no operation failed."""
        return not self.failed


@dataclass(frozen=True)
class SyncSettings:
    """Options for one sync run, resolved once at startup."""

    sync_from: str
    category_mapping_file: Path
    budget_id: str
    account_id: str
    force_update: bool = False
    dry_run: bool = False
    transaction_limit: int = 100_000_000


@dataclass(frozen=True)
class N26Credentials:
    """N26 login."""

    username: str
    password: str = field(repr=False)
