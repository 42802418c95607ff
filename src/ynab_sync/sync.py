"""Runs a full N26 to YNAB sync."""

from collections.abc import Callable
from datetime import date
from typing import Any, Protocol

from ynab_sync.categories import CategoryMapper, load_category_mapping
from ynab_sync.errors import SyncError
from ynab_sync.logging_setup import get_logger
from ynab_sync.models import (
    ApplyReport,
    BankTransaction,
    LedgerTransaction,
    N26Credentials,
    Operation,
    Skip,
    SyncSettings,
)
from ynab_sync.reconciler import reconcile, summarize
from ynab_sync.transformer import TransactionTransformer
from ynab_sync.window import days_to_sync, parse_sync_from, utc_today

logger = get_logger(__name__)

TOTAL_STAGES = 10

Reporter = Callable[[str], None]


class BankSource(Protocol):
    def authenticate(self, credentials: N26Credentials) -> Any: ...

    def get_categories(self, session: Any) -> dict[str, str]: ...

    def get_transactions(
        self, session: Any, days: int, limit: int, today: date | None = None
    ) -> list[BankTransaction]: ...


class LedgerSource(Protocol):
    def validate_budget(self, budget_id: str) -> Any: ...

    def validate_account(self, budget_id: str, account_id: str) -> Any: ...

    def get_categories(self, budget_id: str) -> dict[str, str]: ...

    def get_transactions(
        self, budget_id: str, account_id: str, days: int, today: date | None = None
    ) -> list[LedgerTransaction]: ...

    def apply_operations(self, budget_id: str, operations: list[Operation]) -> ApplyReport: ...


class StageFailed(SyncError):
    """Wraps an error with the pipeline stage it happened in."""

    def __init__(self, stage: int, title: str, error: SyncError) -> None:
        super().__init__(f"[{stage:>2}/{TOTAL_STAGES}] {title} failed: {error}")
        self.stage = stage
        self.title = title
        self.error = error


def _stage(report: Reporter, number: int, title: str) -> None:
    report(f"[{number:>2}/{TOTAL_STAGES}] {title}")


def describe_operation(operation: Operation) -> str:
    """One-line description of an operation for dry-run output."""
    tx = operation.transaction
    action = type(operation).__name__.lower()
    amount = tx.amount / 1000
    return f"{action:<6}  {tx.date}  {amount:>10.2f}  {(tx.memo or '')[:40]:<40}  [{tx.import_id}]"


def run_sync(
    settings: SyncSettings,
    bank: BankSource,
    ledger: LedgerSource,
    credentials: N26Credentials,
    today: date | None = None,
    report: Reporter = print,
) -> ApplyReport:
    """
    Sync N26 transactions into a YNAB account.

    The date and category mapping are validated before any request is made.
    Errors from validation, authentication or fetching abort the run;
    failures writing single transactions are collected in the returned report.

    Args:
        settings: Run options
        bank: N26 client
        ledger: YNAB client
        credentials: N26 login
        today: Last day of the sync window (defaults to the current UTC date)
        report: Receives progress lines

    Returns:
        ApplyReport describing what was written

    Raises:
        ArgumentError: If the date or the mapping file is invalid
        StageFailed: If authentication, a fetch, or the apply stage fails fatally
    """
    _stage(report, 1, "Parsing --sync-from")
    if today is None:
        today = utc_today()
    days = days_to_sync(parse_sync_from(settings.sync_from), today)

    _stage(report, 2, "Parsing --n26-category-mapping")
    category_mapping = load_category_mapping(settings.category_mapping_file)

    def run(number: int, title: str, func: Callable[[], Any]) -> Any:
        _stage(report, number, title)
        try:
            return func()
        except SyncError as e:
            raise StageFailed(number, title, e) from e

    run(3, "Validating YNAB budget", lambda: ledger.validate_budget(settings.budget_id))
    run(
        4,
        "Validating YNAB account",
        lambda: ledger.validate_account(settings.budget_id, settings.account_id),
    )
    ledger_categories = run(
        5, "Fetching YNAB categories", lambda: ledger.get_categories(settings.budget_id)
    )
    existing = run(
        6,
        f"Fetching YNAB transactions for the last {days} days",
        lambda: ledger.get_transactions(
            settings.budget_id, settings.account_id, days, today=today
        ),
    )
    session = run(7, "Fetching N26 token", lambda: bank.authenticate(credentials))
    bank_categories = run(8, "Fetching N26 categories", lambda: bank.get_categories(session))

    transformer = TransactionTransformer(
        CategoryMapper(bank_categories, category_mapping, ledger_categories)
    )
    candidates = run(
        9,
        "Fetching N26 transactions and converting them to YNAB transactions",
        lambda: transformer.transform_all(
            bank.get_transactions(session, days, settings.transaction_limit, today=today),
            settings.account_id,
        ),
    )
    unapproved = sum(1 for tx in candidates if not tx.approved)
    if unapproved:
        logger.info("%d transactions have no mapped category and need review", unapproved)

    operations = reconcile(candidates, existing, settings.force_update)
    counts = summarize(operations)

    if settings.dry_run:
        _stage(report, 10, "Dry run - operations that would be applied")
        for operation in operations:
            if not isinstance(operation, Skip):
                report(f"    {describe_operation(operation)}")
        report(
            f"    Would create {counts['create']}, update {counts['update']} and "
            f"skip {counts['skip']} transactions"
        )
        return ApplyReport(skipped=counts["skip"])

    result: ApplyReport = run(
        10,
        f"Syncing {counts['create']} new and {counts['update']} updated transactions "
        f"({counts['skip']} already synced)",
        lambda: ledger.apply_operations(settings.budget_id, operations),
    )
    logger.debug("Applied %d operations, %d failed", result.applied, len(result.failed))
    return result
