"""Conversion of N26 transactions into YNAB transactions."""

from collections.abc import Callable, Iterable
from decimal import ROUND_HALF_UP, Decimal

from ynab_sync.categories import CategoryMapper
from ynab_sync.models import BankTransaction, ClearedStatus, LedgerTransaction

MemoExtractor = Callable[[BankTransaction], str | None]


def _present(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()


def memo_from_reference(tx: BankTransaction) -> str | None:
    """Reference text entered by the payer."""
    return _present(tx.reference_text)


def memo_from_merchant_and_city(tx: BankTransaction) -> str | None:
    """Merchant name followed by merchant city, when both are known."""
    name = _present(tx.merchant_name)
    city = _present(tx.merchant_city)
    if name and city:
        return f"{name} {city}"
    return None


def memo_from_merchant(tx: BankTransaction) -> str | None:
    """Merchant name alone."""
    return _present(tx.merchant_name)


# Tried in order, first non-empty result wins
MEMO_EXTRACTORS: list[MemoExtractor] = [
    memo_from_reference,
    memo_from_merchant_and_city,
    memo_from_merchant,
]


def build_memo(
    tx: BankTransaction,
    extractors: Iterable[MemoExtractor] = MEMO_EXTRACTORS,
) -> str | None:
    """Return the first memo produced by ``extractors``, or None."""
    for extractor in extractors:
        memo = extractor(tx)
        if memo:
            return memo
    return None


def to_milliunits(amount: Decimal) -> int:
    """Convert a currency amount to YNAB milliunits (1.00 -> 1000)."""
    return int((Decimal(amount) * 1000).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class TransactionTransformer:
    """
    Builds YNAB transactions from N26 transactions.

    Usage:
        transformer = TransactionTransformer(mapper)
        ledger_tx = transformer.transform(bank_tx, account_id)
    """

    def __init__(
        self,
        mapper: CategoryMapper,
        memo_extractors: Iterable[MemoExtractor] = MEMO_EXTRACTORS,
    ) -> None:
        self.mapper = mapper
        self.memo_extractors = list(memo_extractors)

    def transform(self, bank_tx: BankTransaction, account_id: str) -> LedgerTransaction:
        """
        Convert one N26 transaction.

        Transactions whose category cannot be resolved are left unapproved so
        they show up for review in YNAB.
        """
        category_id = self.mapper.resolve(bank_tx.category)
        return LedgerTransaction(
            account_id=account_id,
            date=bank_tx.visible_ts.date().isoformat(),
            amount=to_milliunits(bank_tx.amount),
            # TODO: payee mapping (N26 merchant -> YNAB payee)
            payee_id=None,
            payee_name=None,
            category_id=category_id,
            memo=build_memo(bank_tx, self.memo_extractors),
            cleared=ClearedStatus.CLEARED,
            approved=category_id is not None,
            flag_color=None,
            import_id=bank_tx.id,
        )

    def transform_all(
        self, transactions: Iterable[BankTransaction], account_id: str
    ) -> list[LedgerTransaction]:
        """Convert a sequence of N26 transactions."""
        return [self.transform(tx, account_id) for tx in transactions]
