"""YNAB API client for reading and writing transactions."""

from datetime import date
from typing import Any

import requests

from ynab_sync.errors import ApplyAborted, ApplyError, AuthenticationError, FetchError
from ynab_sync.logging_setup import get_logger
from ynab_sync.models import ApplyReport, Create, LedgerTransaction, Operation, Skip, Update
from ynab_sync.window import window_start

logger = get_logger(__name__)


def _error_detail(response: requests.Response | None) -> str:
    """Extract YNAB's error detail from a failed response."""
    if response is None:
        return ""
    try:
        body = response.json()
    except ValueError:
        return response.text
    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        return ""
    return error.get("detail") or error.get("name") or ""


class YNABClient:
    """Client for interacting with the YNAB API."""

    BASE_URL = "https://api.ynab.com/v1"

    def __init__(self, token: str) -> None:
        """Initialize client with a personal access token."""
        self.token = token
        self._session = requests.Session()
        self._session.headers.update({
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        })

    def _send(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an API request and return its ``data`` member.

        Raises:
            ValueError: If the body is not a JSON object with an object ``data``
        """
        url = f"{self.BASE_URL}/{endpoint}"
        response = self._session.request(method, url, params=params, json=json)
        response.raise_for_status()
        body = response.json()
        data = body.get("data", {}) if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise ValueError(f"unexpected YNAB response body {body!r:.80}")
        return data

    def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make a read request, translating failures into FetchError."""
        try:
            return self._send(method, endpoint, params=params)
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 401:
                raise AuthenticationError("YNAB rejected the access token") from e
            detail = _error_detail(e.response)
            raise FetchError(f"YNAB request {endpoint} failed: {e} {detail}".strip()) from e
        except (requests.RequestException, ValueError) as e:
            raise FetchError(f"YNAB request {endpoint} failed: {e}") from e

    def validate_budget(self, budget_id: str) -> dict[str, Any]:
        """Check that the budget exists and return it."""
        try:
            data = self._request("GET", f"budgets/{budget_id}")
        except FetchError as e:
            raise FetchError(f"YNAB budget {budget_id} is not accessible: {e}") from e
        return data.get("budget", {})  # type: ignore[no-any-return]

    def validate_account(self, budget_id: str, account_id: str) -> dict[str, Any]:
        """Check that the account exists in the budget and is open."""
        try:
            data = self._request("GET", f"budgets/{budget_id}/accounts/{account_id}")
        except FetchError as e:
            raise FetchError(f"YNAB account {account_id} is not accessible: {e}") from e

        account = data.get("account")
        if not isinstance(account, dict):
            raise FetchError(f"YNAB account {account_id} response has no account")
        if account.get("deleted") or account.get("closed"):
            raise FetchError(f"YNAB account {account_id} is closed or deleted")
        return account

    def get_categories(self, budget_id: str) -> dict[str, str]:
        """
        Get budget categories as a mapping of category name to id.

        Deleted categories are ignored. When a name appears in more than one
        category group the first one wins.
        """
        data = self._request("GET", f"budgets/{budget_id}/categories")
        categories: dict[str, str] = {}
        try:
            for group in data.get("category_groups", []):
                for category in group.get("categories", []):
                    if category.get("deleted"):
                        continue
                    categories.setdefault(category["name"], category["id"])
        except (KeyError, TypeError, AttributeError) as e:
            raise FetchError(f"Malformed YNAB categories response: {e!r}") from e
        return categories

    def get_transactions(
        self,
        budget_id: str,
        account_id: str,
        days: int,
        today: date | None = None,
    ) -> list[LedgerTransaction]:
        """Get non-deleted account transactions of the last ``days`` days."""
        since = window_start(days, today)
        data = self._request(
            "GET",
            f"budgets/{budget_id}/accounts/{account_id}/transactions",
            params={"since_date": since.isoformat()},
        )
        try:
            transactions = [
                LedgerTransaction.from_payload(item)
                for item in data.get("transactions", [])
                if not item.get("deleted")
            ]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise FetchError(f"Malformed YNAB transactions response: {e!r}") from e
        logger.debug("Fetched %d YNAB transactions since %s", len(transactions), since)
        return transactions

    def apply_operation(self, budget_id: str, operation: Operation) -> None:
        """Write a single operation to YNAB."""
        if isinstance(operation, Create):
            self._send(
                "POST",
                f"budgets/{budget_id}/transactions",
                json={"transaction": operation.transaction.to_payload()},
            )
        elif isinstance(operation, Update):
            self._send(
                "PUT",
                f"budgets/{budget_id}/transactions/{operation.existing_id}",
                json={"transaction": operation.transaction.to_payload()},
            )

    def apply_operations(self, budget_id: str, operations: list[Operation]) -> ApplyReport:
        """
        Apply operations one at a time.

        A failing operation does not stop the remaining ones; each failure is
        recorded in the report with the transaction's import id.

        Args:
            budget_id: YNAB budget id
            operations: Operations from the reconciler

        Returns:
            ApplyReport with counts and collected failures

        Raises:
            ApplyAborted: If YNAB rejects the token; carries the partial report
        """
        report = ApplyReport()

        for operation in operations:
            if isinstance(operation, Skip):
                report.skipped += 1
                continue

            import_id = operation.transaction.import_id
            try:
                self.apply_operation(budget_id, operation)
            except requests.HTTPError as e:
                if e.response is not None and e.response.status_code == 401:
                    report.failed.append(ApplyError(import_id, "YNAB rejected the access token"))
                    raise ApplyAborted(
                        f"YNAB rejected the access token after {report.applied} "
                        f"of {len(operations)} transactions were written",
                        report,
                    ) from e
                detail = _error_detail(e.response)
                report.failed.append(ApplyError(import_id, f"{e} {detail}".strip()))
                logger.warning("Failed to write transaction %s: %s", import_id, e)
                continue
            except (requests.RequestException, ValueError) as e:
                report.failed.append(ApplyError(import_id, str(e)))
                logger.warning("Failed to write transaction %s: %s", import_id, e)
                continue

            if isinstance(operation, Create):
                report.created += 1
            else:
                report.updated += 1

        return report
