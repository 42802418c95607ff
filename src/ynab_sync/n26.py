"""N26 API client for fetching categories and transactions."""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

import requests

from ynab_sync.errors import AuthenticationError, FetchError
from ynab_sync.logging_setup import get_logger
from ynab_sync.models import BankTransaction, N26Credentials
from ynab_sync.window import utc_today, window_start

logger = get_logger(__name__)

# Public client credentials of the N26 Android app ("android:secret")
_CLIENT_AUTH = ("android", "secret")


@dataclass(frozen=True)
class N26Session:
    """An authenticated N26 session."""

    access_token: str = field(repr=False)
    refresh_token: str | None = field(default=None, repr=False)
    expires_in: int | None = None


def _epoch_millis(day: date) -> int:
    return int(datetime.combine(day, time.min, tzinfo=timezone.utc).timestamp() * 1000)


def parse_transaction(data: dict[str, Any]) -> BankTransaction:
    """Convert an N26 ``smrt/transactions`` entry to a BankTransaction.

    Raises:
        FetchError: If the entry lacks a field or holds a value of the wrong type
    """
    try:
        return BankTransaction(
            id=data["id"],
            visible_ts=datetime.fromtimestamp(data["visibleTS"] / 1000, tz=timezone.utc),
            amount=Decimal(str(data["amount"])),
            category=data.get("category", ""),
            reference_text=data.get("referenceText"),
            merchant_name=data.get("merchantName"),
            merchant_city=data.get("merchantCity"),
            raw_data=data,
        )
    except (KeyError, TypeError, ValueError, InvalidOperation, OverflowError) as e:
        raise FetchError(f"Malformed N26 transaction {data!r:.80}: {e!r}") from e


class N26Client:
    """Client for the N26 banking API."""

    BASE_URL = "https://api.tech26.de"

    def __init__(self, base_url: str | None = None) -> None:
        """Initialize client with an optional API base URL."""
        self.base_url = base_url or self.BASE_URL
        self._session = requests.Session()
        self._session.headers.update({"Accept": "application/json"})

    def _request(
        self,
        method: str,
        endpoint: str,
        session: N26Session,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make an authenticated API request."""
        url = f"{self.base_url}/{endpoint}"
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                headers={"Authorization": f"Bearer {session.access_token}"},
            )
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code in (401, 403):
                raise AuthenticationError(f"N26 rejected the session token: {e}") from e
            raise FetchError(f"N26 request {endpoint} failed: {e}") from e
        except (requests.RequestException, ValueError) as e:
            raise FetchError(f"N26 request {endpoint} failed: {e}") from e

    def authenticate(self, credentials: N26Credentials) -> N26Session:
        """
        Log in with username and password.

        Raises:
            AuthenticationError: If N26 rejects the credentials
            FetchError: On any other network or API failure
        """
        try:
            response = self._session.post(
                f"{self.base_url}/oauth/token",
                data={
                    "grant_type": "password",
                    "username": credentials.username,
                    "password": credentials.password,
                },
                auth=_CLIENT_AUTH,
            )
            response.raise_for_status()
            data = response.json()
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code in (400, 401, 403):
                raise AuthenticationError(f"N26 rejected the credentials: {e}") from e
            raise FetchError(f"N26 login failed: {e}") from e
        except (requests.RequestException, ValueError) as e:
            raise FetchError(f"N26 login failed: {e}") from e

        if not isinstance(data, dict):
            raise FetchError(f"N26 login response is not a JSON object: {data!r:.80}")
        if "access_token" not in data:
            raise AuthenticationError("N26 login response has no access token")
        logger.debug("Authenticated with N26 as %s", credentials.username)
        return N26Session(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_in=data.get("expires_in"),
        )

    def get_categories(self, session: N26Session) -> dict[str, str]:
        """Get N26 categories as a mapping of category code to name."""
        result = self._request("GET", "api/smrt/categories", session)
        try:
            return {item["id"]: item["name"] for item in result}
        except (KeyError, TypeError) as e:
            raise FetchError(f"Malformed N26 categories response: {e!r}") from e

    def get_transactions(
        self,
        session: N26Session,
        days: int,
        limit: int,
        today: date | None = None,
    ) -> list[BankTransaction]:
        """
        Get transactions of the last ``days`` days, today included.

        Args:
            session: Authenticated session
            days: Window size in days
            limit: Maximum number of transactions to return
            today: End of the window (defaults to the current UTC date)

        Returns:
            List of BankTransaction objects
        """
        if today is None:
            today = utc_today()
        params = {
            "from": _epoch_millis(window_start(days, today)),
            "to": _epoch_millis(today) + 24 * 60 * 60 * 1000 - 1,
            "limit": limit,
        }
        result = self._request("GET", "api/smrt/transactions", session, params=params)
        if not isinstance(result, list):
            raise FetchError(f"N26 transactions response is not a list: {result!r:.80}")
        transactions = [parse_transaction(item) for item in result]
        logger.debug("Fetched %d N26 transactions for %d days", len(transactions), days)
        return transactions
