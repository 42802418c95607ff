"""Sync window computation."""

from datetime import date, datetime, timedelta, timezone

from ynab_sync.errors import InvalidDateFormat


def utc_today() -> date:
    """Return the current date in UTC."""
    return datetime.now(timezone.utc).date()


def parse_sync_from(value: str) -> date:
    """
    Parse the ``--sync-from`` value.

    Args:
        value: Date string in YYYY-MM-DD format

    Returns:
        Parsed date

    Raises:
        InvalidDateFormat: If the value is not a YYYY-MM-DD date
    """
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError as err:
        raise InvalidDateFormat(value) from err


def days_to_sync(start: date, today: date | None = None) -> int:
    """
    Number of days from ``start`` to ``today``, both inclusive.

    A start date after today still yields a one-day window.
    """
    if today is None:
        today = utc_today()
    return max(1, (today - start).days + 1)


def window_start(days: int, today: date | None = None) -> date:
    """First date covered by a window of ``days`` days ending today."""
    if today is None:
        today = utc_today()
    return today - timedelta(days=max(1, days) - 1)
