"""Exceptions raised by ynab-sync.

Every error derives from ``SyncError`` so the CLI can report any of them the
same way. Argument, authentication and fetch errors abort a run; apply errors
are collected per operation and reported at the end.
"""


class SyncError(Exception):
    """Base class for all ynab-sync errors."""


class ArgumentError(SyncError):
    """Invalid command-line argument or configuration value."""


class InvalidDateFormat(ArgumentError):
    """The sync start date is not a ``YYYY-MM-DD`` date."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid date {value!r}, expected YYYY-MM-DD")
        self.value = value


class CategoryMappingUnreadable(ArgumentError):
    """The category mapping file does not exist or cannot be read."""

    def __init__(self, path: object, reason: str | None = None) -> None:
        message = f"Can not read category mapping file {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class CategoryMappingInvalid(ArgumentError):
    """The category mapping file is not a JSON object of strings."""

    def __init__(self, path: object, reason: str | None = None) -> None:
        message = f"Can not parse category mapping file {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class AuthenticationError(SyncError):
    """Credentials were rejected by N26 or YNAB."""


class ApplyAborted(AuthenticationError):
    """YNAB rejected the token part way through writing transactions.

    ``report`` holds what was written before the rejection.
    """

    def __init__(self, message: str, report: object) -> None:
        super().__init__(message)
        self.report = report


class FetchError(SyncError):
    """A request for categories, accounts or transactions failed."""


class ApplyError(SyncError):
    """Writing a single transaction to YNAB failed."""

    def __init__(self, import_id: str | None, message: str) -> None:
        super().__init__(f"{import_id or '(no import id)'}: {message}")
        self.import_id = import_id
        self.message = message
