"""N26 to YNAB category resolution."""

import json
from collections.abc import Callable, Mapping
from pathlib import Path

from ynab_sync.errors import CategoryMappingInvalid, CategoryMappingUnreadable
from ynab_sync.logging_setup import get_logger

logger = get_logger(__name__)


def load_category_mapping(path: Path) -> dict[str, str]:
    """
    Load the user's N26 category name to YNAB category name mapping.

    Checks, in order: the file exists, it can be read, it parses as JSON,
    the top level is an object, and every value is a string.

    Args:
        path: Path to the JSON mapping file

    Returns:
        Mapping of N26 category names to YNAB category names

    Raises:
        CategoryMappingUnreadable: If the file is missing or cannot be read
        CategoryMappingInvalid: If the content is not a JSON object of strings
    """
    path = Path(path)
    if not path.exists():
        raise CategoryMappingUnreadable(path, "file does not exist")

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise CategoryMappingUnreadable(path, str(err)) from err

    try:
        data = json.loads(content)
    except json.JSONDecodeError as err:
        raise CategoryMappingInvalid(path, str(err)) from err

    if not isinstance(data, dict):
        raise CategoryMappingInvalid(path, f"expected a JSON object, got {type(data).__name__}")

    for key, value in data.items():
        if not isinstance(value, str):
            raise CategoryMappingInvalid(path, f"value for {key!r} is not a string")

    logger.debug("Loaded %d category mappings from %s", len(data), path)
    return data


class CategoryMapper:
    """
    Resolves N26 category codes to YNAB category ids.

    Resolution is three lookups: N26 code -> N26 category name (from N26),
    N26 name -> YNAB category name (user mapping), YNAB name -> YNAB id
    (from YNAB). The first missing entry ends the chain with None.
    """

    def __init__(
        self,
        bank_categories: Mapping[str, str],
        category_mapping: Mapping[str, str],
        ledger_categories: Mapping[str, str],
    ) -> None:
        self.bank_categories = bank_categories
        self.category_mapping = category_mapping
        self.ledger_categories = ledger_categories
        self._steps: list[Callable[[str], str | None]] = [
            self.bank_categories.get,
            self.category_mapping.get,
            self.ledger_categories.get,
        ]

    def resolve(self, bank_category: str | None) -> str | None:
        """Return the YNAB category id for an N26 category code, or None."""
        value = bank_category
        for step in self._steps:
            if value is None:
                return None
            value = step(value)
        return value
