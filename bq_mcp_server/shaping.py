"""Result shaping: table-name filtering and the hard item cap.

Every function returns a new list and leaves its input untouched. Shaping
is idempotent: shaping an already-shaped result returns an equal list.
"""

import re
from typing import Any, Sequence, TypeVar

T = TypeVar("T")

MAX_RESULT_ITEMS = 100


def cap_items(items: Sequence[T], limit: int = MAX_RESULT_ITEMS) -> list[T]:
    """Keep the first `limit` items in their original order."""
    return list(items[:limit])


def filter_table_names(names: Sequence[str], pattern: re.Pattern | None) -> list[str]:
    """Keep names the pattern matches anywhere (unanchored), in order.

    With no pattern, all names are kept.
    """
    if pattern is None:
        return list(names)
    return [name for name in names if pattern.search(name)]


def shape_rows(rows: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
    """Shape query rows. Rows are never filtered, only capped."""
    return cap_items(rows)


def shape_table_names(names: Sequence[str], pattern: re.Pattern | None) -> list[str]:
    """Filter table names, then cap. The cap always applies after filtering."""
    return cap_items(filter_table_names(names, pattern))
