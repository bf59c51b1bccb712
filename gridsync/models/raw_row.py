from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

"""RawRow accessors for the backing-store row records.

A RawRow is a plain ``dict`` keyed by column name. Two keys are reserved:

- ``rowKey``: row identifier
- ``_extraData``: row metadata (``rowSpanData``, ``rowSpan``, ``rowState``, ``className``)

Missing or malformed ``_extraData`` is read as an empty mapping so that callers
never have to guard against it.
"""

__all__ = [
    "ROW_KEY",
    "EXTRA_DATA_KEY",
    "ROW_SPAN_DATA_KEY",
    "ROW_SPAN_KEY",
    "ROW_STATE_KEY",
    "CLASS_NAME_KEY",
    "RESERVED_KEYS",
    "RawRow",
    "get_row_key",
    "get_extra_data",
    "iter_column_values",
]

ROW_KEY = "rowKey"
EXTRA_DATA_KEY = "_extraData"

# _extraData sub keys
ROW_SPAN_DATA_KEY = "rowSpanData"  # column -> span descriptor (resolved)
ROW_SPAN_KEY = "rowSpan"  # column -> span count, declared on owner rows only
ROW_STATE_KEY = "rowState"  # DISABLED / DISABLED_CHECK / CHECKED
CLASS_NAME_KEY = "className"  # {"row": [...], "column": {column: [...]}}

RESERVED_KEYS = frozenset({ROW_KEY, EXTRA_DATA_KEY})

RawRow = dict[str, Any]


def get_row_key(raw_row: Mapping[str, Any]) -> Any:
    return raw_row.get(ROW_KEY)


def get_extra_data(raw_row: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the ``_extraData`` block, or an empty mapping if absent/malformed."""
    extra = raw_row.get(EXTRA_DATA_KEY)
    if isinstance(extra, Mapping):
        return extra
    return {}


def iter_column_values(raw_row: Mapping[str, Any]) -> Iterator[tuple[str, Any]]:
    """Yield ``(column_name, value)`` for every non-reserved entry, in row order."""
    for column_name, value in raw_row.items():
        if column_name in RESERVED_KEYS:
            continue
        yield column_name, value
