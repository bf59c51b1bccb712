from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

"""SpanDescriptor model (merged cell grouping).

One descriptor exists per (row, column). For a merged group exactly one row is
the owner; every member row carries the same ``owner_row_key``. Only the owner
holds the group size in ``span_length``; members carry 0.
"""

__all__ = [
    "SpanDescriptor",
]


@dataclass(frozen=True)
class SpanDescriptor:
    """How a cell participates in a row span."""
    owner_row_key: Any  # rowKey of the group owner (self for unmerged cells)
    span_length: int  # group size on the owner, 0 on members and unmerged cells
    is_owner: bool

    @staticmethod
    def unmerged(row_key: Any) -> SpanDescriptor:
        return SpanDescriptor(owner_row_key=row_key, span_length=0, is_owner=True)

    @staticmethod
    def from_mapping(data: Any) -> SpanDescriptor | None:
        """Parse a descriptor from ``_extraData.rowSpanData[column]``.

        Accepts ``{ownerRowKey, spanLength, isOwner}`` and the older
        ``{mainRowKey, count, isMainRow}`` spelling. Returns None when the entry
        is not a mapping or has no owner key.
        """
        if not isinstance(data, Mapping):
            return None
        if "ownerRowKey" in data:
            owner = data["ownerRowKey"]
            length = data.get("spanLength", 0)
            is_owner = data.get("isOwner", False)
        elif "mainRowKey" in data:
            owner = data["mainRowKey"]
            length = data.get("count", 0)
            is_owner = data.get("isMainRow", False)
        else:
            return None
        if owner is None:
            return None
        try:
            span_length = int(length or 0)
        except (TypeError, ValueError):
            return None
        return SpanDescriptor(owner_row_key=owner, span_length=span_length, is_owner=bool(is_owner))

    def to_mapping(self) -> dict[str, Any]:
        return {
            "ownerRowKey": self.owner_row_key,
            "spanLength": self.span_length,
            "isOwner": self.is_owner,
        }
