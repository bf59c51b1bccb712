from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import Any

"""SyncIssue model for recorded synchronization skips.

A SyncIssue is written whenever the Row State Synchronizer has to drop an
update instead of applying it, e.g. a member row of a span group whose owner
row is no longer in the row list. Records serialize to one JSON object per line
with a fixed key set.
"""

__all__ = [
    "DANGLING_SPAN",
    "SyncIssue",
]

DANGLING_SPAN = "DANGLING_SPAN"


@dataclass(frozen=True)
class SyncIssue:
    """Structured sync issue record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        row_key: rowKey of the row being synchronized
        column_name: Column whose update was skipped
        owner_row_key: Span owner the update was meant for (None if not span related)
        issue_type: Classification in UPPER_SNAKE_CASE format
        message: Human readable description
    """
    timestamp: str  # ISO8601 UTC
    row_key: Any
    column_name: str
    owner_row_key: Any
    issue_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(
        row_key: Any, column_name: str, owner_row_key: Any, issue_type: str, message: str
    ) -> SyncIssue:
        """Create a new SyncIssue stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return SyncIssue(
            timestamp=ts,
            row_key=row_key,
            column_name=column_name,
            owner_row_key=owner_row_key,
            issue_type=issue_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # default=str keeps non-JSON row keys (e.g. UUID, datetime) serializable
        return json.dumps(asdict(self), ensure_ascii=False, default=str)
