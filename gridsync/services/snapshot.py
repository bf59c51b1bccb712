from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import pandas as pd

from gridsync.view.row import Row

"""Cell snapshot and SUMMARY line rendering.

``cells_to_frame`` flattens the current Cells of a RowList (or any iterable of
Rows) into one DataFrame row per cell, for inspection and tests. Merged member
cells report the span owner's state, the same way a renderer would show them.
"""

__all__ = [
    "SNAPSHOT_COLUMNS",
    "SyncStats",
    "cells_to_frame",
    "render_summary_line",
]

SNAPSHOT_COLUMNS = [
    "row_key",
    "column_name",
    "value",
    "span_length",
    "is_owner",
    "owner_row_key",
    "is_editable",
    "is_disabled",
    "class_names",
]


@dataclass(frozen=True)
class SyncStats:
    """Counters reported on the SUMMARY line."""
    rows: int
    cells: int
    value_changes: int
    cell_updates: int
    issues: int


def cells_to_frame(rows: Iterable[Row], columns: Sequence[str] | None = None) -> pd.DataFrame:
    """Build a cell-per-line DataFrame.

    Args:
        rows: View rows, in display order
        columns: Restrict to these column names (in this order); None keeps row order

    Returns:
        DataFrame with SNAPSHOT_COLUMNS
    """
    records = []
    for row in rows:
        names = list(columns) if columns is not None else list(row.cells)
        for column_name in names:
            own = row.get_cell(column_name)
            if own is None:
                continue
            shown = row.get_display_cell(column_name) or own
            records.append({
                "row_key": own.row_key,
                "column_name": own.column_name,
                "value": own.value,
                "span_length": own.span_length,
                "is_owner": own.is_owner,
                "owner_row_key": own.owner_row_key,
                "is_editable": shown.is_editable,
                "is_disabled": shown.is_disabled,
                "class_names": " ".join(shown.class_names),
            })
    return pd.DataFrame.from_records(records, columns=SNAPSHOT_COLUMNS)


def render_summary_line(stats: SyncStats) -> str:
    """Render the SUMMARY line.

    Examples:
        >>> render_summary_line(SyncStats(rows=2, cells=4, value_changes=1, cell_updates=3, issues=0))
        'SUMMARY rows=2 cells=4 value_changes=1 cell_updates=3 issues=0'
    """
    return (
        f"SUMMARY rows={stats.rows} "
        f"cells={stats.cells} "
        f"value_changes={stats.value_changes} "
        f"cell_updates={stats.cell_updates} "
        f"issues={stats.issues}"
    )
