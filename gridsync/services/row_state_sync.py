from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gridsync.models.cell import CellPatch
from gridsync.models.sync_issue import DANGLING_SPAN, SyncIssue

from .cell_mutator import set_cell
from .cell_projector import resolve_cell_state

if TYPE_CHECKING:
    from gridsync.view.row import Row

"""Row state synchronizer.

Recomputes editable/disabled/class state for every visible column of a row
after its row-level metadata changed (row state flag, class names, spans).

Merged cells show one state: when the row is a span member for a column, the
recomputed state is written to the owner row's Cell, never to the member's.
"""

__all__ = [
    "sync_row_state",
]

logger = logging.getLogger(__name__)


def sync_row_state(row: Row) -> None:
    """Push recomputed row-level state into the row's Cells (or their span owners).

    No-op when the row is detached from its collection or has no backing-store
    record. An owner row missing from the collection is skipped for that column,
    logged at WARN and recorded as a DANGLING_SPAN SyncIssue.
    """
    collection = row.collection
    if collection is None:
        logger.debug("row %r detached; state sync skipped", row.row_key)
        return

    data_store = row.data_store
    store_row = data_store.get(row.row_key)
    if store_row is None:
        logger.debug("row %r not in backing store; state sync skipped", row.row_key)
        return

    row_state = store_row.get_row_state()
    row_span_enabled = data_store.is_row_span_enable()

    for column in row.column_model.get_visible_column_model_list():
        column_name = column.column_name
        cell = row.get_cell(column_name)
        if cell is None:
            continue

        state = resolve_cell_state(store_row, column_name, row_state, row.checkbox_column)

        target = row
        if row_span_enabled and not cell.is_owner:
            target = collection.get(cell.owner_row_key)
            if target is None:
                _record_dangling_span(row, column_name, cell.owner_row_key)
                continue

        set_cell(
            target,
            column_name,
            CellPatch(
                is_disabled=state.is_disabled,
                is_editable=state.is_editable,
                class_names=state.class_names,
            ),
        )


def _record_dangling_span(row: Row, column_name: str, owner_row_key: object) -> None:
    message = f"span owner row {owner_row_key!r} not found; state update for {column_name!r} skipped"
    logger.warning("row %r: %s", row.row_key, message)
    if row.issue_log is not None:
        row.issue_log.append(
            SyncIssue.create(row.row_key, column_name, owner_row_key, DANGLING_SPAN, message)
        )
