from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from gridsync.models.cell import CellPatch

if TYPE_CHECKING:
    from gridsync.view.row import Row

"""Cell mutator: the only incremental write path for stored Cells.

Clone-compare-replace: the patch is compared field by field with ``==``
against the stored Cell; only fields that differ are applied to a copy, and the
copy is stored only if something differed. ``changed_fields`` on the stored
copy lists exactly those fields. A patch that changes nothing stores nothing
and notifies nobody, which is what stops re-entrant relation cascades.
"""

__all__ = [
    "VALUE_FIELD",
    "set_cell",
]

logger = logging.getLogger(__name__)

VALUE_FIELD = "value"


def set_cell(row: Row, column_name: str, patch: CellPatch) -> tuple[str, ...]:
    """Apply ``patch`` to the Cell of ``row`` for ``column_name``.

    Args:
        row: View row owning the Cell
        column_name: Column to update; a column without a Cell is a silent no-op
        patch: Fields to update

    Returns:
        Names of the fields that changed, in patch field order (empty for a no-op)
    """
    current = row.get_cell(column_name)
    if current is None:
        return ()

    changed: list[str] = []
    updates: dict[str, object] = {}
    for name, new_value in patch.items():
        if getattr(current, name) != new_value:
            updates[name] = new_value
            changed.append(name)

    if not changed:
        return ()

    changed_fields = tuple(changed)
    row._store_cell(column_name, replace(current, changed_fields=changed_fields, **updates))
    logger.debug("cell %r/%s changed: %s", row.row_key, column_name, ", ".join(changed_fields))
    row._notify_cell_changed(column_name, changed_fields)

    if VALUE_FIELD in updates:
        row_index = row.data_store.index_of_row_key(row.row_key)
        row._notify_value_change(row_index)
    return changed_fields
