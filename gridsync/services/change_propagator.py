from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from gridsync.models.cell import CellPatch
from gridsync.models.raw_row import EXTRA_DATA_KEY, ROW_KEY

from .cell_mutator import set_cell
from .row_state_sync import sync_row_state

if TYPE_CHECKING:
    from gridsync.view.row import Row

"""Change propagator: backing-store row notifications -> view Row updates.

One propagator is subscribed per view Row. Metadata changes go to the row
state synchronizer; column value changes go to the cell mutator as a value-only
patch. The view never polls the backing store.
"""

__all__ = [
    "ChangePropagator",
]


class ChangePropagator:
    """RowSubscriber bound to one view Row."""

    def __init__(self, row: Row) -> None:
        self.row = row

    def __repr__(self) -> str:
        return f"ChangePropagator(row_key={self.row.row_key!r})"

    def on_row_changed(self, changed: Mapping[str, Any]) -> None:
        """Handle a generic change/restore of backing-store fields.

        Column values are read back from the store when applied: a value_change
        cascade fired for an earlier field may already have rewritten a later
        one, and the payload would then be stale.
        """
        store_row = self.row.data_store.get(self.row.row_key)
        for field_name, new_value in changed.items():
            if field_name == EXTRA_DATA_KEY:
                sync_row_state(self.row)
            elif field_name == ROW_KEY:
                continue
            else:
                if store_row is not None:
                    new_value = store_row.get(field_name, new_value)
                set_cell(self.row, field_name, CellPatch(value=new_value))

    def on_extra_data_changed(self) -> None:
        sync_row_state(self.row)
