from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from gridsync.models.cell import Cell, CellPatch
from gridsync.models.column_model import DEFAULT_CHECKBOX_COLUMN
from gridsync.models.protocols import ColumnRegistry, DataStoreLike, RowLookup
from gridsync.services.cell_mutator import set_cell
from gridsync.services.cell_projector import project

if TYPE_CHECKING:
    from gridsync.logging.issue_log import SyncIssueLog

"""View Row: identity-keyed container of the Cells of one backing-store row.

The Row does not own its backing-store record; it keeps the DataStore and looks
the record up by ``row_key`` when it needs it. ``collection`` is the containing
RowList (None once the row is removed) and is only read, to resolve span owner
rows.

Stored Cells are replaced only through ``gridsync.services.cell_mutator``
(incremental path) or ``parse`` (wholesale, cold path).
"""

__all__ = [
    "CellListener",
    "ValueChangeCallback",
    "Row",
]

CellListener = Callable[["Row", str, tuple[str, ...]], None]
ValueChangeCallback = Callable[[int], None]


class Row:
    def __init__(
        self,
        row_key: Any,
        data_store: DataStoreLike,
        column_model: ColumnRegistry,
        *,
        collection: RowLookup | None = None,
        checkbox_column: str = DEFAULT_CHECKBOX_COLUMN,
        value_change: ValueChangeCallback | None = None,
        issue_log: SyncIssueLog | None = None,
    ) -> None:
        self.row_key = row_key
        self.data_store = data_store
        self.column_model = column_model
        self.collection = collection
        self.checkbox_column = checkbox_column
        self.issue_log = issue_log
        self._value_change = value_change
        self._cells: dict[str, Cell] = {}
        self._cell_listeners: list[CellListener] = []

    def __repr__(self) -> str:
        return f"Row(row_key={self.row_key!r}, columns={list(self._cells)})"

    @property
    def cells(self) -> Mapping[str, Cell]:
        """Read-only view of the current Cells keyed by column name."""
        return MappingProxyType(self._cells)

    def get_cell(self, column_name: str) -> Cell | None:
        return self._cells.get(column_name)

    def get_display_cell(self, column_name: str) -> Cell | None:
        """Cell whose state is shown for this row: the span owner's for merged members."""
        cell = self._cells.get(column_name)
        if cell is None or cell.is_owner or self.collection is None:
            return cell
        if not self.data_store.is_row_span_enable():
            return cell
        owner = self.collection.get(cell.owner_row_key)
        if owner is None:
            return cell
        return owner.get_cell(column_name) or cell

    def parse(self, raw_row: Mapping[str, Any]) -> None:
        """Replace every Cell with a fresh projection of ``raw_row``."""
        self._cells = project(raw_row, self.data_store, checkbox_column=self.checkbox_column)

    def set_cell(self, column_name: str, patch: CellPatch | None = None, **fields: Any) -> tuple[str, ...]:
        """Patch one Cell. Accepts a CellPatch or its fields as keyword arguments."""
        if patch is None:
            patch = CellPatch(**fields)
        elif fields:
            raise TypeError("pass either a CellPatch or keyword fields, not both")
        return set_cell(self, column_name, patch)

    def add_cell_listener(self, listener: CellListener) -> None:
        self._cell_listeners.append(listener)

    def remove_cell_listener(self, listener: CellListener) -> None:
        if listener in self._cell_listeners:
            self._cell_listeners.remove(listener)

    # -- hooks used by the cell mutator ---------------------------------

    def _store_cell(self, column_name: str, cell: Cell) -> None:
        self._cells[column_name] = cell

    def _notify_cell_changed(self, column_name: str, changed_fields: tuple[str, ...]) -> None:
        # copy: a listener may add/remove listeners while being notified
        for listener in list(self._cell_listeners):
            listener(self, column_name, changed_fields)

    def _notify_value_change(self, row_index: int) -> None:
        if self._value_change is not None:
            self._value_change(row_index)
