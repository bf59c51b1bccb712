from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from gridsync.logging.issue_log import SyncIssueLog
from gridsync.models.protocols import ColumnRegistry
from gridsync.models.raw_row import get_row_key
from gridsync.services.change_propagator import ChangePropagator
from gridsync.store.data_store import DataStore

from .row import CellListener, Row, ValueChangeCallback

"""RowList: the collection of view Rows currently in the grid.

Adding a raw row creates (or re-parses) its view Row and subscribes a
ChangePropagator to the matching backing-store row; removing it unsubscribes
and detaches the Row. Cell updates never add, remove or reorder rows here.
"""

__all__ = [
    "RowList",
]

logger = logging.getLogger(__name__)


class RowList:
    def __init__(
        self,
        data_store: DataStore,
        column_model: ColumnRegistry,
        *,
        value_change: ValueChangeCallback | None = None,
        checkbox_column: str | None = None,
        issue_log: SyncIssueLog | None = None,
    ) -> None:
        self.data_store = data_store
        self.column_model = column_model
        # None: follow the store's checkbox column
        self.checkbox_column = checkbox_column if checkbox_column is not None else data_store.checkbox_column
        self.issue_log = issue_log if issue_log is not None else SyncIssueLog()
        self._value_change = value_change
        self._rows: dict[Any, Row] = {}
        self._propagators: dict[Any, ChangePropagator] = {}
        self._cell_listeners: list[CellListener] = []

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(list(self._rows.values()))

    def __contains__(self, row_key: Any) -> bool:
        return row_key in self._rows

    def get(self, row_key: Any) -> Row | None:
        return self._rows.get(row_key)

    def add_cell_listener(self, listener: CellListener) -> None:
        """Listen to committed Cell changes of every current and future row."""
        self._cell_listeners.append(listener)
        for row in self._rows.values():
            row.add_cell_listener(listener)

    def reset(self, raw_rows: Iterable[Mapping[str, Any]]) -> None:
        """Drop every row and load ``raw_rows`` in order."""
        for row_key in list(self._rows):
            self.remove(row_key)
        for raw_row in raw_rows:
            self.add(raw_row)
        logger.debug("row list reset: %d rows", len(self._rows))

    def add(self, raw_row: Mapping[str, Any]) -> Row:
        """Add a row, or re-project it wholesale if its rowKey is already present."""
        row_key = get_row_key(raw_row)
        row = self._rows.get(row_key)
        if row is not None:
            row.parse(raw_row)
            return row

        row = Row(
            row_key,
            self.data_store,
            self.column_model,
            collection=self,
            checkbox_column=self.checkbox_column,
            value_change=self._value_change,
            issue_log=self.issue_log,
        )
        row.parse(raw_row)
        for listener in self._cell_listeners:
            row.add_cell_listener(listener)

        propagator = ChangePropagator(row)
        self.data_store.subscribe(row_key, propagator)
        self._rows[row_key] = row
        self._propagators[row_key] = propagator
        return row

    def remove(self, row_key: Any) -> Row | None:
        row = self._rows.pop(row_key, None)
        if row is None:
            return None
        propagator = self._propagators.pop(row_key)
        self.data_store.unsubscribe(row_key, propagator)
        for listener in self._cell_listeners:
            row.remove_cell_listener(listener)
        row.collection = None
        return row
