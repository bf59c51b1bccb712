from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from gridsync.models.cell import normalize_class_names
from gridsync.models.column_model import DEFAULT_CHECKBOX_COLUMN, ColumnModel
from gridsync.models.protocols import RowSubscriber
from gridsync.models.raw_row import (
    CLASS_NAME_KEY,
    EXTRA_DATA_KEY,
    ROW_KEY,
    ROW_STATE_KEY,
    RawRow,
    get_extra_data,
)
from gridsync.models.row_state import RowState, RowStateFlag

"""In-memory backing store.

Authoritative RawRow records plus the per-row questions the sync engine asks
(row state, editability, class names). Every mutation notifies the row's
subscribers synchronously, before the mutating call returns:

- ``on_row_changed(changed)`` for column values and whole ``_extraData`` swaps
  (``set_value``, ``set_row``, ``restore``); ``changed`` holds only fields whose
  value actually differed
- ``on_extra_data_changed()`` for single metadata keys (``set_extra_data``,
  ``set_row_state``)
"""

__all__ = [
    "EDITABLE_CLASS",
    "DISABLED_CLASS",
    "UnknownRowError",
    "DuplicateRowKeyError",
    "StoreRow",
    "DataStore",
]

logger = logging.getLogger(__name__)

EDITABLE_CLASS = "editable"
DISABLED_CLASS = "disabled"


class UnknownRowError(KeyError):
    """Raised when a mutation targets a rowKey the store does not hold."""
    pass


class DuplicateRowKeyError(ValueError):
    """Raised when two raw rows share a rowKey."""
    pass


class StoreRow:
    """One backing-store record."""

    def __init__(self, raw_row: Mapping[str, Any], store: DataStore) -> None:
        if ROW_KEY not in raw_row:
            raise ValueError("raw row has no rowKey")
        self._store = store
        self._original: dict[str, Any] = copy.deepcopy(dict(raw_row))
        self._data: dict[str, Any] = copy.deepcopy(dict(raw_row))
        self._subscribers: list[RowSubscriber] = []

    def __repr__(self) -> str:
        return f"StoreRow(row_key={self.row_key!r})"

    @property
    def row_key(self) -> Any:
        return self._data[ROW_KEY]

    @property
    def extra_data(self) -> Mapping[str, Any]:
        return get_extra_data(self._data)

    def get(self, column_name: str, default: Any = None) -> Any:
        return self._data.get(column_name, default)

    def to_raw_row(self) -> RawRow:
        return copy.deepcopy(self._data)

    # -- derived state -------------------------------------------------

    def get_row_state(self) -> RowState:
        return RowState.from_extra_data(self.extra_data)

    def is_disabled(self, column_name: str) -> bool:
        state = self.get_row_state()
        if column_name == self._store.checkbox_column:
            return state.is_disabled_check_column
        return state.is_disabled

    def is_editable(self, column_name: str) -> bool:
        column = self._store.column_model.get(column_name)
        if column is None or column.is_hidden or not column.is_editable:
            return False
        return not self.is_disabled(column_name)

    def get_class_name_list(self, column_name: str) -> list[str]:
        """Class names for one cell: column, row, cell, then editable/disabled markers."""
        names: list[str] = []
        column = self._store.column_model.get(column_name)
        if column is not None and column.class_name:
            names.extend(normalize_class_names(column.class_name))

        class_block = self.extra_data.get(CLASS_NAME_KEY)
        if isinstance(class_block, Mapping):
            names.extend(normalize_class_names(class_block.get("row")))
            per_column = class_block.get("column")
            if isinstance(per_column, Mapping):
                names.extend(normalize_class_names(per_column.get(column_name)))

        if self.is_editable(column_name):
            names.append(EDITABLE_CLASS)
        if self.is_disabled(column_name):
            names.append(DISABLED_CLASS)
        return list(normalize_class_names(names))

    # -- subscriptions -------------------------------------------------

    def subscribe(self, subscriber: RowSubscriber) -> None:
        if subscriber not in self._subscribers:
            self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: RowSubscriber) -> None:
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    @property
    def subscribers(self) -> tuple[RowSubscriber, ...]:
        return tuple(self._subscribers)

    def _emit_changed(self, changed: dict[str, Any]) -> None:
        if not changed:
            return
        for subscriber in list(self._subscribers):
            subscriber.on_row_changed(changed)

    def _emit_extra_data_changed(self) -> None:
        for subscriber in list(self._subscribers):
            subscriber.on_extra_data_changed()

    # -- mutations -----------------------------------------------------

    def set(self, column_name: str, value: Any) -> bool:
        return bool(self.update({column_name: value}))

    def update(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """Set several fields; ``_extraData`` replaces the metadata block wholesale.

        Returns:
            The fields that actually changed (also the payload sent to subscribers)
        """
        changed: dict[str, Any] = {}
        for field_name, value in values.items():
            if field_name == ROW_KEY:
                raise ValueError("rowKey cannot be changed")
            if field_name in self._data and self._data[field_name] == value:
                continue
            self._data[field_name] = copy.deepcopy(value)
            changed[field_name] = self._data[field_name]
        self._emit_changed(changed)
        return changed

    def set_extra_data(self, key: str, value: Any) -> bool:
        extra = self._data.get(EXTRA_DATA_KEY)
        if not isinstance(extra, dict):
            extra = {}
            self._data[EXTRA_DATA_KEY] = extra
        if extra.get(key) == value:
            return False
        if value is None:
            extra.pop(key, None)
        else:
            extra[key] = copy.deepcopy(value)
        self._emit_extra_data_changed()
        return True

    def restore(self) -> dict[str, Any]:
        """Return every field to its value at load time."""
        changed: dict[str, Any] = {}
        for field_name in list(self._data) + [k for k in self._original if k not in self._data]:
            if field_name == ROW_KEY:
                continue
            original = self._original.get(field_name)
            if self._data.get(field_name) != original:
                changed[field_name] = copy.deepcopy(original)
        self._data = copy.deepcopy(self._original)
        self._emit_changed(changed)
        return changed


class DataStore:
    """Ordered collection of StoreRows keyed by rowKey."""

    def __init__(
        self,
        raw_rows: Iterable[Mapping[str, Any]],
        column_model: ColumnModel,
        *,
        row_span_enabled: bool = True,
        checkbox_column: str = DEFAULT_CHECKBOX_COLUMN,
    ) -> None:
        self.column_model = column_model
        self.checkbox_column = checkbox_column
        self._row_span_enabled = row_span_enabled
        self._rows: list[StoreRow] = []
        self._index: dict[Any, int] = {}
        for raw_row in raw_rows:
            self.append(raw_row)

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[StoreRow]:
        return iter(list(self._rows))

    def is_row_span_enable(self) -> bool:
        return self._row_span_enabled

    def get(self, row_key: Any) -> StoreRow | None:
        index = self._index.get(row_key)
        if index is None:
            return None
        return self._rows[index]

    def index_of_row_key(self, row_key: Any) -> int:
        return self._index.get(row_key, -1)

    def row_keys(self) -> list[Any]:
        return [r.row_key for r in self._rows]

    def as_raw_rows(self) -> list[RawRow]:
        return [r.to_raw_row() for r in self._rows]

    def append(self, raw_row: Mapping[str, Any]) -> StoreRow:
        row = StoreRow(raw_row, self)
        if row.row_key in self._index:
            raise DuplicateRowKeyError(f"duplicate rowKey: {row.row_key!r}")
        self._index[row.row_key] = len(self._rows)
        self._rows.append(row)
        return row

    def remove(self, row_key: Any) -> StoreRow:
        row = self._require(row_key)
        self._rows.remove(row)
        self._index = {r.row_key: i for i, r in enumerate(self._rows)}
        return row

    def _require(self, row_key: Any) -> StoreRow:
        row = self.get(row_key)
        if row is None:
            raise UnknownRowError(row_key)
        return row

    # -- mutations by rowKey -------------------------------------------

    def set_value(self, row_key: Any, column_name: str, value: Any) -> bool:
        return self._require(row_key).set(column_name, value)

    def set_row(self, row_key: Any, values: Mapping[str, Any]) -> dict[str, Any]:
        return self._require(row_key).update(values)

    def set_extra_data(self, row_key: Any, key: str, value: Any) -> bool:
        return self._require(row_key).set_extra_data(key, value)

    def set_row_state(self, row_key: Any, state: RowStateFlag | str | None) -> bool:
        """Set ``_extraData.rowState``; None clears it."""
        if isinstance(state, RowStateFlag):
            state = state.value
        elif state is not None:
            state = RowStateFlag(state).value
        logger.debug("row %r state -> %s", row_key, state)
        return self._require(row_key).set_extra_data(ROW_STATE_KEY, state)

    def restore(self, row_key: Any) -> dict[str, Any]:
        return self._require(row_key).restore()

    def subscribe(self, row_key: Any, subscriber: RowSubscriber) -> None:
        self._require(row_key).subscribe(subscriber)

    def unsubscribe(self, row_key: Any, subscriber: RowSubscriber) -> None:
        row = self.get(row_key)
        if row is not None:
            row.unsubscribe(subscriber)
