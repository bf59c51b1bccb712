from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from .column_model import ColumnDef
from .row_state import RowState

if TYPE_CHECKING:
    from gridsync.view.row import Row

"""Collaborator protocols consumed by the sync engine.

The engine only talks to its collaborators through these interfaces, so the
in-memory DataStore in ``gridsync.store`` can be swapped for any object that
provides the same methods.

- StoreRowLike: one backing-store row
- DataStoreLike: the backing store
- ColumnRegistry: visible column lookup
- RowLookup: containing collection used to resolve span owner rows
- RowSubscriber: receiver of backing-store row notifications
"""

__all__ = [
    "StoreRowLike",
    "DataStoreLike",
    "ColumnRegistry",
    "RowLookup",
    "RowSubscriber",
]


@runtime_checkable
class StoreRowLike(Protocol):
    def get_row_state(self) -> RowState: ...

    def is_editable(self, column_name: str) -> bool: ...

    def get_class_name_list(self, column_name: str) -> Sequence[str]: ...


@runtime_checkable
class DataStoreLike(Protocol):
    def get(self, row_key: Any) -> StoreRowLike | None: ...

    def is_row_span_enable(self) -> bool: ...

    def index_of_row_key(self, row_key: Any) -> int: ...


@runtime_checkable
class ColumnRegistry(Protocol):
    def get_visible_column_model_list(self) -> Sequence[ColumnDef]: ...


@runtime_checkable
class RowLookup(Protocol):
    def get(self, row_key: Any) -> Row | None: ...


@runtime_checkable
class RowSubscriber(Protocol):
    """Receives synchronous notifications for one backing-store row."""

    def on_row_changed(self, changed: Mapping[str, Any]) -> None: ...

    def on_extra_data_changed(self) -> None: ...
