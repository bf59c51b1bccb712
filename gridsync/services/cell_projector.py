from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from gridsync.models.cell import Cell, normalize_class_names
from gridsync.models.column_model import DEFAULT_CHECKBOX_COLUMN
from gridsync.models.protocols import DataStoreLike, StoreRowLike
from gridsync.models.raw_row import get_row_key, iter_column_values
from gridsync.models.row_state import RowState

from .span_registry import resolve_span

"""Cell projector: RawRow -> per-column Cell records (cold path).

Used on initial load and whenever a row is replaced wholesale. Projection has no
hidden state, so projecting the same raw row against the same store twice gives
equal Cell sets.
"""

__all__ = [
    "CellState",
    "ProjectionError",
    "resolve_cell_state",
    "project",
]


class ProjectionError(Exception):
    """Raised when a raw row cannot be projected (no backing-store row for its key)."""
    pass


@dataclass(frozen=True)
class CellState:
    """Derived state shared by projection and row state synchronization."""
    is_editable: bool
    is_disabled: bool
    class_names: tuple[str, ...]


def resolve_cell_state(
    store_row: StoreRowLike,
    column_name: str,
    row_state: RowState,
    checkbox_column: str = DEFAULT_CHECKBOX_COLUMN,
) -> CellState:
    if column_name == checkbox_column:
        is_disabled = row_state.is_disabled_check_column
    else:
        is_disabled = row_state.is_disabled
    return CellState(
        is_editable=bool(store_row.is_editable(column_name)),
        is_disabled=is_disabled,
        class_names=normalize_class_names(store_row.get_class_name_list(column_name)),
    )


def project(
    raw_row: Mapping[str, Any],
    data_store: DataStoreLike,
    *,
    checkbox_column: str = DEFAULT_CHECKBOX_COLUMN,
) -> dict[str, Cell]:
    """Build the Cell set for one raw row.

    Parameters
    ----------
    raw_row: RawRow mapping; ``rowKey`` and ``_extraData`` are not projected
    data_store: Backing store answering state questions for the row
    checkbox_column: Column whose disabled flag follows ``is_disabled_check_column``

    Returns
    -------
    dict[str, Cell]: Column name -> Cell, in raw row order

    Raises
    ------
    ProjectionError: If the backing store has no row for ``rowKey``
    """
    row_key = get_row_key(raw_row)
    store_row = data_store.get(row_key)
    if store_row is None:
        raise ProjectionError(f"row {row_key!r} not found in backing store")

    row_state = store_row.get_row_state()
    row_span_enabled = data_store.is_row_span_enable()

    cells: dict[str, Cell] = {}
    for column_name, value in iter_column_values(raw_row):
        span = resolve_span(raw_row, column_name, row_span_enabled=row_span_enabled)
        state = resolve_cell_state(store_row, column_name, row_state, checkbox_column)
        cells[column_name] = Cell(
            row_key=row_key,
            column_name=column_name,
            value=value,
            span_length=span.span_length,
            is_owner=span.is_owner,
            owner_row_key=span.owner_row_key,
            is_editable=state.is_editable,
            is_disabled=state.is_disabled,
            class_names=state.class_names,
            option_list=(),
            changed_fields=(),
        )
    return cells
