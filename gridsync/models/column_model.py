from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

"""Column registry for the grid.

Holds the ordered column definitions and answers the one question the sync
engine asks of it: which columns are currently visible.
"""

__all__ = [
    "DEFAULT_CHECKBOX_COLUMN",
    "ColumnDef",
    "ColumnModel",
]

DEFAULT_CHECKBOX_COLUMN = "_button"


@dataclass(frozen=True)
class ColumnDef:
    column_name: str
    title: str = ""
    is_hidden: bool = False
    is_editable: bool = False  # column accepts edits (row state may still disable it)
    class_name: str | None = None  # static class name applied to every cell in the column


class ColumnModel:
    """Ordered column definitions keyed by column name."""

    def __init__(self, columns: Iterable[ColumnDef]) -> None:
        self._columns: list[ColumnDef] = []
        self._by_name: dict[str, ColumnDef] = {}
        for column in columns:
            if column.column_name in self._by_name:
                raise ValueError(f"duplicate column name: {column.column_name}")
            self._columns.append(column)
            self._by_name[column.column_name] = column

    def get(self, column_name: str) -> ColumnDef | None:
        return self._by_name.get(column_name)

    def column_names(self) -> list[str]:
        return [c.column_name for c in self._columns]

    def get_visible_column_model_list(self) -> list[ColumnDef]:
        return [c for c in self._columns if not c.is_hidden]

    def __len__(self) -> int:
        return len(self._columns)
