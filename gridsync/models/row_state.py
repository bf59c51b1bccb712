from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .raw_row import ROW_STATE_KEY

"""RowState model derived from the row-level flag in ``_extraData.rowState``."""

__all__ = [
    "RowStateFlag",
    "RowState",
]


class RowStateFlag(Enum):
    """Values accepted in ``_extraData.rowState``.

    - DISABLED: whole row disabled, checkbox column included
    - DISABLED_CHECK: only the checkbox column is disabled
    - CHECKED: row checkbox ticked
    """
    DISABLED = "DISABLED"
    DISABLED_CHECK = "DISABLED_CHECK"
    CHECKED = "CHECKED"


@dataclass(frozen=True)
class RowState:
    is_disabled: bool = False
    is_disabled_check_column: bool = False  # overrides is_disabled on the checkbox column
    is_checked: bool = False

    @staticmethod
    def from_extra_data(extra: Mapping[str, Any]) -> RowState:
        raw = extra.get(ROW_STATE_KEY)
        try:
            flag = RowStateFlag(raw)
        except ValueError:
            return RowState()
        if flag is RowStateFlag.DISABLED:
            return RowState(is_disabled=True, is_disabled_check_column=True)
        if flag is RowStateFlag.DISABLED_CHECK:
            return RowState(is_disabled_check_column=True)
        return RowState(is_checked=True)
