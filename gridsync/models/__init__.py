"""Domain models for the grid row-to-cell sync engine.

This package contains the value types shared by the services, the view rows
and the in-memory backing store.
"""

from .cell import UNSET, Cell, CellPatch
from .column_model import ColumnDef, ColumnModel
from .config_models import GridConfig
from .row_state import RowState, RowStateFlag
from .span import SpanDescriptor
from .sync_issue import SyncIssue

__all__ = [
    # Cell records
    "UNSET",
    "Cell",
    "CellPatch",
    # Row metadata
    "RowState",
    "RowStateFlag",
    "SpanDescriptor",
    # Columns / configuration
    "ColumnDef",
    "ColumnModel",
    "GridConfig",
    # Diagnostics
    "SyncIssue",
]
