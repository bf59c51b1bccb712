from __future__ import annotations

from dataclasses import dataclass

from .column_model import DEFAULT_CHECKBOX_COLUMN, ColumnDef, ColumnModel

"""Config dataclasses for the grid sync engine.

These are produced by ``gridsync.config.loader.load_config`` from the YAML
grid configuration and consumed when wiring a DataStore and a RowList.
"""


@dataclass(frozen=True)
class GridConfig:
    """Root configuration object for one grid."""
    columns: tuple[ColumnDef, ...]  # Ordered column definitions
    row_span_enabled: bool = True  # Honour _extraData.rowSpanData when projecting
    checkbox_column: str = DEFAULT_CHECKBOX_COLUMN  # Column driven by is_disabled_check_column
    issue_log_dir: str = "logs"  # Where SyncIssueLog.flush() writes JSON Lines

    def column_model(self) -> ColumnModel:
        return ColumnModel(self.columns)
