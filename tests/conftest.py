# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
from typing import Any

import pytest

from gridsync.logging.issue_log import SyncIssueLog
from gridsync.models.column_model import ColumnDef, ColumnModel
from gridsync.store.data_store import DataStore
from gridsync.view.row_list import RowList


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """columns:
  - name: _button
    title: ""
  - name: name
    title: Name
    editable: true
  - name: qty
    title: Quantity
    editable: true
    class_name: numeric
  - name: memo
    hidden: true
row_span: true
checkbox_column: _button
issue_log_dir: logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "grid.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def sample_rows_yaml() -> str:
    return """- rowKey: 1
  _button: false
  name: a
  qty: 10
  _extraData:
    rowSpan:
      name: 2
- rowKey: 2
  _button: false
  name: a
  qty: 20
- rowKey: 3
  _button: false
  name: b
  qty: 30
"""


@pytest.fixture()
def write_rows(temp_workdir: Path, sample_rows_yaml: str) -> Path:
    rows = temp_workdir / "data" / "rows.yml"
    rows.write_text(sample_rows_yaml, encoding="utf-8")
    return rows


@pytest.fixture()
def column_model() -> ColumnModel:
    return ColumnModel([
        ColumnDef("_button"),
        ColumnDef("name", title="Name", is_editable=True),
        ColumnDef("qty", title="Quantity", is_editable=True, class_name="numeric"),
        ColumnDef("memo", is_hidden=True, is_editable=True),
    ])


@pytest.fixture()
def span_rows() -> list[dict[str, Any]]:
    """Rows 1 and 2 merged over ``name`` (owner 1); row 3 unmerged."""
    return [
        {
            "rowKey": 1, "_button": False, "name": "a", "qty": 10,
            "_extraData": {"rowSpanData": {"name": {"ownerRowKey": 1, "spanLength": 2, "isOwner": True}}},
        },
        {
            "rowKey": 2, "_button": False, "name": "a", "qty": 20,
            "_extraData": {"rowSpanData": {"name": {"ownerRowKey": 1, "spanLength": 0, "isOwner": False}}},
        },
        {"rowKey": 3, "_button": False, "name": "b", "qty": 30},
    ]


@pytest.fixture()
def store(span_rows, column_model) -> DataStore:
    return DataStore(span_rows, column_model)


@pytest.fixture()
def value_changes() -> list[int]:
    return []


@pytest.fixture()
def row_list(store, column_model, value_changes, tmp_path) -> RowList:
    rows = RowList(
        store,
        column_model,
        value_change=value_changes.append,
        issue_log=SyncIssueLog(tmp_path / "logs"),
    )
    rows.reset(store.as_raw_rows())
    return rows
