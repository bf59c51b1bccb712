from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from gridsync.models.cell import Cell
from gridsync.models.row_state import RowState
from gridsync.services.cell_projector import ProjectionError, project, resolve_cell_state


def _mock_store(row_state: RowState, *, span_enabled: bool = True, editable=("name",), classes=None):
    store_row = MagicMock()
    store_row.get_row_state.return_value = row_state
    store_row.is_editable.side_effect = lambda column: column in editable
    store_row.get_class_name_list.side_effect = lambda column: list((classes or {}).get(column, []))
    store = MagicMock()
    store.get.return_value = store_row
    store.is_row_span_enable.return_value = span_enabled
    return store, store_row


def test_project_builds_cell_per_non_reserved_column():
    store, _ = _mock_store(RowState(), classes={"name": ["b", "a", "b"]})
    raw = {"rowKey": 1, "name": "a", "qty": 3, "_extraData": {}}

    cells = project(raw, store)

    assert list(cells) == ["name", "qty"]
    assert cells["name"] == Cell(
        row_key=1,
        column_name="name",
        value="a",
        span_length=0,
        is_owner=True,
        owner_row_key=1,
        is_editable=True,
        is_disabled=False,
        class_names=("b", "a"),
        option_list=(),
        changed_fields=(),
    )
    assert cells["qty"].is_editable is False
    store.get.assert_called_once_with(1)


def test_project_copies_span_fields():
    store, _ = _mock_store(RowState())
    raw = {
        "rowKey": 2,
        "name": "a",
        "_extraData": {"rowSpanData": {"name": {"ownerRowKey": 1, "spanLength": 0, "isOwner": False}}},
    }

    cell = project(raw, store)["name"]

    assert (cell.is_owner, cell.owner_row_key, cell.span_length) == (False, 1, 0)


def test_project_respects_disabled_row_span():
    store, _ = _mock_store(RowState(), span_enabled=False)
    raw = {
        "rowKey": 2,
        "name": "a",
        "_extraData": {"rowSpanData": {"name": {"ownerRowKey": 1, "spanLength": 0, "isOwner": False}}},
    }

    cell = project(raw, store)["name"]

    assert (cell.is_owner, cell.owner_row_key) == (True, 2)


def test_project_is_idempotent():
    store, _ = _mock_store(RowState(is_disabled=True), classes={"qty": ["numeric"]})
    raw = {
        "rowKey": 1,
        "name": "a",
        "qty": 3,
        "_extraData": {"rowSpanData": {"name": {"ownerRowKey": 1, "spanLength": 2, "isOwner": True}}},
    }

    assert project(raw, store) == project(raw, store)


def test_project_checkbox_column_follows_check_flag():
    store, _ = _mock_store(RowState(is_disabled=True, is_disabled_check_column=False))
    raw = {"rowKey": 1, "_button": True, "name": "a"}

    cells = project(raw, store)

    assert cells["_button"].is_disabled is False
    assert cells["name"].is_disabled is True


def test_project_checkbox_column_check_flag_only():
    store, _ = _mock_store(RowState(is_disabled=False, is_disabled_check_column=True))
    raw = {"rowKey": 1, "chk": True, "name": "a"}

    cells = project(raw, store, checkbox_column="chk")

    assert cells["chk"].is_disabled is True
    assert cells["name"].is_disabled is False


def test_project_unknown_row_raises():
    store = MagicMock()
    store.get.return_value = None

    with pytest.raises(ProjectionError):
        project({"rowKey": 99, "name": "a"}, store)


def test_resolve_cell_state_asks_store_row():
    store_row = MagicMock()
    store_row.is_editable.return_value = 1
    store_row.get_class_name_list.return_value = ["x", "editable"]

    state = resolve_cell_state(store_row, "name", RowState())

    assert state.is_editable is True
    assert state.is_disabled is False
    assert state.class_names == ("x", "editable")
    store_row.is_editable.assert_called_once_with("name")
    store_row.get_class_name_list.assert_called_once_with("name")
