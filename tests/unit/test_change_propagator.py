from __future__ import annotations

from unittest.mock import MagicMock, call, patch

from gridsync.models.cell import CellPatch
from gridsync.models.protocols import RowSubscriber
from gridsync.services.change_propagator import ChangePropagator


def test_change_propagator_is_row_subscriber():
    assert isinstance(ChangePropagator(MagicMock()), RowSubscriber)


def test_on_row_changed_routes_values_to_cell_mutator():
    row = MagicMock()
    row.data_store.get.return_value = None
    propagator = ChangePropagator(row)

    with patch("gridsync.services.change_propagator.set_cell") as mock_set_cell, \
         patch("gridsync.services.change_propagator.sync_row_state") as mock_sync:
        propagator.on_row_changed({"name": "b", "qty": None})

    assert mock_set_cell.call_args_list == [
        call(row, "name", CellPatch(value="b")),
        call(row, "qty", CellPatch(value=None)),
    ]
    mock_sync.assert_not_called()


def test_on_row_changed_routes_extra_data_to_sync():
    row = MagicMock()
    row.data_store.get.return_value = None
    propagator = ChangePropagator(row)

    with patch("gridsync.services.change_propagator.set_cell") as mock_set_cell, \
         patch("gridsync.services.change_propagator.sync_row_state") as mock_sync:
        propagator.on_row_changed({"_extraData": {"rowState": "DISABLED"}, "name": "b"})

    mock_sync.assert_called_once_with(row)
    mock_set_cell.assert_called_once_with(row, "name", CellPatch(value="b"))


def test_on_row_changed_applies_current_store_value():
    row = MagicMock()
    row.data_store.get.return_value.get.side_effect = lambda field, default=None: {"name": "newer"}.get(field, default)
    propagator = ChangePropagator(row)

    with patch("gridsync.services.change_propagator.set_cell") as mock_set_cell:
        propagator.on_row_changed({"name": "stale", "qty": 3})

    assert mock_set_cell.call_args_list == [
        call(row, "name", CellPatch(value="newer")),
        call(row, "qty", CellPatch(value=3)),
    ]


def test_on_extra_data_changed_syncs_row():
    row = MagicMock()

    with patch("gridsync.services.change_propagator.sync_row_state") as mock_sync:
        ChangePropagator(row).on_extra_data_changed()

    mock_sync.assert_called_once_with(row)


def test_store_value_change_reaches_cell(row_list, store, value_changes):
    store.set_value(2, "qty", 21)

    cell = row_list.get(2).get_cell("qty")
    assert cell.value == 21
    assert cell.changed_fields == ("value",)
    assert value_changes == [1]


def test_store_extra_data_swap_reaches_owner(row_list, store):
    extra = store.get(2).to_raw_row()["_extraData"]
    extra["rowState"] = "DISABLED"

    store.set_row(2, {"_extraData": extra})

    assert row_list.get(1).get_cell("name").is_disabled is True
    assert row_list.get(2).get_cell("qty").is_disabled is True


def test_store_restore_replays_original_values(row_list, store, value_changes):
    store.set_value(3, "name", "zzz")
    store.set_row_state(3, "DISABLED")

    store.restore(3)

    cell = row_list.get(3).get_cell("name")
    assert cell.value == "b"
    assert cell.is_disabled is False
    assert value_changes == [2, 2]
