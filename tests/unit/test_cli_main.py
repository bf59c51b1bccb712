from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

import gridsync.logging.init
from gridsync.cli.__main__ import (
    EXIT_FATAL,
    EXIT_SUCCESS,
    EXIT_SYNC_ISSUES,
    main as cli_main,
    parse_set_arg,
    parse_state_arg,
)
from gridsync.models.row_state import RowStateFlag


@pytest.fixture(autouse=True)
def _fresh_logger():
    # bind the stdout handler to the stream captured for this test
    gridsync.logging.init.reset_logging()
    yield
    gridsync.logging.init.reset_logging()


def test_cli_success(write_config: Path, write_rows: Path, capsys):
    code = cli_main(["--config", str(write_config), "--rows", str(write_rows)])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    assert "INFO loaded rows=3 columns=4" in out
    assert "SUMMARY rows=3 cells=9 value_changes=0 cell_updates=0 issues=0" in out


def test_cli_applies_edits(write_config: Path, write_rows: Path, capsys):
    code = cli_main([
        "--config", str(write_config),
        "--rows", str(write_rows),
        "--set", "2:qty=21",
        "--state", "2=disabled",
    ])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    assert "SUMMARY rows=3 cells=9 value_changes=1 cell_updates=4 issues=0" in out


def test_cli_config_from_environment(write_config: Path, write_rows: Path, monkeypatch, capsys):
    monkeypatch.setenv("GRIDSYNC_CONFIG", str(write_config))
    with patch("gridsync.cli.__main__.load_dotenv") as mock_load:
        (Path.cwd() / ".env").write_text("GRIDSYNC_CONFIG=ignored.yml\n", encoding="utf-8")
        code = cli_main(["--rows", str(write_rows)])
    assert code == EXIT_SUCCESS
    mock_load.assert_called_once()
    assert mock_load.call_args.kwargs["dotenv_path"] == Path(".env")


def test_cli_missing_config(temp_workdir: Path, write_rows: Path, capsys):
    code = cli_main(["--config", "config/missing.yml", "--rows", str(write_rows)])
    out = capsys.readouterr().out
    assert code == EXIT_FATAL
    assert "ERROR config: file not found" in out


def test_cli_unknown_row_edit(write_config: Path, write_rows: Path, capsys):
    code = cli_main(["--config", str(write_config), "--rows", str(write_rows), "--set", "99:qty=1"])
    out = capsys.readouterr().out
    assert code == EXIT_FATAL
    assert "ERROR edit: unknown row 99" in out


def test_cli_invalid_state(write_config: Path, write_rows: Path, capsys):
    code = cli_main(["--config", str(write_config), "--rows", str(write_rows), "--state", "1=FROZEN"])
    assert code == EXIT_FATAL


def test_cli_duplicate_row_keys(write_config: Path, temp_workdir: Path, capsys):
    rows = temp_workdir / "data" / "dup.yml"
    rows.write_text("- rowKey: 1\n  name: a\n- rowKey: 1\n  name: b\n", encoding="utf-8")
    code = cli_main(["--config", str(write_config), "--rows", str(rows)])
    assert code == EXIT_FATAL
    assert "ERROR rows: duplicate rowKey" in capsys.readouterr().out


def test_cli_dangling_span_reports_issue(write_config: Path, temp_workdir: Path, capsys):
    rows = temp_workdir / "data" / "dangling.yml"
    rows.write_text(
        "- rowKey: 2\n"
        "  name: a\n"
        "  qty: 1\n"
        "  _extraData:\n"
        "    rowSpanData:\n"
        "      name: {ownerRowKey: 9, spanLength: 0, isOwner: false}\n",
        encoding="utf-8",
    )
    code = cli_main(["--config", str(write_config), "--rows", str(rows), "--state", "2=DISABLED"])
    out = capsys.readouterr().out
    assert code == EXIT_SYNC_ISSUES
    assert "issues=1" in out
    written = list((temp_workdir / "logs").glob("sync-issues-*.log"))
    assert len(written) == 1


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1:qty=21", (1, "qty", 21)),
        ("a:name=hello world", ("a", "name", "hello world")),
        ("3:flag=true", (3, "flag", True)),
        ("3:memo=", (3, "memo", None)),
    ],
)
def test_parse_set_arg(text, expected):
    assert parse_set_arg(text) == expected


@pytest.mark.parametrize("text", ["1qty=2", "1:qty", ":qty=1", "1:=2", "1:rowKey=5"])
def test_parse_set_arg_invalid(text):
    with pytest.raises(ValueError):
        parse_set_arg(text)


def test_parse_state_arg():
    assert parse_state_arg("1=checked") == (1, RowStateFlag.CHECKED)
    assert parse_state_arg("x=none") == ("x", None)
    with pytest.raises(ValueError):
        parse_state_arg("1=")


def test_cli_debug_mode(write_config: Path, write_rows: Path, capsys):
    code = cli_main(["--config", str(write_config), "--rows", str(write_rows), "--debug", "--set", "3:qty=31"])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG cell 3/qty changed: value" in out


def test_cli_row_key_edit_is_rejected(write_config: Path, write_rows: Path, capsys):
    code = cli_main(["--config", str(write_config), "--rows", str(write_rows), "--set", "1:rowKey=5"])
    out = capsys.readouterr().out
    assert code == EXIT_FATAL
    assert "ERROR config: invalid --set '1:rowKey=5', rowKey cannot be changed" in out
