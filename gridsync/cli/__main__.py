from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from gridsync.config.loader import ConfigError, load_config, load_rows
from gridsync.logging.init import log_summary, setup_logging
from gridsync.logging.issue_log import SyncIssueLog
from gridsync.models.raw_row import ROW_KEY
from gridsync.models.row_state import RowStateFlag
from gridsync.services.cell_projector import ProjectionError
from gridsync.services.snapshot import SyncStats, cells_to_frame, render_summary_line
from gridsync.services.span_registry import expand_row_spans
from gridsync.store.data_store import DataStore, DuplicateRowKeyError, UnknownRowError
from gridsync.view.row_list import RowList

"""CLI entrypoint: load a grid, replay edits, print the resulting cells.

Flow:
- Load ``.env`` (GRIDSYNC_CONFIG may point at the grid config)
- Load grid config + raw rows, expand declared row spans
- Build DataStore + RowList, apply ``--set`` / ``--state`` edits through the store
- Print the cell snapshot and the SUMMARY line, flush sync issues if any
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_SYNC_ISSUES = 2

DEFAULT_CONFIG_PATH = "config/grid.yml"
NO_STATE = "NONE"


def _load_env_file(path: Path, override: bool = False) -> None:
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="gridsync", description="Grid row/cell sync inspector")
    p.add_argument("--config", help=f"Grid config YAML (default: $GRIDSYNC_CONFIG or {DEFAULT_CONFIG_PATH})")
    p.add_argument("--rows", required=True, help="YAML/JSON list of raw rows")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--set", dest="sets", action="append", default=[], metavar="ROWKEY:COLUMN=VALUE",
        help="Set a cell value through the backing store (repeatable)",
    )
    p.add_argument(
        "--state", dest="states", action="append", default=[], metavar="ROWKEY=STATE",
        help="Set a row state: DISABLED, DISABLED_CHECK, CHECKED or NONE (repeatable)",
    )
    return p.parse_args(argv)


def _scalar(text: str) -> Any:
    # YAML scalars: "3" -> 3, "true" -> True, "abc" -> "abc"
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return text


def parse_set_arg(text: str) -> tuple[Any, str, Any]:
    """Parse ``ROWKEY:COLUMN=VALUE``."""
    target, sep, value = text.partition("=")
    row_key, sep2, column = target.partition(":")
    if not sep or not sep2 or not row_key or not column:
        raise ValueError(f"invalid --set {text!r}, expected ROWKEY:COLUMN=VALUE")
    if column == ROW_KEY:
        raise ValueError(f"invalid --set {text!r}, {ROW_KEY} cannot be changed")
    return _scalar(row_key), column, _scalar(value)


def parse_state_arg(text: str) -> tuple[Any, RowStateFlag | None]:
    """Parse ``ROWKEY=STATE``."""
    row_key, sep, state = text.partition("=")
    if not sep or not row_key or not state:
        raise ValueError(f"invalid --state {text!r}, expected ROWKEY=STATE")
    state = state.strip().upper()
    if state == NO_STATE:
        return _scalar(row_key), None
    try:
        return _scalar(row_key), RowStateFlag(state)
    except ValueError:
        raise ValueError(f"invalid row state {state!r}") from None


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only None reads sys.argv; an empty list means "no arguments"
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        for h in logger.handlers:
            h.setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
        logger.debug("debug mode enabled")

    config_path = Path(args.config or os.getenv("GRIDSYNC_CONFIG") or DEFAULT_CONFIG_PATH)
    try:
        cfg = load_config(config_path)
        raw_rows = load_rows(Path(args.rows))
        sets = [parse_set_arg(s) for s in args.sets]
        states = [parse_state_arg(s) for s in args.states]
    except (ConfigError, ValueError) as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    expand_row_spans(raw_rows)
    column_model = cfg.column_model()
    value_changes: list[int] = []
    cell_updates: list[tuple[Any, str, tuple[str, ...]]] = []
    try:
        store = DataStore(
            raw_rows,
            column_model,
            row_span_enabled=cfg.row_span_enabled,
            checkbox_column=cfg.checkbox_column,
        )
        rows = RowList(
            store,
            column_model,
            value_change=value_changes.append,
            checkbox_column=cfg.checkbox_column,
            issue_log=SyncIssueLog(cfg.issue_log_dir),
        )
        rows.add_cell_listener(lambda row, column, changed: cell_updates.append((row.row_key, column, changed)))
        rows.reset(store.as_raw_rows())
        logger.info(f"loaded rows={len(rows)} columns={len(column_model)} from {args.rows}")

        for row_key, column, value in sets:
            store.set_value(row_key, column, value)
        for row_key, state in states:
            store.set_row_state(row_key, state)
    except (DuplicateRowKeyError, ProjectionError) as e:
        logger.error(f"rows: {e}")
        return EXIT_FATAL
    except UnknownRowError as e:
        logger.error(f"edit: unknown row {e.args[0]!r}")
        return EXIT_FATAL

    frame = cells_to_frame(rows, columns=[c.column_name for c in column_model.get_visible_column_model_list()])
    print(frame.to_string(index=False))

    issue_count = len(rows.issue_log)
    if issue_count:
        path = rows.issue_log.flush()
        logger.warning(f"{issue_count} sync issue(s) written to {path}")

    stats = SyncStats(
        rows=len(rows),
        cells=len(frame),
        value_changes=len(value_changes),
        cell_updates=len(cell_updates),
        issues=issue_count,
    )
    # log_summary adds the "SUMMARY " prefix itself
    log_summary(render_summary_line(stats)[len("SUMMARY "):])

    return EXIT_SYNC_ISSUES if issue_count else EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
