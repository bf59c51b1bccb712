from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from gridsync.models.column_model import DEFAULT_CHECKBOX_COLUMN, ColumnDef
from gridsync.models.config_models import GridConfig
from gridsync.models.raw_row import ROW_KEY, RawRow

"""Grid config loader.

Responsibilities:
- Load the YAML grid config (default ``config/grid.yml``)
- Validate it against ``grid_config_schema.json``
- Apply defaults (row_span=true, checkbox_column=_button, issue_log_dir=logs)
- Load raw row fixtures (YAML/JSON list of RawRow mappings) for the CLI
"""

SCHEMA_PATH = Path(__file__).parent / "grid_config_schema.json"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: Any) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails validation (missing keys, wrong types, unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _read_yaml(path: Path) -> Any:
    if not path.exists():
        raise ConfigError(f"file not found: {path}")
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e


def load_config(path: Path) -> GridConfig:
    data = _read_yaml(path) or {}
    _validate_config_schema(data)

    columns = tuple(
        ColumnDef(
            column_name=c["name"],
            title=c.get("title", ""),
            is_hidden=c.get("hidden", False),
            is_editable=c.get("editable", False),
            class_name=c.get("class_name"),
        )
        for c in data["columns"]
    )
    names = [c.column_name for c in columns]
    duplicated = sorted({n for n in names if names.count(n) > 1})
    if duplicated:
        raise ConfigError(f"config validation failed: duplicate column names {duplicated}")

    return GridConfig(
        columns=columns,
        row_span_enabled=data.get("row_span", True),
        checkbox_column=data.get("checkbox_column", DEFAULT_CHECKBOX_COLUMN),
        issue_log_dir=data.get("issue_log_dir", "logs"),
    )


def load_rows(path: Path) -> list[RawRow]:
    """Load raw rows from a YAML (or JSON) file holding a list of mappings.

    Every row must carry a ``rowKey``.
    """
    data = _read_yaml(path)
    if data is None:
        return []
    if not isinstance(data, list):
        raise ConfigError(f"rows file must contain a list, got {type(data).__name__}")
    rows: list[dict[str, Any]] = []
    for i, row in enumerate(data):
        if not isinstance(row, dict):
            raise ConfigError(f"row #{i} must be a mapping, got {type(row).__name__}")
        if ROW_KEY not in row:
            raise ConfigError(f"row #{i} has no rowKey")
        rows.append(row)
    return rows
