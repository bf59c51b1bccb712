from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from gridsync.models.sync_issue import SyncIssue

"""Sync issue buffering module.

- JSON Lines, fixed key set (see SyncIssue)
- One file per process run: ``<log_dir>/sync-issues-YYYYMMDD-HHMMSS.log`` (UTC)
- Records are buffered in memory and written on ``flush()``
"""

__all__ = [
    "SyncIssue",
    "SyncIssueLog",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class SyncIssueLog:
    """In-memory buffer for sync issues. Flush appends JSON Lines.

    The file path is fixed on first access. Not thread safe; the sync engine is
    single threaded.
    """
    def __init__(self, log_dir: Path | str | None = None) -> None:
        self._records: list[SyncIssue] = []
        self._log_dir = Path(log_dir) if log_dir is not None else LOGS_DIR
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._log_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._log_dir / f"sync-issues-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> tuple[SyncIssue, ...]:
        return tuple(self._records)

    def append(self, record: SyncIssue) -> None:
        self._records.append(record)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records to the log file and clear the buffer.

        Returns:
            The file written to, or None when there was nothing to write
        """
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
