"""Blocking file producer shared by the terminal and Qt views."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from ..core.cancellation import CancellationToken

PREVIEW_LINES = 10


@dataclass(frozen=True)
class FileSnapshot:
    path: Path
    size: int
    modified: float
    line_count: int
    preview: Tuple[str, ...]


def read_file_snapshot(path: Path, token: CancellationToken) -> FileSnapshot:
    """Read ``path`` and summarize it. Runs in a worker thread."""
    token.throw_if_cancellation_requested()
    stat = path.stat()
    text = path.read_text(encoding="utf-8", errors="replace")
    token.throw_if_cancellation_requested()
    lines = text.splitlines()
    return FileSnapshot(
        path=path,
        size=stat.st_size,
        modified=stat.st_mtime,
        line_count=len(lines),
        preview=tuple(lines[:PREVIEW_LINES]),
    )


__all__ = ["FileSnapshot", "read_file_snapshot", "PREVIEW_LINES"]
