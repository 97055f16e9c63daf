"""
Atomic-write persistence layer for docbundler.

Provides reliable file I/O with fsync so the manifest is never left
half-written if a build is interrupted while saving.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def atomic_write_with_fsync(path: Path, content: str) -> None:
    """
    Write content to a file atomically with fsync for durability.

    Content goes to a temporary file in the same directory, is flushed and
    fsynced, then renamed over the target.

    Args:
        path: Target file path
        content: Content to write to the file

    Raises:
        OSError: If the write operation fails
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Same directory, so the rename stays on one filesystem
    fd, temp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp"
    )

    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, path)

        if hasattr(os, "O_DIRECTORY"):
            dir_fd = os.open(path.parent, os.O_RDONLY | os.O_DIRECTORY)
            try:
                os.fsync(dir_fd)
            finally:
                os.close(dir_fd)

    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


def write_json(path: Path, data: Any) -> None:
    """Write compact JSON, the format of every generated docs file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


def read_json(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)
