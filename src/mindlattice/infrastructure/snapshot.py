"""Snapshot files — the serializer's JSON document on disk.

File I/O only; shape validation belongs to
:func:`mindlattice.lattice.serializer.parse_payload`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from mindlattice.domain.errors import InvalidArgumentError, NotFoundError

logger = logging.getLogger(__name__)


def read_snapshot(path: Path) -> Any:
    """Decode the JSON document at *path*.

    Raises:
        NotFoundError: *path* does not exist.
        InvalidArgumentError: The file is not valid JSON.
    """
    if not path.is_file():
        msg = f"Snapshot file not found: {path}"
        raise NotFoundError(msg, path=str(path))
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        msg = f"Snapshot file is not valid JSON: {path}: {exc}"
        raise InvalidArgumentError(msg, path=str(path)) from exc


def write_snapshot(path: Path, content: str) -> Path:
    """Write serialized *content* to *path*, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    text = content if content.endswith("\n") else content + "\n"
    path.write_text(text, encoding="utf-8")
    logger.debug("Wrote snapshot to %s", path)
    return path
