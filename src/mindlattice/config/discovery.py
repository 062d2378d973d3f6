"""Config file discovery and loading.

Walk-up finder locates ``mindlattice.toml``, the way git finds ``.git/``.
The ``MINDLATTICE_CONFIG`` env var and the ``--config`` flag override it.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from mindlattice.config.models import MindLatticeConfig

CONFIG_FILENAME = "mindlattice.toml"
CONFIG_ENV_VAR = "MINDLATTICE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for ``mindlattice.toml``.

    Checks ``MINDLATTICE_CONFIG`` first. Returns None if nothing is found.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def load_config(path: Path | None = None, cwd: Path | None = None) -> MindLatticeConfig:
    """Load and validate config from a TOML file, or return defaults."""
    if path is None:
        path = find_config(cwd)
    if path is None:
        return MindLatticeConfig()

    data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    return MindLatticeConfig.model_validate(data)
