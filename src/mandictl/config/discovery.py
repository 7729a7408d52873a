"""Config file discovery.

Walk-up finder locates mandictl.toml, similar to how git finds .git/.
The MANDICTL_CONFIG env var and the --config CLI flag override it.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "mandictl.toml"
CONFIG_ENV_VAR = "MANDICTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for mandictl.toml.

    Checks MANDICTL_CONFIG first. Returns None if nothing is found.
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
        parent = current.parent
        if parent == current:
            return None
        current = parent
