"""Project root resolution.

Resolution priority:
1. Explicit root given by the caller (``--root``)
2. ``MAESTRO_PROJECT_ROOT`` environment variable
3. Nearest ancestor of the current directory holding the configuration file
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from ..exceptions import MaestroError

PROJECT_ROOT_ENV = "MAESTRO_PROJECT_ROOT"
DEFAULT_CONFIG_FILE = "maestro.yaml"


class MaestroPathError(MaestroError, FileNotFoundError):
    """Raised when the project root cannot be resolved."""

    def __init__(self, message: str = "") -> None:
        MaestroError.__init__(self, message)
        FileNotFoundError.__init__(self, message)

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


def resolve_project_root(
    explicit: Optional[Path] = None,
    *,
    config_file: str = DEFAULT_CONFIG_FILE,
    start: Optional[Path] = None,
) -> Path:
    """Return the absolute project root.

    Raises:
        MaestroPathError: If an explicit/env root is missing or no ancestor
            holds ``config_file``.
    """
    if explicit is not None:
        root = Path(explicit).expanduser().resolve()
        if not root.is_dir():
            raise MaestroPathError(f"Project root does not exist: {root}")
        return root

    env_root = os.environ.get(PROJECT_ROOT_ENV)
    if env_root:
        root = Path(env_root).expanduser().resolve()
        if not root.is_dir():
            raise MaestroPathError(f"{PROJECT_ROOT_ENV} points at missing path: {root}")
        return root

    cwd = (start or Path.cwd()).resolve()
    for candidate in (cwd, *cwd.parents):
        if (candidate / config_file).is_file():
            return candidate
    raise MaestroPathError(
        f"No {config_file} found in {cwd} or its parents; "
        f"pass --root or set {PROJECT_ROOT_ENV}."
    )


__all__ = ["DEFAULT_CONFIG_FILE", "MaestroPathError", "PROJECT_ROOT_ENV", "resolve_project_root"]
