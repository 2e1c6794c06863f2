from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from .utils.io import ensure_directory

_MAESTRO_HANDLER: logging.Handler | None = None
_JSON_MODE_NULL_HANDLER_INSTALLED: bool = False

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(level: str = "WARNING", *, log_path: Optional[Path] = None) -> None:
    """Install the Maestro handler on the root logger.

    Logs go to ``log_path`` when given, otherwise to stderr. Calling again
    replaces the previously installed handler.
    """
    global _MAESTRO_HANDLER

    root = logging.getLogger()
    root.setLevel(_level_from_name(level))

    if _MAESTRO_HANDLER is not None:
        root.removeHandler(_MAESTRO_HANDLER)
        _MAESTRO_HANDLER.close()
        _MAESTRO_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        resolved = Path(log_path).resolve()
        ensure_directory(resolved.parent)
        handler = logging.FileHandler(resolved, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    _MAESTRO_HANDLER = handler


def suppress_lastresort_in_json_mode() -> None:
    """Keep stdlib logging's lastResort handler from writing to stderr.

    With ``--json`` the CLI output must stay machine-readable, so the root
    logger gets a NullHandler when it otherwise has none.
    """
    global _JSON_MODE_NULL_HANDLER_INSTALLED

    root = logging.getLogger()
    if root.handlers or _JSON_MODE_NULL_HANDLER_INSTALLED:
        return
    root.addHandler(logging.NullHandler())
    _JSON_MODE_NULL_HANDLER_INSTALLED = True


def reset_logging_for_tests() -> None:
    """Test-only: remove handlers installed by this module."""
    global _MAESTRO_HANDLER, _JSON_MODE_NULL_HANDLER_INSTALLED
    root = logging.getLogger()
    if _MAESTRO_HANDLER is not None:
        root.removeHandler(_MAESTRO_HANDLER)
        _MAESTRO_HANDLER.close()
    for h in list(root.handlers):
        if isinstance(h, logging.NullHandler):
            root.removeHandler(h)
    _MAESTRO_HANDLER = None
    _JSON_MODE_NULL_HANDLER_INSTALLED = False


__all__ = ["configure_logging", "reset_logging_for_tests", "suppress_lastresort_in_json_mode"]
