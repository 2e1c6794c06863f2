"""Shared CLI utility functions.

Everything that reads the environment or command-line state lives here so the
core resolution functions receive explicit parameters only.
"""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from maestro.core.config_file import MaestroConfig, load_config
from maestro.core.settings import SettingsManager
from maestro.core.utils.paths import DEFAULT_CONFIG_FILE, resolve_project_root


def parse_list(raw: Optional[List[str]]) -> List[str]:
    """Flatten repeated and comma-separated values, dropping blanks."""
    out: List[str] = []
    for item in raw or []:
        for part in str(item).split(","):
            p = part.strip()
            if p:
                out.append(p)
    return out


def get_project_root(args: argparse.Namespace) -> Path:
    """Get project root from args or auto-detect."""
    explicit = getattr(args, "root", None)
    config = getattr(args, "config", None)
    if not explicit and config:
        return Path(config).expanduser().resolve().parent
    return resolve_project_root(Path(explicit) if explicit else None)


def load_settings(args: argparse.Namespace) -> Dict[str, Any]:
    """Return the ``maestro`` settings section for the current project."""
    try:
        root: Optional[Path] = get_project_root(args)
    except FileNotFoundError:
        root = None
    return SettingsManager(root).load().get("maestro", {}) or {}


def load_project(args: argparse.Namespace) -> Tuple[Dict[str, Any], MaestroConfig]:
    """Load settings and the configuration file selected by ``args``."""
    settings = load_settings(args)
    config_path = getattr(args, "config", None)
    if config_path:
        path = Path(config_path).expanduser()
    else:
        path = get_project_root(args) / str(settings.get("configFile") or DEFAULT_CONFIG_FILE)
    return settings, load_config(path)


__all__ = ["get_project_root", "load_project", "load_settings", "parse_list"]
