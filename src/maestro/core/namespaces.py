"""Discover and import the Python modules found in alias paths.

Scanning is driven by a resolved basis: only the ``extraPaths`` of the aliases
in ``basis.require`` are searched, so the result follows the active profiles.

Example:
    >>> basis = resolve(config, ResolveRequest(["module/app"]))
    >>> basis_modules(basis, config.base_dir)
    ['app', 'app.main', 'util', 'util.core']
"""
from __future__ import annotations

import importlib
import logging
import pkgutil
import sys
from pathlib import Path
from types import ModuleType
from typing import Callable, Iterable, List, Optional

from .basis import Basis, extra_paths
from .exceptions import MaestroError

logger = logging.getLogger(__name__)

ModuleFilter = Callable[[str], Optional[str]]


def _walk(directory: Path, prefix: str, found: List[str]) -> None:
    for info in pkgutil.iter_modules([str(directory)], prefix):
        found.append(info.name)
        if info.ispkg:
            _walk(directory / info.name.rsplit(".", 1)[-1], f"{info.name}.", found)


def find_modules(paths: Iterable[str], base_dir: Optional[Path] = None) -> List[str]:
    """Return the dotted names of every module and package under ``paths``.

    Relative paths are taken from ``base_dir`` (the current directory when
    omitted). Nothing is imported; missing paths are skipped.
    """
    base = Path(base_dir) if base_dir is not None else Path.cwd()
    found: List[str] = []
    for path in sorted(set(paths)):
        directory = Path(path)
        if not directory.is_absolute():
            directory = base / directory
        if not directory.is_dir():
            logger.debug("Skipping missing module path: %s", directory)
            continue
        _walk(directory, "", found)
    return sorted(set(found))


def basis_modules(basis: Basis, base_dir: Optional[Path] = None) -> List[str]:
    """Return the modules found in the paths of every alias of ``basis.require``."""
    return find_modules(extra_paths(basis.aliases, basis.require), base_dir)


def require_found(
    modules: Iterable[str],
    select: Optional[ModuleFilter] = None,
    *,
    paths: Iterable[str] = (),
) -> List[ModuleType]:
    """Import the modules kept by ``select``, one by one in sorted order.

    ``select`` receives a module name and returns the name to import, or
    ``None`` to skip it. Directories in ``paths`` are added to ``sys.path``
    when missing so the modules can be imported.

    Raises:
        MaestroError: A selected module cannot be imported.
    """
    for path in paths:
        if path not in sys.path:
            sys.path.append(path)
    importlib.invalidate_caches()

    chosen = (select(name) if select is not None else name for name in modules)
    imported: List[ModuleType] = []
    for name in sorted(n for n in chosen if n):
        logger.info("Importing %s", name)
        try:
            imported.append(importlib.import_module(name))
        except ImportError as exc:
            raise MaestroError(f"Cannot import {name}: {exc}", context={"module": name}) from exc
    return imported


__all__ = ["ModuleFilter", "basis_modules", "find_modules", "require_found"]
