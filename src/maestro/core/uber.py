"""Generate one deps file merging everything an alias requires.

Mostly useful for development tooling that needs a single flat view of the
dependencies and paths of a group of aliases:

- Declare an alias with a ``root``, requiring other aliases
- Run ``maestro uber <alias>``
- ``<root>/deps.yaml`` now lists the merged ``deps`` and ``paths``
- Files found in paths outside ``root`` are hard-linked under
  ``<root>/maestro/uber`` so the generated file never points outside its root
"""
from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .basis import Basis
from .config_file import MaestroConfig
from .exceptions import MissingAliasError, MissingRootError
from .resolve import ResolveRequest, resolve
from .utils.io import dump_yaml_string, ensure_directory, write_text

logger = logging.getLogger(__name__)

UBER_DIRECTORY = "maestro/uber"
DEPS_FILE = "deps.yaml"


@dataclass
class UberResult:
    basis: Basis
    deps_file: Path
    links: List[Path] = field(default_factory=list)


def _within(path: Path, parent: Path) -> bool:
    return path == parent or parent in path.parents


def _absolute(path: str, base_dir: Path) -> Path:
    p = Path(path)
    return (p if p.is_absolute() else base_dir / p).resolve()


def _link_name(path: str, base_dir: Path) -> str:
    """Name of ``path`` once re-based under the uber directory."""
    absolute = _absolute(path, base_dir)
    try:
        return absolute.relative_to(base_dir.resolve()).as_posix()
    except ValueError:
        return absolute.as_posix().lstrip("/")


def rebase_paths(paths: Sequence[str], root: Path, base_dir: Path, uber_dir: str) -> List[str]:
    """Express merged paths relative to ``root``.

    Paths inside ``root`` become relative to it; others are re-based under
    ``uber_dir`` where their files are hard-linked.
    """
    out: List[str] = []
    for path in paths:
        absolute = _absolute(path, base_dir)
        if _within(absolute, root):
            out.append(absolute.relative_to(root).as_posix() or ".")
        else:
            out.append(f"{uber_dir}/{_link_name(path, base_dir)}")
    return sorted(out)


def render_deps_file(basis: Basis, deps: Dict[str, Any], paths: List[str]) -> str:
    header = [
        "# This file has been generated by Maestro.",
        "#",
        "# It merges dependencies and paths from a collection of aliases:",
        "#",
        *[f"#     {alias}" for alias in sorted(basis.require)],
        "#",
        "# All files found in paths outside this directory are hard links to",
        "# files elsewhere in the repository.",
        "#",
        "# This is meant for development only and should not be checked into",
        "# version control.",
        "",
    ]
    return "\n".join(header) + dump_yaml_string({"deps": deps, "paths": paths})


def delete_old_links(uber_root: Path) -> None:
    if uber_root.exists():
        logger.info("Deleting previously generated hard links: %s", uber_root)
        shutil.rmtree(uber_root)


def create_links(paths: Sequence[str], root: Path, base_dir: Path, uber_root: Path) -> List[Path]:
    """Hard-link every file found in ``paths`` outside ``root`` under ``uber_root``."""
    links: List[Path] = []
    for path in sorted(paths):
        source_dir = _absolute(path, base_dir)
        if _within(source_dir, root) or not source_dir.exists():
            continue
        candidates = [source_dir] if source_dir.is_file() else sorted(source_dir.rglob("*"))
        for source in candidates:
            if source.is_dir() or _within(source, root):
                continue
            link = uber_root / _link_name(path, base_dir)
            if source != source_dir:
                link = link / source.relative_to(source_dir)
            ensure_directory(link.parent)
            logger.info("Hard link %s -> %s", link, source)
            os.link(source, link)
            links.append(link)
    return links


def generate_uber(
    config: MaestroConfig,
    alias: str,
    *,
    profiles: Sequence[str] = ("release",),
    user_profiles: Sequence[str] = (),
    uber_dir: str = UBER_DIRECTORY,
    deps_file: str = DEPS_FILE,
) -> UberResult:
    """Merge everything ``alias`` requires into ``<root>/<deps_file>``.

    ``profiles`` are appended after ``user_profiles``, so profiles activated
    by the caller take precedence and ``profiles`` act as the fallback
    variant choice.

    Raises:
        MissingAliasError: ``alias`` is not defined.
        MissingRootError: ``alias`` declares no ``root``.
    """
    data = config.aliases.get(alias)
    if data is None:
        raise MissingAliasError(alias)
    if not data.root:
        raise MissingRootError(alias)

    request = ResolveRequest([alias], user_profiles).append_profiles(*profiles)
    basis = resolve(config, request)

    base_dir = config.base_dir
    root = _absolute(data.root, base_dir)
    paths = sorted(basis.paths)
    rebased = rebase_paths(paths, root, base_dir, uber_dir)

    target = root / deps_file
    logger.info("Writing merged deps file: %s", target)
    write_text(target, render_deps_file(basis, dict(basis.deps), rebased))

    uber_root = root / uber_dir
    delete_old_links(uber_root)
    links = create_links(paths, root, base_dir, uber_root)
    return UberResult(basis=basis, deps_file=target, links=links)


__all__ = ["UberResult", "create_links", "generate_uber", "rebase_paths", "render_deps_file"]
