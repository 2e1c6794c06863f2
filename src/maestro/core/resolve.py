"""Resolution entry point.

Every consumer goes through :func:`resolve` (or :func:`resolve_file`) with an
explicit :class:`ResolveRequest`; nothing here reads the environment or the
command line.

Example:
    >>> config = load_config(Path("maestro.yaml"))
    >>> basis = resolve(config, ResolveRequest(aliases=["module/app"], profiles=["release"]))
    >>> basis.require
    ('module/util', 'module/app')
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Optional, Tuple

from .basis import Basis, merge_contributions
from .closure import dedupe_ids, search_closure
from .config_file import MaestroConfig, load_config
from .profiles import ProfileStack

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolveRequest:
    """Parameters of one resolution."""

    aliases: Tuple[str, ...] = ()
    profiles: ProfileStack = field(default_factory=ProfileStack)
    root: Optional[str] = None

    def __post_init__(self) -> None:
        # Accept any iterable of ids / profile names.
        object.__setattr__(self, "aliases", dedupe_ids(str(a) for a in self.aliases))
        object.__setattr__(self, "profiles", ProfileStack.coerce(self.profiles))

    def append_aliases(self, *aliases: str) -> "ResolveRequest":
        return ResolveRequest([*self.aliases, *aliases], self.profiles, self.root)

    def append_profiles(self, *profiles: str) -> "ResolveRequest":
        return ResolveRequest(self.aliases, self.profiles.append(*profiles), self.root)

    def prepend_profiles(self, *profiles: str) -> "ResolveRequest":
        return ResolveRequest(self.aliases, self.profiles.prepend(*profiles), self.root)


def resolve(config: MaestroConfig, request: ResolveRequest) -> Basis:
    """Resolve ``request`` against a loaded configuration.

    Raises:
        MissingAliasError, ProfileMismatchError, CycleDetectedError: The
            resolution is aborted; no partial basis is returned.
    """
    logger.debug("Resolving %s with profiles %s", list(request.aliases), list(request.profiles))
    require = search_closure(request.aliases, config.aliases, request.profiles)
    deps, paths = merge_contributions(require, config.aliases)
    return Basis(
        requested=request.aliases,
        require=require,
        aliases=MappingProxyType(config.aliases),
        deps=MappingProxyType(deps),
        paths=paths,
        profiles=request.profiles,
        root=request.root,
    )


def resolve_file(path: Path, request: ResolveRequest) -> Basis:
    """Load the configuration at ``path`` and resolve ``request`` against it."""
    return resolve(load_config(path), request)


__all__ = ["ResolveRequest", "resolve", "resolve_file"]
