"""The resolved basis and the merge rules that produce it.

Merge rules:
- ``deps``: ``extraDeps`` folded in closure order, later alias wins.
- ``paths``: set union of ``extraPaths``; carries no ordering.
- metadata: never merged implicitly. :func:`merge_alias` materializes one
  alias's own keys onto a derived basis; :func:`metadata` reads a key with
  last-wins semantics across the closure; :func:`collect` concatenates list
  values in closure order.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from .aliases import CORE_KEYS, Alias
from .exceptions import ProgrammingError
from .profiles import ProfileStack

_EMPTY: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class Basis:
    """Result of one resolution.

    Attributes:
        requested: Seed aliases as requested (deduplicated, in order).
        require: Post-ordered closure, seeds included.
        aliases: Full alias map, unresolved references retained.
        deps: Merged dependency coordinates.
        paths: Union of contributed paths.
        profiles: Active profile stack used for the resolution.
        root: Optional root directory.
        extra: Keys materialized by shallow merges.
    """

    requested: Tuple[str, ...]
    require: Tuple[str, ...]
    aliases: Mapping[str, Alias]
    deps: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)
    paths: FrozenSet[str] = frozenset()
    profiles: ProfileStack = field(default_factory=ProfileStack)
    root: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a key materialized onto the basis."""
        return self.extra.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.extra[key]

    def __contains__(self, key: object) -> bool:
        return key in self.extra

    def merge(self, overrides: Mapping[str, Any]) -> "Basis":
        """Return a derived basis with ``overrides`` shallow-merged onto ``extra``.

        ``root`` in ``overrides`` replaces :attr:`root`. The resolved
        ``require`` ordering is never affected.
        """
        extra = dict(self.extra)
        root = self.root
        for key, value in overrides.items():
            if key == "root":
                root = value
                continue
            extra[key] = value
        return replace(self, extra=MappingProxyType(extra), root=root)

    def to_dict(self) -> Dict[str, Any]:
        """Render the basis as plain, deterministically ordered data."""
        return {
            "requested": list(self.requested),
            "require": list(self.require),
            "profiles": list(self.profiles),
            "root": self.root,
            "deps": dict(self.deps),
            "paths": sorted(self.paths),
            "extra": dict(self.extra),
        }


def merge_contributions(
    require: Iterable[str],
    aliases: Mapping[str, Alias],
) -> Tuple[Dict[str, Any], FrozenSet[str]]:
    """Fold ``extraDeps`` and ``extraPaths`` over ``require`` in order."""
    deps: Dict[str, Any] = {}
    paths: set[str] = set()
    for alias_id in require:
        alias = aliases[alias_id]
        deps.update(alias.extra_deps)
        paths.update(alias.extra_paths)
    return deps, frozenset(paths)


def merge_alias(basis: Basis, alias_id: str) -> Basis:
    """Materialize the own keys of ``alias_id`` onto a derived basis.

    Core keys other than ``root`` are left out so the merged result keeps the
    resolved ``require``, ``deps`` and ``paths``.
    """
    alias = basis.aliases.get(alias_id)
    if alias is None:
        raise ProgrammingError(f"Cannot merge unknown alias: {alias_id}", context={"alias": alias_id})
    own: Dict[str, Any] = alias.metadata()
    if alias.root is not None:
        own["root"] = alias.root
    return basis.merge(own)


def extra_paths(aliases: Mapping[str, Alias], alias_ids: Iterable[str]) -> FrozenSet[str]:
    """Return the paths contributed by exactly ``alias_ids``."""
    paths: set[str] = set()
    for alias_id in alias_ids:
        alias = aliases.get(alias_id)
        if alias is None:
            raise ProgrammingError(
                f"Alias missing from alias map during path projection: {alias_id}",
                context={"alias": alias_id},
            )
        paths.update(alias.extra_paths)
    return frozenset(paths)


def collect(basis: Basis, key: str) -> List[Any]:
    """Concatenate list values of ``key`` across ``basis.require`` in order.

    Scalars are appended as single items; aliases without the key are skipped.
    """
    out: List[Any] = []
    for alias_id in basis.require:
        value = basis.aliases[alias_id].get(key)
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            out.extend(value)
        else:
            out.append(value)
    return out


def metadata(basis: Basis, key: str, default: Any = None) -> Any:
    """Return ``key`` with last-wins semantics across the closure.

    A key already materialized onto ``basis.extra`` takes precedence.
    """
    if key in basis.extra:
        return basis.extra[key]
    for alias_id in reversed(basis.require):
        alias = basis.aliases[alias_id]
        if key in alias.data and key not in CORE_KEYS:
            return alias.data[key]
    return default


__all__ = [
    "Basis",
    "collect",
    "extra_paths",
    "merge_alias",
    "merge_contributions",
    "metadata",
]
