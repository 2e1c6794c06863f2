"""Transitive closure over the alias require graph.

The traversal is a depth-first search from each seed in seed order. Require
entries are visited in declared order and each alias is recorded after all of
its requirements (post-order), so dependencies always precede dependents:

    A requires [B], B requires []   ->   [B, A]

Revisiting an alias that is still on the active path raises
:class:`CycleDetectedError` with the offending path.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Set, Tuple

from .aliases import Alias, resolve_ref
from .exceptions import CycleDetectedError, MissingAliasError
from .profiles import ProfileStack

logger = logging.getLogger(__name__)


class AliasGraph:
    """Adjacency view of an alias map for one resolution.

    Edges are resolved against ``profiles`` lazily and memoized for the
    lifetime of the graph, which never outlives a single resolution.
    """

    def __init__(self, aliases: Mapping[str, Alias], profiles: ProfileStack) -> None:
        self.aliases = aliases
        self.profiles = profiles
        self._edges: Dict[str, Tuple[str, ...]] = {}

    def __contains__(self, alias_id: object) -> bool:
        return alias_id in self.aliases

    def node(self, alias_id: str, *, referenced_by: Optional[str] = None) -> Alias:
        try:
            return self.aliases[alias_id]
        except KeyError:
            raise MissingAliasError(alias_id, referenced_by=referenced_by) from None

    def edges(self, alias_id: str) -> Tuple[str, ...]:
        """Return the resolved require targets of ``alias_id`` in declared order."""
        cached = self._edges.get(alias_id)
        if cached is not None:
            return cached
        alias = self.node(alias_id)
        targets = tuple(resolve_ref(ref, self.profiles, owner=alias_id) for ref in alias.require)
        self._edges[alias_id] = targets
        return targets


def dedupe_ids(alias_ids: Iterable[str]) -> Tuple[str, ...]:
    """Deduplicate ids while keeping first occurrences in order."""
    seen: Set[str] = set()
    out: List[str] = []
    for alias_id in alias_ids:
        if alias_id in seen:
            continue
        seen.add(alias_id)
        out.append(alias_id)
    return tuple(out)


def search_closure(
    seeds: Iterable[str],
    aliases: Mapping[str, Alias],
    profiles: ProfileStack,
) -> Tuple[str, ...]:
    """Return the post-ordered transitive closure of ``seeds``.

    Args:
        seeds: Requested alias ids, in request order.
        aliases: Full alias map.
        profiles: Active profile stack used to resolve profile references.

    Returns:
        Duplicate-free tuple of alias ids, dependencies before dependents.

    Raises:
        MissingAliasError: A seed or a require target is not defined.
        ProfileMismatchError: A profile reference cannot be resolved.
        CycleDetectedError: The graph reachable from ``seeds`` has a cycle.
    """
    seed_ids = dedupe_ids(seeds)
    graph = AliasGraph(aliases, profiles)

    # Seeds are validated up front so a bad request fails before any traversal.
    for seed in seed_ids:
        graph.node(seed)

    order: List[str] = []
    visited: Set[str] = set()
    path: List[str] = []
    on_path: Set[str] = set()

    for seed in seed_ids:
        if seed in visited:
            continue
        path.append(seed)
        on_path.add(seed)
        stack: List[Tuple[str, Iterator[str]]] = [(seed, iter(graph.edges(seed)))]
        while stack:
            alias_id, targets = stack[-1]
            target = next(targets, None)
            if target is None:
                stack.pop()
                path.pop()
                on_path.discard(alias_id)
                visited.add(alias_id)
                order.append(alias_id)
                continue
            graph.node(target, referenced_by=alias_id)
            if target in on_path:
                start = path.index(target)
                raise CycleDetectedError([*path[start:], target])
            if target in visited:
                continue
            path.append(target)
            on_path.add(target)
            stack.append((target, iter(graph.edges(target))))

    logger.debug("Closure of %s under %s: %s", list(seed_ids), list(profiles), order)
    return tuple(order)


__all__ = ["AliasGraph", "dedupe_ids", "search_closure"]
