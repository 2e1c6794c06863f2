"""Active profile stack.

Profiles bias which variant an alias reference resolves to. The stack is
scanned front to back: the profile at index 0 has the highest precedence.

- ``append`` adds lower-precedence profiles (names already present are skipped).
- ``prepend`` adds highest-precedence profiles (a name already present moves
  to the front).

Example:
    >>> stack = ProfileStack.of("release").prepend("dev")
    >>> stack.names
    ('dev', 'release')
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple


def _dedupe(names: Iterable[str]) -> Tuple[str, ...]:
    seen: set[str] = set()
    out: list[str] = []
    for name in names:
        name = str(name).strip()
        if not name or name in seen:
            continue
        seen.add(name)
        out.append(name)
    return tuple(out)


@dataclass(frozen=True)
class ProfileStack:
    """Ordered, duplicate-free sequence of active profile names."""

    names: Tuple[str, ...] = ()

    @classmethod
    def of(cls, *names: str) -> "ProfileStack":
        return cls(_dedupe(names))

    @classmethod
    def coerce(cls, value: "ProfileStack | Iterable[str] | None") -> "ProfileStack":
        if value is None:
            return cls()
        if isinstance(value, ProfileStack):
            return value
        if isinstance(value, str):
            return cls.of(value)
        return cls(_dedupe(value))

    def append(self, *names: str) -> "ProfileStack":
        """Return a new stack with ``names`` added after existing entries."""
        return ProfileStack(_dedupe([*self.names, *names]))

    def prepend(self, *names: str) -> "ProfileStack":
        """Return a new stack with ``names`` placed before existing entries."""
        return ProfileStack(_dedupe([*names, *self.names]))

    def first_match(self, candidates: Iterable[str]) -> str | None:
        """Return the highest-precedence profile present in ``candidates``."""
        keys = set(candidates)
        for name in self.names:
            if name in keys:
                return name
        return None

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self.names


__all__ = ["ProfileStack"]
