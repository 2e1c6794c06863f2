"""Alias definitions and require references.

An alias definition is a mapping loaded from the configuration file. Core keys
are ``root``, ``require``, ``extraDeps`` and ``extraPaths``; every other key is
opaque metadata kept verbatim in :attr:`Alias.data`.

Require entries are either a plain alias id or a mapping from profile name to
alias id with an optional ``default`` entry:

```yaml
require:
  - module/util
  - {default: module/lib, release: release/lib}
```
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple, Union

from .exceptions import ConfigError, ProfileMismatchError
from .profiles import ProfileStack

DEFAULT_PROFILE = "default"

CORE_KEYS = ("root", "require", "extraDeps", "extraPaths")


@dataclass(frozen=True)
class DirectRef:
    """Unconditional reference to another alias."""

    alias: str

    def __str__(self) -> str:
        return self.alias


@dataclass(frozen=True)
class ProfileRef:
    """Reference whose target depends on the active profiles."""

    choices: Tuple[Tuple[str, str], ...]
    default: Optional[str] = None

    def get(self, profile: str) -> Optional[str]:
        for name, alias in self.choices:
            if name == profile:
                return alias
        return None

    def profiles(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.choices)

    def __str__(self) -> str:
        parts = [f"{name}: {alias}" for name, alias in self.choices]
        if self.default is not None:
            parts.append(f"{DEFAULT_PROFILE}: {self.default}")
        return "{" + ", ".join(parts) + "}"


AliasRef = Union[DirectRef, ProfileRef]


def parse_ref(raw: Any, *, owner: str) -> AliasRef:
    """Parse one raw ``require`` entry of alias ``owner``."""
    if isinstance(raw, str):
        if not raw.strip():
            raise ConfigError(f"Alias {owner} has an empty require entry", context={"alias": owner})
        return DirectRef(raw)
    if isinstance(raw, Mapping):
        if not raw:
            raise ConfigError(f"Alias {owner} has an empty profile mapping", context={"alias": owner})
        choices: list[Tuple[str, str]] = []
        default: Optional[str] = None
        for key, value in raw.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise ConfigError(
                    f"Alias {owner}: profile mapping entries must map profile names to alias ids, got {key!r}: {value!r}",
                    context={"alias": owner},
                )
            if key == DEFAULT_PROFILE:
                default = value
            else:
                choices.append((key, value))
        return ProfileRef(tuple(choices), default)
    raise ConfigError(
        f"Alias {owner}: unsupported require entry {raw!r} (expected an alias id or a profile mapping)",
        context={"alias": owner},
    )


def resolve_ref(ref: AliasRef, profiles: ProfileStack, *, owner: str) -> str:
    """Resolve ``ref`` (declared by alias ``owner``) to a concrete alias id.

    Profile mappings are matched against the stack front to back; the first
    active profile present in the mapping wins, then ``default``.

    Raises:
        ProfileMismatchError: No active profile matches and no default exists.
    """
    if isinstance(ref, DirectRef):
        return ref.alias
    profile = profiles.first_match(ref.profiles())
    if profile is not None:
        return dict(ref.choices)[profile]
    if ref.default is not None:
        return ref.default
    raise ProfileMismatchError(owner, ref, profiles.names)


@dataclass(frozen=True)
class Alias:
    """One named configuration fragment."""

    id: str
    root: Optional[str] = None
    require: Tuple[AliasRef, ...] = ()
    extra_deps: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    extra_paths: FrozenSet[str] = frozenset()
    data: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def get(self, key: str, default: Any = None) -> Any:
        """Return a raw key of the definition (metadata included)."""
        return self.data.get(key, default)

    def metadata(self) -> Dict[str, Any]:
        """Return every non-core key of the definition."""
        return {k: v for k, v in self.data.items() if k not in CORE_KEYS}


def parse_alias(alias_id: str, raw: Any) -> Alias:
    """Build an :class:`Alias` from its raw definition."""
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Alias {alias_id} must be a mapping", context={"alias": alias_id})

    root = raw.get("root")
    if root is not None and not isinstance(root, str):
        raise ConfigError(f"Alias {alias_id}: root must be a string", context={"alias": alias_id})

    raw_require = raw.get("require") or []
    if not isinstance(raw_require, list):
        raise ConfigError(f"Alias {alias_id}: require must be a list", context={"alias": alias_id})

    deps = raw.get("extraDeps") or {}
    if not isinstance(deps, Mapping):
        raise ConfigError(f"Alias {alias_id}: extraDeps must be a mapping", context={"alias": alias_id})

    paths = raw.get("extraPaths") or []
    if isinstance(paths, str) or not isinstance(paths, (list, tuple, set, frozenset)):
        raise ConfigError(f"Alias {alias_id}: extraPaths must be a list", context={"alias": alias_id})

    return Alias(
        id=alias_id,
        root=root,
        require=tuple(parse_ref(item, owner=alias_id) for item in raw_require),
        extra_deps=MappingProxyType(dict(deps)),
        extra_paths=frozenset(str(p) for p in paths),
        data=MappingProxyType(dict(raw)),
    )


def parse_aliases(raw: Mapping[str, Any]) -> Dict[str, Alias]:
    """Parse an ``aliases`` section, preserving declaration order."""
    out: Dict[str, Alias] = {}
    for alias_id, definition in raw.items():
        out[str(alias_id)] = parse_alias(str(alias_id), definition)
    return out


__all__ = [
    "Alias",
    "AliasRef",
    "CORE_KEYS",
    "DEFAULT_PROFILE",
    "DirectRef",
    "ProfileRef",
    "parse_alias",
    "parse_aliases",
    "parse_ref",
    "resolve_ref",
]
