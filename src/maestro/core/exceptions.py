from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence


class MaestroError(Exception):
    """Base exception for Maestro."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigError(MaestroError, ValueError):
    """Raised when a configuration file is malformed or fails schema validation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        MaestroError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ProgrammingError(MaestroError, RuntimeError):
    """Raised when an internal contract is broken by the caller."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        MaestroError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


# ---------- Resolution (core) errors ----------


class ResolutionError(MaestroError):
    """Base class for errors that abort a resolution."""


class MissingAliasError(ResolutionError, LookupError):
    """Raised when a requested or required alias is absent from the alias map."""

    def __init__(self, alias: str, *, referenced_by: Optional[str] = None) -> None:
        if referenced_by is None:
            message = f"Alias not found: {alias}"
        else:
            message = f"Alias not found: {alias} (required by {referenced_by})"
        ResolutionError.__init__(
            self,
            message,
            context={"alias": alias, "referenced_by": referenced_by},
        )
        LookupError.__init__(self, message)
        self.alias = alias
        self.referenced_by = referenced_by


class ProfileMismatchError(ResolutionError, LookupError):
    """Raised when a profile reference matches no active profile and has no default."""

    def __init__(self, alias: str, ref: Any, profiles: Sequence[str]) -> None:
        message = (
            f"Alias {alias} requires {ref} but no active profile matches "
            f"(active: {list(profiles)}) and no default is declared"
        )
        ResolutionError.__init__(
            self,
            message,
            context={"alias": alias, "ref": str(ref), "profiles": list(profiles)},
        )
        LookupError.__init__(self, message)
        self.alias = alias
        self.ref = ref


class CycleDetectedError(ResolutionError, ValueError):
    """Raised when the require graph loops back on the active traversal path."""

    def __init__(self, path: Sequence[str]) -> None:
        self.path = tuple(path)
        message = "Cycle detected in alias require graph: " + " -> ".join(self.path)
        ResolutionError.__init__(self, message, context={"path": list(self.path)})
        ValueError.__init__(self, message)


class MissingRootError(ResolutionError):
    """Raised when an operation needs ``root`` on an alias that has none."""

    def __init__(self, alias: str) -> None:
        super().__init__(f"Alias does not declare a root: {alias}", context={"alias": alias})
        self.alias = alias


# ---------- Consumer errors ----------


class BuildError(MaestroError):
    """Raised by build backends and other basis consumers."""


class MissingRequiredKeyError(BuildError, KeyError):
    """Raised when a consumer-level key (e.g. an output path) is missing."""

    def __init__(self, key: str, *, alias: Optional[str] = None) -> None:
        message = f"Missing required key: {key}"
        if alias:
            message += f" (alias {alias})"
        BuildError.__init__(self, message, context={"key": key, "alias": alias})
        self.key = key
        self.alias = alias

    def __str__(self) -> str:
        # KeyError would otherwise quote the message.
        return str(self.args[0]) if self.args else ""


__all__ = [
    "MaestroError",
    "ConfigError",
    "ProgrammingError",
    "ResolutionError",
    "MissingAliasError",
    "ProfileMismatchError",
    "CycleDetectedError",
    "MissingRootError",
    "BuildError",
    "MissingRequiredKeyError",
]
