"""Maestro core library: alias resolution and the consumers of a basis."""

from .aliases import Alias, DirectRef, ProfileRef, parse_alias, parse_ref, resolve_ref
from .basis import Basis, collect, extra_paths, merge_alias, merge_contributions, metadata
from .closure import AliasGraph, search_closure
from .config_file import MaestroConfig, load_config, parse_config
from .exceptions import (
    BuildError,
    ConfigError,
    CycleDetectedError,
    MaestroError,
    MissingAliasError,
    MissingRequiredKeyError,
    MissingRootError,
    ProfileMismatchError,
    ProgrammingError,
    ResolutionError,
)
from .profiles import ProfileStack
from .resolve import ResolveRequest, resolve, resolve_file

__all__ = [
    "Alias",
    "AliasGraph",
    "Basis",
    "BuildError",
    "ConfigError",
    "CycleDetectedError",
    "DirectRef",
    "MaestroConfig",
    "MaestroError",
    "MissingAliasError",
    "MissingRequiredKeyError",
    "MissingRootError",
    "ProfileMismatchError",
    "ProfileRef",
    "ProfileStack",
    "ProgrammingError",
    "ResolutionError",
    "ResolveRequest",
    "collect",
    "extra_paths",
    "load_config",
    "merge_alias",
    "merge_contributions",
    "metadata",
    "parse_alias",
    "parse_config",
    "parse_ref",
    "resolve",
    "resolve_file",
    "resolve_ref",
    "search_closure",
]
