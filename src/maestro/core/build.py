"""Archive builds driven by alias data.

:func:`prepare_build` resolves the alias to build after activating the
``release`` profile (user profiles are prepended so they take precedence),
materializes the alias's own keys onto the basis, then applies caller options
on top. :func:`build` dispatches the prepared basis on ``build/type`` to a
registered backend.

Keys read from the build alias (or overridden through options):

| Key              | Value                                        | Mandatory?         |
|------------------|----------------------------------------------|--------------------|
| ``build/type``   | Backend name (``archive``, ``bundle``, ...)  | Yes                |
| ``build/output`` | Output path of the archive                   | Yes                |
| ``build/artifact`` | Alias whose first ``extraDeps`` entry names the artifact | ``archive`` only |
| ``build/main``   | Entry point recorded in the manifest         | No                 |
| ``build/exclude``| Regular expressions of archive paths to skip | No                 |
| ``root``         | Root directory of the alias                  | ``archive`` only   |

An artifact alias holds nothing but the release coordinate, so other aliases
can require either the local module or its release through a profile map:

```yaml
release/core:
  extraDeps:
    org.example/core: {version: "1.4.0"}
module/app:
  require:
    - {default: module/core, release: release/core}
```
"""
from __future__ import annotations

import json
import logging
import re
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .basis import Basis, collect, extra_paths, merge_alias
from .config_file import MaestroConfig
from .exceptions import BuildError, MissingRequiredKeyError, MissingRootError
from .resolve import ResolveRequest, resolve
from .utils.io import dump_yaml_string, ensure_directory, write_text

logger = logging.getLogger(__name__)

RELEASE_PROFILE = "release"

KEY_ALIAS = "build/alias"
KEY_TYPE = "build/type"
KEY_OUTPUT = "build/output"
KEY_ARTIFACT = "build/artifact"
KEY_MAIN = "build/main"
KEY_EXCLUDE = "build/exclude"
KEY_SRC = "build/src"
KEY_JVM_OPTS = "build/jvmOpts"

MANIFEST_PATH = "META-INF/maestro/manifest.json"


@dataclass
class BuildResult:
    """Outcome of one backend run."""

    type: str
    output: Path
    entries: List[str] = field(default_factory=list)
    manifest: Dict[str, Any] = field(default_factory=dict)


BuildBackend = Callable[[Basis, Path], BuildResult]

_BACKENDS: Dict[str, BuildBackend] = {}


def register_backend(name: str) -> Callable[[BuildBackend], BuildBackend]:
    """Register a build backend for ``build/type`` == ``name``."""

    def decorator(fn: BuildBackend) -> BuildBackend:
        _BACKENDS[name] = fn
        return fn

    return decorator


def get_backend(name: Optional[str]) -> BuildBackend:
    if not name:
        raise BuildError("Missing build type", context={"key": KEY_TYPE})
    try:
        return _BACKENDS[str(name)]
    except KeyError:
        raise BuildError(
            f"Unknown build type: {name} (available: {', '.join(sorted(_BACKENDS))})",
            context={"type": name},
        ) from None


def available_backends() -> Tuple[str, ...]:
    return tuple(sorted(_BACKENDS))


# ---------- Preparation ----------


def prepare_build(
    config: MaestroConfig,
    alias: Optional[str],
    *,
    profiles: Sequence[str] = (),
    options: Optional[Mapping[str, Any]] = None,
    default_profiles: Sequence[str] = (RELEASE_PROFILE,),
) -> Basis:
    """Resolve ``alias`` for building and return the prepared basis.

    The returned basis carries the alias's own keys, then ``options``, plus
    ``build/alias``, ``build/src`` (paths of every required alias) and
    ``build/jvmOpts`` (``jvmOpts`` concatenated in require order).
    """
    if not alias:
        raise MissingRequiredKeyError(KEY_ALIAS)

    request = ResolveRequest([alias], default_profiles).prepend_profiles(*profiles)
    basis = resolve(config, request)
    basis = merge_alias(basis, alias)
    if options:
        basis = basis.merge({k: v for k, v in options.items() if k != KEY_ALIAS})

    src = sorted(extra_paths(basis.aliases, basis.require))
    return basis.merge(
        {
            KEY_ALIAS: alias,
            KEY_SRC: src,
            KEY_JVM_OPTS: collect(basis, "jvmOpts"),
        }
    )


def build(
    config: MaestroConfig,
    alias: Optional[str],
    *,
    profiles: Sequence[str] = (),
    options: Optional[Mapping[str, Any]] = None,
    default_profiles: Sequence[str] = (RELEASE_PROFILE,),
) -> BuildResult:
    """Prepare ``alias`` and run the backend selected by ``build/type``."""
    basis = prepare_build(
        config,
        alias,
        profiles=profiles,
        options=options,
        default_profiles=default_profiles,
    )
    backend = get_backend(basis.get(KEY_TYPE))
    return backend(basis, config.base_dir)


# ---------- Shared steps ----------


def _require(basis: Basis, key: str) -> Any:
    value = basis.get(key)
    if value in (None, ""):
        raise MissingRequiredKeyError(key, alias=basis.get(KEY_ALIAS))
    return value


def _output_path(basis: Basis, base_dir: Path) -> Path:
    output = Path(str(_require(basis, KEY_OUTPUT)))
    return output if output.is_absolute() else base_dir / output


def clean(path: Path) -> None:
    """Delete any previous output at ``path``."""
    if path.exists():
        logger.info("Removing any previous output: %s", path)
        path.unlink()


def _compile_excludes(patterns: Optional[Iterable[str]]) -> List[re.Pattern[str]]:
    return [re.compile(p) for p in (patterns or [])]


def iter_source_files(
    src_dirs: Iterable[str],
    base_dir: Path,
    *,
    exclude: Optional[Iterable[str]] = None,
) -> List[Tuple[Path, str]]:
    """List ``(file, archive_name)`` pairs found under ``src_dirs``.

    Archive names are relative to their source directory. When several
    source directories provide the same name, the first one (in sorted
    order) is kept.
    """
    patterns = _compile_excludes(exclude)
    seen: Dict[str, Path] = {}
    for src in sorted(src_dirs):
        src_path = Path(src)
        if not src_path.is_absolute():
            src_path = base_dir / src_path
        if not src_path.is_dir():
            logger.warning("Source path does not exist, skipping: %s", src_path)
            continue
        for file in sorted(p for p in src_path.rglob("*") if p.is_file()):
            name = file.relative_to(src_path).as_posix()
            if any(p.search(name) for p in patterns):
                continue
            if name in seen:
                logger.debug("Duplicate archive entry %s (keeping %s)", name, seen[name])
                continue
            seen[name] = file
    return [(path, name) for name, path in seen.items()]


def write_archive(output: Path, files: Sequence[Tuple[Path, str]], manifest: Mapping[str, Any]) -> List[str]:
    ensure_directory(output.parent)
    entries: List[str] = []
    with zipfile.ZipFile(output, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(MANIFEST_PATH, json.dumps(manifest, indent=2, sort_keys=True))
        entries.append(MANIFEST_PATH)
        for path, name in files:
            zf.write(path, name)
            entries.append(name)
    return entries


def artifact_coordinate(basis: Basis, artifact_alias: str) -> Tuple[str, Optional[str]]:
    """Return ``(coordinate, version)`` from the artifact alias's first dependency."""
    alias = basis.aliases.get(artifact_alias)
    if alias is None:
        raise BuildError(f"Artifact alias not found: {artifact_alias}", context={"alias": artifact_alias})
    if not alias.extra_deps:
        raise BuildError(
            f"Artifact alias declares no extraDeps: {artifact_alias}",
            context={"alias": artifact_alias},
        )
    coordinate, spec = next(iter(alias.extra_deps.items()))
    if isinstance(spec, Mapping):
        version = spec.get("version")
    else:
        version = spec
    return str(coordinate), (str(version) if version is not None else None)


# ---------- Backends ----------


@register_backend("archive")
def archive(basis: Basis, base_dir: Path) -> BuildResult:
    """Zip the source paths of the required aliases under an artifact coordinate."""
    artifact_alias = str(_require(basis, KEY_ARTIFACT))
    root = basis.root
    if not root:
        raise MissingRootError(str(basis.get(KEY_ALIAS)))
    output = _output_path(basis, base_dir)

    coordinate, version = artifact_coordinate(basis, artifact_alias)
    manifest: Dict[str, Any] = {
        "type": "archive",
        "artifact": coordinate,
        "version": version,
        "aliases": list(basis.require),
    }

    root_path = Path(root) if Path(root).is_absolute() else base_dir / root
    descriptor = root_path / "artifact.yaml"
    logger.info("Writing artifact descriptor to: %s", descriptor)
    write_text(descriptor, dump_yaml_string({"artifact": coordinate, "version": version}))

    clean(output)
    files = iter_source_files(basis.get(KEY_SRC) or [], base_dir, exclude=basis.get(KEY_EXCLUDE))
    logger.info("Assembling archive to: %s", output)
    entries = write_archive(output, files, manifest)
    return BuildResult(type="archive", output=output, entries=entries, manifest=manifest)


@register_backend("bundle")
def bundle(basis: Basis, base_dir: Path) -> BuildResult:
    """Zip every required source path with the merged dependencies and entry point."""
    output = _output_path(basis, base_dir)
    manifest: Dict[str, Any] = {
        "type": "bundle",
        "main": basis.get(KEY_MAIN),
        "jvmOpts": list(basis.get(KEY_JVM_OPTS) or []),
        "deps": dict(basis.deps),
        "aliases": list(basis.require),
    }

    clean(output)
    files = iter_source_files(basis.get(KEY_SRC) or [], base_dir, exclude=basis.get(KEY_EXCLUDE))
    logger.info("Assembling bundle to: %s", output)
    entries = write_archive(output, files, manifest)
    return BuildResult(type="bundle", output=output, entries=entries, manifest=manifest)


__all__ = [
    "BuildResult",
    "RELEASE_PROFILE",
    "archive",
    "artifact_coordinate",
    "available_backends",
    "build",
    "bundle",
    "clean",
    "get_backend",
    "iter_source_files",
    "prepare_build",
    "register_backend",
    "write_archive",
]
