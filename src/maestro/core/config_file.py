"""Loading of the alias configuration file (``maestro.yaml``).

The file is read once per resolution; nothing is cached across calls so a
basis always reflects what is on disk.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import jsonschema
import yaml

from maestro.data import read_json

from .aliases import Alias, parse_aliases
from .exceptions import ConfigError
from .utils.io import read_yaml

logger = logging.getLogger(__name__)

SCHEMA_NAME = "config.schema.json"


@dataclass(frozen=True)
class MaestroConfig:
    """Parsed configuration file."""

    aliases: Dict[str, Alias]
    tasks: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict)
    path: Optional[Path] = None

    @property
    def base_dir(self) -> Path:
        """Directory against which relative alias paths are interpreted."""
        if self.path is None:
            return Path.cwd()
        return self.path.parent


def validate_config(data: Any) -> None:
    """Validate raw configuration data against the bundled schema.

    Raises:
        ConfigError: Listing every schema violation.
    """
    schema = read_json("schemas", SCHEMA_NAME)
    validator = jsonschema.Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if not errors:
        return
    issues: List[str] = []
    for err in errors:
        location = "/".join(str(p) for p in err.path) or "<root>"
        issues.append(f"{location}: {err.message}")
    raise ConfigError(
        "Invalid configuration:\n  " + "\n  ".join(issues),
        context={"issues": issues},
    )


def parse_config(data: Mapping[str, Any], *, path: Optional[Path] = None, validate: bool = True) -> MaestroConfig:
    """Build a :class:`MaestroConfig` from already-loaded data."""
    if validate:
        validate_config(data)
    elif not isinstance(data, Mapping):
        raise ConfigError("Configuration must be a mapping")
    aliases = parse_aliases(data.get("aliases") or {})
    tasks = {str(name): dict(task or {}) for name, task in (data.get("tasks") or {}).items()}
    return MaestroConfig(aliases=aliases, tasks=tasks, raw=dict(data), path=path)


def load_config(path: Path, *, validate: bool = True) -> MaestroConfig:
    """Read and parse the configuration file at ``path``.

    Raises:
        ConfigError: When the file is missing, unparsable or invalid.
    """
    path = Path(path)
    try:
        data = read_yaml(path, default=None, raise_on_error=True)
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file not found: {path}", context={"path": str(path)}) from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse {path}: {exc}", context={"path": str(path)}) from exc
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"Configuration must be a mapping: {path}", context={"path": str(path)})
    config = parse_config(data, path=path.resolve(), validate=validate)
    logger.debug("Loaded %d aliases from %s", len(config.aliases), path)
    return config


__all__ = ["MaestroConfig", "load_config", "parse_config", "validate_config"]
