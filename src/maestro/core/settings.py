"""
Maestro tool settings (YAML layers plus environment overrides).

Precedence (in increasing order):
  1) Bundled defaults (``maestro/data/config/defaults.yaml``)
  2) Project overlays (``<root>/.maestro/config/*.yml``, sorted by name)
  3) Environment overrides (``MAESTRO_*``)

Environment overrides:
- Path separator: double underscore ``__`` (e.g.
  ``MAESTRO_maestro__uber__directory=build/uber``).
- Case handling: case-insensitive lookup against existing keys; original case
  is preserved when a new key is created.
- Type coercion: bool/int/float/JSON-like strings are coerced.

Settings configure the command-line tool only. The resolution functions in
:mod:`maestro.core.resolve` take explicit parameters and never consult them.
"""
from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from maestro.data import get_data_path

from .utils.io import read_yaml
from .utils.merge import deep_merge
from .utils.paths import PROJECT_ROOT_ENV

ENV_PREFIX = "MAESTRO_"
PROJECT_SETTINGS_DIR = Path(".maestro") / "config"

_RESERVED_ENV = {PROJECT_ROOT_ENV}


class SettingsManager:
    """Load and merge Maestro settings.

    Typical usage:

    ```python
    settings = SettingsManager(repo_root).load()
    config_file = settings["maestro"]["configFile"]
    ```
    """

    def __init__(self, repo_root: Optional[Path] = None, *, environ: Optional[Dict[str, str]] = None) -> None:
        self.repo_root = Path(repo_root) if repo_root is not None else None
        self.defaults_path = get_data_path("config", "defaults.yaml")
        self.environ = os.environ if environ is None else environ

    @property
    def project_settings_dir(self) -> Optional[Path]:
        if self.repo_root is None:
            return None
        return self.repo_root / PROJECT_SETTINGS_DIR

    # ---------- Type coercion helpers ----------
    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        """Coerce string to bool/int/float/JSON when appropriate."""
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    # ---------- Environment overrides ----------
    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(self.environ.keys()):
            if not key.startswith(ENV_PREFIX) or key in _RESERVED_ENV:
                continue
            raw = key[len(ENV_PREFIX):]
            segments = raw.split("__")
            if not raw or any(seg == "" for seg in segments):
                raise ValueError(
                    f"Malformed {ENV_PREFIX}* key: '{key}'. Use double underscores between parts."
                )
            yield segments, self._coerce_type(self.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        """Set ``value`` at ``path`` creating dicts as needed (case-insensitive keys)."""
        cur: Any = root
        for i, part in enumerate(path):
            if not isinstance(cur, dict):
                raise ValueError(
                    f"Path traverses non-dict container (path='{'__'.join(path)}', got {type(cur).__name__})"
                )
            lower_map = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
            key = lower_map.get(part.lower(), part)
            if i == len(path) - 1:
                cur[key] = value
                return
            if key not in cur or cur[key] is None:
                cur[key] = {}
            cur = cur[key]

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        """Apply ``MAESTRO_*`` overrides in-place to ``cfg``."""
        for path, value in self._iter_env_overrides():
            self._set_nested(cfg, path, value)

    # ---------- Loading ----------
    def load(self) -> Dict[str, Any]:
        """Load settings with correct precedence (defaults → project → env)."""
        cfg: Dict[str, Any] = read_yaml(self.defaults_path, default={}, raise_on_error=True)

        project_dir = self.project_settings_dir
        if project_dir is not None and project_dir.exists():
            for path in sorted(project_dir.glob("*.yml")):
                overlay = read_yaml(path, default={}, raise_on_error=True)
                if isinstance(overlay, dict):
                    cfg = deep_merge(cfg, overlay)

        self.apply_env_overrides(cfg)
        return cfg

    def get(self, key: str, default: Any = None) -> Any:
        """Return a dot-notation key from the merged settings."""
        value: Union[Dict[str, Any], Any] = self.load()
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value


__all__ = ["ENV_PREFIX", "SettingsManager"]
