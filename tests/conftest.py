from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable, Dict

import pytest
import yaml

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'maestro'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from maestro.core.config_file import MaestroConfig, parse_config  # noqa: E402
from maestro.core.logs import reset_logging_for_tests  # noqa: E402
from maestro.data import clear_caches  # noqa: E402


SAMPLE_CONFIG: Dict[str, Any] = {
    "aliases": {
        "module/util": {
            "extraPaths": ["module/util/src"],
            "extraDeps": {"org.example/json": {"version": "1.0.0"}},
        },
        "module/lib": {
            "require": ["module/util"],
            "extraPaths": ["module/lib/src"],
            "extraDeps": {"org.example/json": {"version": "2.0.0"}},
        },
        "release/lib": {
            "extraDeps": {"org.example/lib": {"version": "0.3.0"}},
        },
        "module/app": {
            "root": "module/app",
            "require": [
                "module/util",
                {"default": "module/lib", "release": "release/lib"},
            ],
            "extraPaths": ["module/app/src"],
            "doc": "Application",
        },
    },
    "tasks": {
        "test": {"doc": "Run the test suite", "details": "Runs every test.\n  Quickly."},
        "lint": {"doc": "Lint sources"},
    },
}


@pytest.fixture(autouse=True)
def _reset_maestro_state(monkeypatch: pytest.MonkeyPatch):
    """Keep developer environment and global logging state out of tests."""
    monkeypatch.delenv("MAESTRO_PROJECT_ROOT", raising=False)
    clear_caches()
    reset_logging_for_tests()
    yield
    reset_logging_for_tests()


@pytest.fixture
def make_config() -> Callable[[Dict[str, Any]], MaestroConfig]:
    """Build a MaestroConfig from an ``aliases`` mapping (and optional tasks)."""

    def _make(aliases: Dict[str, Any], tasks: Dict[str, Any] | None = None) -> MaestroConfig:
        data: Dict[str, Any] = {"aliases": aliases}
        if tasks is not None:
            data["tasks"] = tasks
        return parse_config(data)

    return _make


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[Dict[str, Any]], Path]:
    """Write ``maestro.yaml`` into ``tmp_path`` and return its path."""

    def _write(data: Dict[str, Any], name: str = "maestro.yaml") -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_project(tmp_path: Path, write_config) -> Path:
    """Project with SAMPLE_CONFIG and a few source files on disk."""
    write_config(SAMPLE_CONFIG)
    for rel, content in {
        "module/util/src/util/core.txt": "util",
        "module/lib/src/lib/core.txt": "lib",
        "module/app/src/app/main.txt": "app",
    }.items():
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return tmp_path
