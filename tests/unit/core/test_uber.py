from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml

from maestro.core.config_file import load_config
from maestro.core.exceptions import MissingAliasError, MissingRootError
from maestro.core.uber import generate_uber


@pytest.fixture
def uber_project(tmp_path: Path, write_config) -> Path:
    write_config(
        {
            "aliases": {
                "shared": {"extraPaths": ["shared/src"], "extraDeps": {"dep/a": "1"}},
                "dev": {
                    "root": "dev",
                    "require": ["shared"],
                    "extraPaths": ["dev/src"],
                    "extraDeps": {"dep/b": "2"},
                },
                "rootless": {"require": ["shared"]},
            }
        }
    )
    for rel in ("shared/src/pkg/mod.txt", "dev/src/local.txt"):
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(rel, encoding="utf-8")
    return tmp_path


def test_generate_uber_writes_deps_and_links(uber_project: Path) -> None:
    config = load_config(uber_project / "maestro.yaml")
    result = generate_uber(config, "dev")

    assert result.deps_file == uber_project.resolve() / "dev" / "deps.yaml"
    text = result.deps_file.read_text(encoding="utf-8")
    assert text.startswith("# This file has been generated by Maestro.")
    data = yaml.safe_load(text)
    assert data["deps"] == {"dep/a": "1", "dep/b": "2"}
    assert data["paths"] == ["maestro/uber/shared/src", "src"]

    link = uber_project.resolve() / "dev" / "maestro" / "uber" / "shared" / "src" / "pkg" / "mod.txt"
    assert result.links == [link]
    assert os.stat(link).st_ino == os.stat(uber_project / "shared" / "src" / "pkg" / "mod.txt").st_ino


def test_generate_uber_replaces_old_links(uber_project: Path) -> None:
    stale = uber_project / "dev" / "maestro" / "uber" / "stale.txt"
    stale.parent.mkdir(parents=True)
    stale.write_text("old", encoding="utf-8")
    generate_uber(load_config(uber_project / "maestro.yaml"), "dev")
    assert not stale.exists()


def test_generate_uber_requires_root(uber_project: Path) -> None:
    with pytest.raises(MissingRootError):
        generate_uber(load_config(uber_project / "maestro.yaml"), "rootless")


def test_generate_uber_unknown_alias(uber_project: Path) -> None:
    with pytest.raises(MissingAliasError):
        generate_uber(load_config(uber_project / "maestro.yaml"), "ghost")


def test_user_profiles_take_precedence_over_release(tmp_path: Path, write_config) -> None:
    write_config(
        {
            "aliases": {
                "lib/local": {"extraDeps": {"dep/lib": "local"}},
                "lib/release": {"extraDeps": {"dep/lib": "1.0.0"}},
                "dev": {
                    "root": "dev",
                    "require": [{"local": "lib/local", "release": "lib/release"}],
                },
            }
        }
    )
    config = load_config(tmp_path / "maestro.yaml")

    released = generate_uber(config, "dev")
    assert list(released.basis.profiles) == ["release"]
    assert released.basis.require == ("lib/release", "dev")

    local = generate_uber(config, "dev", user_profiles=["local"])
    assert list(local.basis.profiles) == ["local", "release"]
    assert local.basis.require == ("lib/local", "dev")
    assert yaml.safe_load(local.deps_file.read_text(encoding="utf-8"))["deps"] == {"dep/lib": "local"}
