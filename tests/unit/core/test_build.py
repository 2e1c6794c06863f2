from __future__ import annotations

import json
import zipfile
from pathlib import Path

import pytest
import yaml

from maestro.core.build import (
    MANIFEST_PATH,
    artifact_coordinate,
    available_backends,
    build,
    get_backend,
    iter_source_files,
    prepare_build,
)
from maestro.core.config_file import load_config
from maestro.core.exceptions import BuildError, MissingRequiredKeyError, MissingRootError


def _project(tmp_path: Path, write_config, app_extra: dict) -> Path:
    aliases = {
        "module/util": {"extraPaths": ["util/src"], "jvmOpts": ["-Dutil=1"]},
        "module/lib": {"require": ["module/util"], "extraPaths": ["lib/src"]},
        "release/lib": {"require": ["module/util"], "extraDeps": {"org.example/lib": {"version": "0.3.0"}}},
        "module/app": {
            "require": [{"default": "module/lib", "release": "release/lib"}],
            "extraPaths": ["app/src"],
            "jvmOpts": ["-Dapp=1"],
            **app_extra,
        },
    }
    write_config({"aliases": aliases})
    for rel in ("util/src/util.txt", "lib/src/lib.txt", "app/src/app.txt", "app/src/skip.tmp"):
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(rel, encoding="utf-8")
    return tmp_path / "maestro.yaml"


def test_backends_are_registered() -> None:
    assert {"archive", "bundle"} <= set(available_backends())


def test_get_backend_errors() -> None:
    with pytest.raises(BuildError, match="Missing build type"):
        get_backend(None)
    with pytest.raises(BuildError, match="Unknown build type"):
        get_backend("rocket")


def test_prepare_build_activates_release(tmp_path: Path, write_config) -> None:
    config = load_config(_project(tmp_path, write_config, {"build/type": "bundle"}))
    basis = prepare_build(config, "module/app")
    assert basis.require == ("module/util", "release/lib", "module/app")
    assert basis.get("build/alias") == "module/app"
    assert basis.get("build/src") == ["app/src", "util/src"]
    assert basis.get("build/jvmOpts") == ["-Dutil=1", "-Dapp=1"]
    assert basis.get("build/type") == "bundle"


def test_user_profiles_take_precedence(tmp_path: Path, write_config) -> None:
    config = load_config(_project(tmp_path, write_config, {}))
    basis = prepare_build(config, "module/app", profiles=["default-lib"])
    assert list(basis.profiles) == ["default-lib", "release"]
    # No mapping entry for "default-lib", so "release" still decides.
    assert "release/lib" in basis.require


def test_options_override_alias_data(tmp_path: Path, write_config) -> None:
    config = load_config(_project(tmp_path, write_config, {"build/output": "a.zip"}))
    basis = prepare_build(config, "module/app", options={"build/output": "b.zip"})
    assert basis.get("build/output") == "b.zip"


def test_missing_alias_key() -> None:
    with pytest.raises(MissingRequiredKeyError) as exc:
        prepare_build(None, None)  # type: ignore[arg-type]
    assert exc.value.key == "build/alias"


def test_bundle_writes_zip_with_manifest(tmp_path: Path, write_config) -> None:
    config = load_config(
        _project(
            tmp_path,
            write_config,
            {"build/type": "bundle", "build/output": "dist/app.zip", "build/main": "app.main", "build/exclude": [r"\.tmp$"]},
        )
    )
    result = build(config, "module/app", default_profiles=())
    assert result.output == tmp_path.resolve() / "dist" / "app.zip"
    with zipfile.ZipFile(result.output) as zf:
        names = set(zf.namelist())
        manifest = json.loads(zf.read(MANIFEST_PATH))
    assert names == {MANIFEST_PATH, "app.txt", "lib.txt", "util.txt"}
    assert manifest["main"] == "app.main"
    assert manifest["jvmOpts"] == ["-Dutil=1", "-Dapp=1"]
    assert manifest["aliases"] == ["module/util", "module/lib", "module/app"]


def test_bundle_requires_output(tmp_path: Path, write_config) -> None:
    config = load_config(_project(tmp_path, write_config, {"build/type": "bundle"}))
    with pytest.raises(MissingRequiredKeyError) as exc:
        build(config, "module/app")
    assert exc.value.key == "build/output"
    assert str(exc.value) == "Missing required key: build/output (alias module/app)"


def test_archive_writes_descriptor_and_zip(tmp_path: Path, write_config) -> None:
    config = load_config(
        _project(
            tmp_path,
            write_config,
            {
                "root": "app",
                "build/type": "archive",
                "build/output": "dist/lib.zip",
                "build/artifact": "release/lib",
            },
        )
    )
    result = build(config, "module/app")
    assert result.manifest["artifact"] == "org.example/lib"
    assert result.manifest["version"] == "0.3.0"
    descriptor = yaml.safe_load((tmp_path / "app" / "artifact.yaml").read_text(encoding="utf-8"))
    assert descriptor == {"artifact": "org.example/lib", "version": "0.3.0"}
    assert result.output.exists()


def test_archive_requires_root(tmp_path: Path, write_config) -> None:
    config = load_config(
        _project(
            tmp_path,
            write_config,
            {"build/type": "archive", "build/output": "x.zip", "build/artifact": "release/lib"},
        )
    )
    with pytest.raises(MissingRootError):
        build(config, "module/app")


def test_artifact_alias_without_deps(tmp_path: Path, write_config) -> None:
    config = load_config(_project(tmp_path, write_config, {}))
    basis = prepare_build(config, "module/app")
    with pytest.raises(BuildError, match="no extraDeps"):
        artifact_coordinate(basis, "module/lib")
    with pytest.raises(BuildError, match="not found"):
        artifact_coordinate(basis, "ghost")


def test_iter_source_files_first_source_wins(tmp_path: Path) -> None:
    for rel in ("a/x.txt", "b/x.txt", "b/y.txt"):
        (tmp_path / rel).parent.mkdir(parents=True, exist_ok=True)
        (tmp_path / rel).write_text(rel, encoding="utf-8")
    files = dict((name, path) for path, name in iter_source_files(["b", "a", "missing"], tmp_path))
    assert files["x.txt"] == tmp_path / "a" / "x.txt"
    assert set(files) == {"x.txt", "y.txt"}


def test_options_cannot_redirect_build_alias(tmp_path: Path, write_config) -> None:
    config = load_config(_project(tmp_path, write_config, {"build/type": "bundle"}))
    basis = prepare_build(config, "module/app", options={"build/alias": "module/lib", "build/main": "x"})
    assert basis.get("build/alias") == "module/app"
    assert basis.get("build/main") == "x"
