from __future__ import annotations

from pathlib import Path

import pytest

from maestro.core.config_file import load_config, parse_config, validate_config
from maestro.core.exceptions import ConfigError


def test_load_config_reads_aliases_and_tasks(sample_project: Path) -> None:
    config = load_config(sample_project / "maestro.yaml")
    assert list(config.aliases) == ["module/util", "module/lib", "release/lib", "module/app"]
    assert config.tasks["test"]["doc"] == "Run the test suite"
    assert config.base_dir == sample_project.resolve()


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "maestro.yaml")


def test_load_config_unparsable(tmp_path: Path) -> None:
    path = tmp_path / "maestro.yaml"
    path.write_text("aliases: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Cannot parse"):
        load_config(path)


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "maestro.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_schema_requires_aliases() -> None:
    with pytest.raises(ConfigError) as exc:
        validate_config({"tasks": {}})
    assert any("aliases" in issue for issue in exc.value.context["issues"])


def test_schema_rejects_bad_require_entry() -> None:
    with pytest.raises(ConfigError) as exc:
        validate_config({"aliases": {"a": {"require": [3]}}})
    assert exc.value.context["issues"][0].startswith("aliases/a")


def test_schema_allows_null_aliases_and_tasks() -> None:
    config = parse_config({"aliases": {"a": None}, "tasks": {"t": None}})
    assert config.aliases["a"].require == ()
    assert config.tasks == {"t": {}}


def test_parse_without_validation_still_checks_types() -> None:
    with pytest.raises(ConfigError):
        parse_config({"aliases": {"a": {"require": "b"}}}, validate=False)
