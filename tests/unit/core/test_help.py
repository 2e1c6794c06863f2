from __future__ import annotations

from pathlib import Path

import pytest

from maestro.core.help import NO_DOCUMENTATION, HelpResult, render, task_help, undocumented_tasks


TASKS = {
    "test": {"doc": "Run the test suite", "details": "Runs every test.\n    Twice if needed."},
    "Lint": {"doc": "Lint sources"},
    "build": {},
}


def test_task_with_details(make_config) -> None:
    result = task_help(make_config({}, TASKS), "test")
    assert result.type == "task"
    assert result.docstring == "Run the test suite"
    assert result.body == "Runs every test.\nTwice if needed."
    assert render(result) == "Run the test suite\n\n---\n\nRuns every test.\nTwice if needed."


def test_task_body_from_docs_dir(make_config, tmp_path: Path) -> None:
    (tmp_path / "Lint.md").write_text("Lint notes", encoding="utf-8")
    result = task_help(make_config({}, TASKS), "Lint", docs_dir=tmp_path, extension=".md")
    assert result.body == "Lint notes"


def test_task_without_documentation(make_config) -> None:
    result = task_help(make_config({}, TASKS), "build")
    assert result.type == "task"
    assert render(result) == NO_DOCUMENTATION


def test_not_found_lists_tasks_case_insensitively(make_config) -> None:
    result = task_help(make_config({}, TASKS), "deploy")
    assert result.type == "not-found"
    assert result.tasks == ["build", "Lint", "test"]
    assert "Task not found: deploy" in render(result)


def test_no_task_and_no_tasks(make_config) -> None:
    assert task_help(make_config({}, TASKS), None).type == "no-task"
    assert task_help(make_config({}), "x").type == "no-tasks"


def test_undocumented_tasks(make_config) -> None:
    result = undocumented_tasks(make_config({}, TASKS))
    assert result.tasks == ["build", "Lint"]
    assert render(result) == "build\nLint"
    assert render(undocumented_tasks(make_config({}, {"a": {"details": "x"}}))) == "All tasks are documented."


def test_render_custom_printer_and_unknown_type() -> None:
    result = HelpResult(type="custom")
    assert render(result, {"custom": lambda r: "custom!"}) == "custom!"
    with pytest.raises(ValueError):
        render(result)
