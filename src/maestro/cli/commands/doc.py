"""
Maestro doc command.

SUMMARY: Print extra documentation for a task
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from maestro.cli import OutputFormatter, add_standard_flags, get_project_root, load_project
from maestro.core.help import render, task_help

SUMMARY = "Print extra documentation for a task"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("task", nargs="?", help="Task to document")
    parser.add_argument(
        "--docs-dir",
        default=None,
        help="Directory of <task><extension> text files used when a task has no details",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    settings, config = load_project(args)
    help_cfg = settings.get("help") or {}

    docs_dir = args.docs_dir or help_cfg.get("docsDir")
    docs_path = None
    if docs_dir:
        docs_path = Path(docs_dir)
        if not docs_path.is_absolute():
            docs_path = get_project_root(args) / docs_path

    result = task_help(
        config,
        args.task,
        docs_dir=docs_path,
        extension=str(help_cfg.get("extension") or ".txt"),
    )
    if formatter.json_mode:
        formatter.json_output(
            {
                "type": result.type,
                "task": result.task,
                "docstring": result.docstring,
                "body": result.body,
                "tasks": result.tasks,
            }
        )
    else:
        formatter.text(render(result))
    return 0 if result.type == "task" else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
