"""
Maestro undocumented command.

SUMMARY: List tasks without extra documentation
"""

from __future__ import annotations

import argparse
import sys

from maestro.cli import OutputFormatter, add_standard_flags, load_project
from maestro.core.help import render, undocumented_tasks

SUMMARY = "List tasks without extra documentation"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    _settings, config = load_project(args)

    result = undocumented_tasks(config)
    if formatter.json_mode:
        formatter.json_output({"tasks": result.tasks})
    else:
        formatter.text(render(result))
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
