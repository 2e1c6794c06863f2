"""
Maestro search command.

SUMMARY: Resolve aliases into a basis

Prints the resolved basis: required aliases in order, merged deps and paths.
"""

from __future__ import annotations

import argparse
import sys

from maestro.cli import (
    OutputFormatter,
    add_alias_args,
    add_profile_flag,
    add_standard_flags,
    load_project,
    parse_list,
)
from maestro.core.resolve import ResolveRequest, resolve
from maestro.core.utils.io import dump_yaml_string

SUMMARY = "Resolve aliases into a basis"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_alias_args(parser)
    add_profile_flag(parser)
    parser.add_argument(
        "--format",
        choices=["json", "yaml"],
        default="yaml",
        help="Output format (default: yaml)",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    _settings, config = load_project(args)

    request = ResolveRequest(parse_list(args.aliases), parse_list(args.profiles))
    basis = resolve(config, request)
    data = basis.to_dict()
    data.pop("extra", None)

    if args.json or args.format == "json":
        formatter.json_output(data)
    else:
        formatter.text(dump_yaml_string(data, sort_keys=False).rstrip())
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
