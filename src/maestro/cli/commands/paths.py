"""
Maestro paths command.

SUMMARY: Print the paths contributed by resolved aliases
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
from maestro.core.basis import extra_paths
from maestro.core.resolve import ResolveRequest, resolve

SUMMARY = "Print the paths contributed by resolved aliases"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_alias_args(parser)
    add_profile_flag(parser)
    parser.add_argument(
        "--own",
        action="store_true",
        help="Only paths of the requested aliases, not of their requirements",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    _settings, config = load_project(args)

    basis = resolve(config, ResolveRequest(parse_list(args.aliases), parse_list(args.profiles)))
    if args.own:
        paths = extra_paths(basis.aliases, basis.requested)
    else:
        paths = basis.paths

    ordered = sorted(paths)
    if formatter.json_mode:
        formatter.json_output({"paths": ordered})
    else:
        formatter.text("\n".join(ordered))
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
