"""
Maestro require command.

SUMMARY: Print the ordered closure of aliases

Dependencies are printed before dependents. With --separator the ids are
joined on one line, convenient for feeding other tools.
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

SUMMARY = "Print the ordered closure of aliases"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_alias_args(parser)
    add_profile_flag(parser)
    parser.add_argument(
        "--separator",
        "-s",
        default=None,
        help="Join ids with this separator instead of printing one per line",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    _settings, config = load_project(args)

    basis = resolve(config, ResolveRequest(parse_list(args.aliases), parse_list(args.profiles)))

    if formatter.json_mode:
        formatter.json_output({"require": list(basis.require), "profiles": list(basis.profiles)})
    elif args.separator is not None:
        formatter.text(args.separator.join(basis.require))
    else:
        formatter.text("\n".join(basis.require))
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
