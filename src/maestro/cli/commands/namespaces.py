"""
Maestro namespaces command.

SUMMARY: List Python modules found in the paths of resolved aliases

With --import the modules (optionally narrowed by --prefix) are imported one
by one, which surfaces import errors across a whole group of aliases.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from maestro.cli import (
    OutputFormatter,
    add_alias_args,
    add_profile_flag,
    add_standard_flags,
    load_project,
    parse_list,
)
from maestro.core.basis import extra_paths
from maestro.core.namespaces import basis_modules, require_found
from maestro.core.resolve import ResolveRequest, resolve

SUMMARY = "List Python modules found in the paths of resolved aliases"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_alias_args(parser)
    add_profile_flag(parser)
    parser.add_argument(
        "--prefix",
        action="append",
        default=[],
        help="Keep only modules starting with this prefix (repeatable)",
    )
    parser.add_argument(
        "--import",
        dest="do_import",
        action="store_true",
        help="Import every listed module",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    _settings, config = load_project(args)

    basis = resolve(config, ResolveRequest(parse_list(args.aliases), parse_list(args.profiles)))
    prefixes = tuple(parse_list(args.prefix))

    def select(name: str) -> Optional[str]:
        if prefixes and not name.startswith(prefixes):
            return None
        return name

    modules = [name for name in basis_modules(basis, config.base_dir) if select(name)]
    if args.do_import:
        base_dir = config.base_dir
        paths = [
            str(p if p.is_absolute() else base_dir / p)
            for p in (Path(raw) for raw in sorted(extra_paths(basis.aliases, basis.require)))
        ]
        require_found(modules, select, paths=paths)

    if formatter.json_mode:
        formatter.json_output({"modules": modules, "imported": bool(args.do_import)})
    else:
        formatter.text("\n".join(modules))
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
