"""
Maestro uber command.

SUMMARY: Generate a merged deps file under an alias root
"""

from __future__ import annotations

import argparse
import sys

from maestro.cli import OutputFormatter, add_profile_flag, add_standard_flags, load_project, parse_list
from maestro.core.uber import generate_uber

SUMMARY = "Generate a merged deps file under an alias root"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("alias", metavar="ALIAS", help="Alias declaring a root")
    add_profile_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    settings, config = load_project(args)
    uber_cfg = settings.get("uber") or {}

    result = generate_uber(
        config,
        args.alias,
        profiles=uber_cfg.get("profiles") or ["release"],
        user_profiles=parse_list(args.profiles),
        uber_dir=str(uber_cfg.get("directory") or "maestro/uber"),
        deps_file=str(uber_cfg.get("depsFile") or "deps.yaml"),
    )
    formatter.success(
        {
            "depsFile": str(result.deps_file),
            "require": list(result.basis.require),
            "links": [str(p) for p in result.links],
        },
        f"Generated {result.deps_file} ({len(result.links)} hard links)",
    )
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
