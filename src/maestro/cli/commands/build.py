"""
Maestro build command.

SUMMARY: Build an archive described by an alias

The alias is resolved with the configured build profiles (``release`` by
default); profiles given with --profile take precedence over them. Options
given with --set override keys of the alias data, e.g.
``--set build/output=dist/app.zip``.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, List

import yaml

from maestro.cli import OutputFormatter, add_profile_flag, add_standard_flags, load_project, parse_list
from maestro.core.build import build
from maestro.core.exceptions import ConfigError

SUMMARY = "Build an archive described by an alias"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("alias", metavar="ALIAS", help="Alias to build")
    add_profile_flag(parser)
    parser.add_argument(
        "--set",
        dest="options",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override a key of the alias data (value parsed as YAML, repeatable)",
    )
    add_standard_flags(parser)


def parse_options(raw: List[str]) -> Dict[str, Any]:
    options: Dict[str, Any] = {}
    for item in raw:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid --set value (expected KEY=VALUE): {item}")
        try:
            options[key.strip()] = yaml.safe_load(value) if value else None
        except yaml.YAMLError as exc:
            raise ConfigError(
                f"Invalid --set value {item}: {exc}",
                context={"option": item},
            ) from exc
    return options


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    settings, config = load_project(args)

    default_profiles = ((settings.get("build") or {}).get("profiles")) or ["release"]
    result = build(
        config,
        args.alias,
        profiles=parse_list(args.profiles),
        options=parse_options(args.options),
        default_profiles=default_profiles,
    )
    formatter.success(
        {
            "type": result.type,
            "output": str(result.output),
            "entries": result.entries,
            "manifest": result.manifest,
        },
        f"Built {result.type} {result.output} ({len(result.entries)} entries)",
    )
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
