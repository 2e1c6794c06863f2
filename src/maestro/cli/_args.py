"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --root flag for project root override."""
    parser.add_argument(
        "--root",
        type=str,
        help="Project root holding the configuration file (default: auto-detect)",
    )


def add_config_flag(parser: argparse.ArgumentParser) -> None:
    """Add --config flag for the configuration file path."""
    parser.add_argument(
        "--config",
        type=str,
        help="Configuration file (default: <root>/maestro.yaml)",
    )


def add_profile_flag(parser: argparse.ArgumentParser) -> None:
    """Add repeatable --profile/-p flag (comma-separated values accepted)."""
    parser.add_argument(
        "--profile",
        "-p",
        dest="profiles",
        action="append",
        default=[],
        help="Activate a profile; earlier profiles take precedence (repeatable)",
    )


def add_alias_args(parser: argparse.ArgumentParser, *, nargs: str = "+") -> None:
    """Add positional alias ids."""
    parser.add_argument(
        "aliases",
        nargs=nargs,
        metavar="ALIAS",
        help="Alias id(s) to resolve",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add standard flags that most commands use.

    Adds: --json, --root, --config
    """
    add_json_flag(parser)
    add_root_flag(parser)
    add_config_flag(parser)


__all__ = [
    "add_alias_args",
    "add_config_flag",
    "add_json_flag",
    "add_profile_flag",
    "add_root_flag",
    "add_standard_flags",
]
