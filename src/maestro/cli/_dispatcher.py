"""
Auto-discovery CLI dispatcher for Maestro.

Scans ``maestro/cli/commands`` for command modules and registers them.
Adding a new command = adding a .py file exposing ``SUMMARY``,
``register_args`` and ``main``.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from collections.abc import Callable
from functools import lru_cache
from pathlib import Path
from typing import Any

from maestro.core.exceptions import MaestroError
from maestro.core.logs import configure_logging, suppress_lastresort_in_json_mode

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def discover_commands() -> dict[str, dict[str, Any]]:
    """Discover top-level commands under cli/commands."""
    commands_dir = Path(__file__).parent / "commands"
    commands: dict[str, dict[str, Any]] = {}

    for item in sorted(commands_dir.glob("*.py")):
        if item.name.startswith("_"):
            continue
        cmd_name = item.stem
        try:
            module = importlib.import_module(f"maestro.cli.commands.{cmd_name}")
        except ImportError as e:
            print(f"Warning: Could not import command {cmd_name}: {e}", file=sys.stderr)
            continue
        commands[cmd_name] = {
            "module": module,
            "summary": getattr(module, "SUMMARY", cmd_name),
            "register_args": getattr(module, "register_args", None),
            "main": getattr(module, "main", None),
        }

    return commands


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with auto-discovered commands."""
    parser = argparse.ArgumentParser(
        prog="maestro",
        description="Maestro - alias resolution for monorepos",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level written to stderr (default: settings maestro.logging.level)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    for cmd_name, cmd_info in sorted(discover_commands().items()):
        primary_name = cmd_name.replace("_", "-")
        aliases = [cmd_name] if primary_name != cmd_name else []
        cmd_parser = subparsers.add_parser(
            primary_name,
            aliases=aliases,
            help=cmd_info["summary"],
        )
        if cmd_info["register_args"]:
            cmd_info["register_args"](cmd_parser)
        if cmd_info["main"]:
            cmd_parser.set_defaults(_func=cmd_info["main"])

    return parser


def _get_version() -> str:
    try:
        from maestro import __version__
        return __version__
    except ImportError:
        return "unknown"


def _setup_logging(args: argparse.Namespace) -> None:
    if getattr(args, "json", False) and not args.log_level:
        suppress_lastresort_in_json_mode()
        return

    level = args.log_level
    log_path = None
    if level is None:
        from maestro.cli._utils import load_settings

        try:
            logging_cfg = load_settings(args).get("logging") or {}
        except (OSError, ValueError) as exc:
            print(f"Warning: Could not load settings: {exc}", file=sys.stderr)
            logging_cfg = {}
        level = logging_cfg.get("level") or "WARNING"
        log_path = logging_cfg.get("path")
    configure_logging(str(level), log_path=Path(log_path) if log_path else None)


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the Maestro CLI.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    _setup_logging(args)

    func: Callable[[argparse.Namespace], int] | None = getattr(args, "_func", None)
    if func is None:
        parser.print_help()
        return 1

    try:
        return func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
    except MaestroError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        from maestro.cli._output import OutputFormatter

        OutputFormatter(json_mode=bool(getattr(args, "json", False))).error(e, error_code="maestro_error")
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
