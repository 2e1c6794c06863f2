"""
Maestro CLI package.

Commands are auto-discovered from ``maestro/cli/commands/*.py``; each module
exposes ``SUMMARY``, ``register_args(parser)`` and ``main(args) -> int``.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Project/settings loading shared by commands
"""
from ._output import OutputFormatter
from ._args import (
    add_alias_args,
    add_config_flag,
    add_json_flag,
    add_profile_flag,
    add_root_flag,
    add_standard_flags,
)
from ._utils import get_project_root, load_project, load_settings, parse_list

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_alias_args",
    "add_config_flag",
    "add_json_flag",
    "add_profile_flag",
    "add_root_flag",
    "add_standard_flags",
    # Utilities
    "get_project_root",
    "load_project",
    "load_settings",
    "parse_list",
]
