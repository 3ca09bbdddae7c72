"""
CLI command modules.

Each module implements one group of jsfeatures subcommands together with
the function that registers it on the argument parser.
"""

from .catalog import (
    add_catalog_commands,
    cmd_categories,
    cmd_list,
    cmd_search,
    cmd_show,
)
from .doctor import add_doctor_command, cmd_doctor
from .verify import add_verify_command, cmd_verify

__all__ = [
    "add_catalog_commands",
    "add_doctor_command",
    "add_verify_command",
    "cmd_categories",
    "cmd_doctor",
    "cmd_list",
    "cmd_search",
    "cmd_show",
    "cmd_verify",
]
