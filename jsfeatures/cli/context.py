"""
CLI context shared by all commands of one invocation.
"""

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import VerifierSettings
from .errors import CLIConfigError


@dataclass
class CLIContext:
    """
    Workspace state resolved before a command runs.

    Attributes:
        workspace_root: Root directory of the workspace
        settings: Verifier settings from defaults, config file and environment
        config_path: The configuration file that was read, if any
    """

    workspace_root: Path
    settings: VerifierSettings
    config_path: Optional[Path] = None


def get_cli_context(args: argparse.Namespace) -> CLIContext:
    """
    Retrieve CLIContext from parsed arguments.

    Raises:
        CLIConfigError: If context was not initialized
    """
    ctx = getattr(args, "cli_context", None)
    if ctx is None:
        raise CLIConfigError(
            "CLI context was not initialized before command execution",
            hint="This is an internal error - please report it",
            code="CLI_CONTEXT_NOT_INITIALIZED"
        )
    return ctx


__all__ = ["CLIContext", "get_cli_context"]
