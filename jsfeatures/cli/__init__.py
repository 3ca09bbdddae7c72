"""
jsfeatures CLI entry point.

Dispatches to focused command modules: ``verify`` runs the catalog's
snippets with Node.js; ``list``, ``show``, ``search`` and ``categories``
browse the catalog; ``doctor`` checks the environment.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from jsfeatures import __version__
from jsfeatures.config import ConfigError, load_settings

from .commands import add_catalog_commands, add_doctor_command, add_verify_command
from .context import CLIContext
from .errors import CLIConfigError, handle_cli_exception, wrap_exception


LOG_LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warn': logging.WARNING,
    'warning': logging.WARNING,
    'error': logging.ERROR,
}


def _configure_logging(args: argparse.Namespace) -> None:
    """Configure the jsfeatures logger from --log-level or JSFEATURES_LOG_LEVEL."""
    log_level = (
        getattr(args, 'log_level', None) or
        os.getenv('JSFEATURES_LOG_LEVEL', 'warning')
    ).lower()
    numeric_level = LOG_LEVELS.get(log_level, logging.WARNING)

    package_logger = logging.getLogger('jsfeatures')
    package_logger.setLevel(numeric_level)

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
        # Prevent propagation to root logger to avoid duplicate messages
        package_logger.propagate = False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="jsfeatures: a verified reference catalog of JavaScript language features",
        prog="jsfeatures"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        '--config',
        default=None,
        help='Path to a jsfeatures.toml or .jsfeaturesrc configuration file'
    )
    parser.add_argument(
        '--workspace',
        default=None,
        help='Workspace root directory (defaults to current working directory)'
    )
    parser.add_argument(
        '--log-level',
        choices=sorted(LOG_LEVELS),
        default=None,
        help='Set logging level (or set JSFEATURES_LOG_LEVEL; default: warning)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    add_verify_command(subparsers)
    add_catalog_commands(subparsers)
    add_doctor_command(subparsers)
    return parser


def main(argv: Optional[list] = None) -> None:
    """
    Main CLI entrypoint with subcommand support.

    Exits with the status returned by the selected command.

    Examples:
        >>> main(['verify', '--category', 'spread-rest'])  # doctest: +SKIP
        >>> main(['show', 'spread-merge-objects'])  # doctest: +SKIP
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args)

    # If no command specified, print help
    if not hasattr(args, 'func'):
        parser.print_help()
        sys.exit(1)

    workspace_root = Path(args.workspace).resolve() if args.workspace else Path.cwd()
    config_path = Path(args.config).resolve() if args.config else None
    try:
        settings = load_settings(workspace_root, config_path)
    except ConfigError as exc:
        handle_cli_exception(
            wrap_exception(
                exc,
                message=str(exc),
                error_class=CLIConfigError,
                hint="Check jsfeatures.toml, .jsfeaturesrc and the JSFEATURES_* environment variables",
            ),
            exit_code=2,
        )
        return

    args.cli_context = CLIContext(
        workspace_root=workspace_root,
        settings=settings,
        config_path=settings.source,
    )

    try:
        exit_code = args.func(args)
    except OSError as exc:
        handle_cli_exception(
            wrap_exception(exc, message=f"'{args.command}' failed: {exc}"),
            exit_code=2,
        )
        return
    if exit_code:
        sys.exit(exit_code)


__all__ = ["build_parser", "main"]
