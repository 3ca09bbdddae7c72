"""
Doctor command implementation.

Checks that a Node.js engine is available and that the catalog loads.
"""

import argparse
import subprocess

from ... import __version__
from ...errors import CatalogError
from ...verifier import EngineNotFoundError, NodeEngine
from ..context import get_cli_context
from ..errors import CLIError
from ..loading import load_cli_catalog


def cmd_doctor(args: argparse.Namespace) -> int:
    """
    Report the environment the verifier would run in.

    Examples:
        >>> cmd_doctor(args)  # doctest: +SKIP
        ✓ jsfeatures: 1.0.0
        ✓ Node.js: v20.11.1 (/usr/bin/node)
        ✓ Catalog: 78 entries, 140 snippets
    """
    ctx = get_cli_context(args)
    healthy = True

    print(f"✓ jsfeatures: {__version__}")
    if ctx.config_path is not None:
        print(f"✓ Config: {ctx.config_path}")

    engine = NodeEngine(ctx.settings.node)
    try:
        executable = engine.resolve_executable()
        version = engine.version()
        print(f"✓ Node.js: {version} ({executable})")
    except EngineNotFoundError as exc:
        healthy = False
        print("✗ Node.js: missing")
        print(f"    {exc}")
        print(f"    → {exc.hint}")
    except (OSError, subprocess.SubprocessError) as exc:
        healthy = False
        print(f"✗ Node.js: cannot run ({exc})")

    try:
        catalog = load_cli_catalog(args)
        print(f"✓ Catalog: {len(catalog)} entries, {catalog.snippet_count()} snippets")
    except CatalogError as exc:
        healthy = False
        print(f"✗ Catalog: {exc.format()}")
    except CLIError as exc:
        healthy = False
        print(f"✗ Catalog: {exc}")

    print(f"  Timeout: {ctx.settings.timeout:g}s, workers: {ctx.settings.workers}")
    return 0 if healthy else 1


def add_doctor_command(subparsers: argparse._SubParsersAction) -> None:
    doctor_parser = subparsers.add_parser(
        'doctor',
        help='Check the Node.js engine and the catalog'
    )
    doctor_parser.set_defaults(func=cmd_doctor)


__all__ = ["cmd_doctor", "add_doctor_command"]
