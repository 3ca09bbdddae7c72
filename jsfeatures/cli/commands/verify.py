"""
CLI command for verifying catalog snippets against Node.js.
"""

import argparse
import json
import sys

from ...catalog import Category
from ...config import ConfigError
from ...errors import CatalogError
from ...reporter import render_line, render_summary, reports_to_dict
from ...verifier import EngineNotFoundError, NodeEngine, Outcome, SnippetVerifier
from ..context import get_cli_context
from ..errors import (
    CLIDependencyError,
    CLIError,
    CLIValidationError,
    handle_cli_exception,
    wrap_exception,
)
from ..loading import add_catalog_arguments, load_cli_catalog


EXIT_OK = 0
EXIT_MISMATCH = 1
EXIT_FAULT = 2


def cmd_verify(args: argparse.Namespace) -> int:
    """
    Run every selected snippet and compare it with its documented behavior.

    Returns:
        0 when every snippet matched or failed as documented, 1 when any
        snippet mismatched

    Raises:
        SystemExit: With status 2 on configuration, catalog or engine faults
    """
    verbose = getattr(args, "verbose", False)
    try:
        ctx = get_cli_context(args)
        try:
            settings = ctx.settings.with_overrides(
                node=args.node,
                timeout=args.timeout,
                workers=args.workers,
            )
        except ConfigError as exc:
            raise wrap_exception(exc, message=str(exc), error_class=CLIValidationError) from exc

        catalog = load_cli_catalog(args)

        engine = NodeEngine(settings.node)
        try:
            engine.resolve_executable()
        except EngineNotFoundError as exc:
            raise CLIDependencyError(str(exc), hint=exc.hint) from exc

        verifier = SnippetVerifier(engine, timeout=settings.timeout, workers=settings.workers)
        human = args.format == "human"
        on_result = None
        if human and verbose:
            def on_result(report):
                print(render_line(report), flush=True)

        ids = args.ids or None
        reports = verifier.verify_all(catalog, category=args.category, ids=ids, on_result=on_result)
    except (CLIError, CatalogError) as exc:
        handle_cli_exception(exc, verbose=verbose, exit_code=EXIT_FAULT)
        return EXIT_FAULT

    if args.format == "json":
        payload = reports_to_dict(
            reports,
            catalog,
            filters={"category": args.category, "ids": ids},
        )
        print(json.dumps(payload, indent=2))
    else:
        print(render_summary(reports, catalog))

    if not reports:
        print("Warning: no snippets matched the given filters", file=sys.stderr)
    if any(report.result.outcome == Outcome.MISMATCH for report in reports):
        return EXIT_MISMATCH
    return EXIT_OK


def _positive_number(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError("must be greater than zero")
    return value


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return value


def add_verify_command(subparsers: argparse._SubParsersAction) -> None:
    """Add the 'verify' command to the CLI."""
    verify_parser = subparsers.add_parser(
        "verify",
        help="Run catalog snippets with Node.js and check their output",
        description="""
        Execute every snippet of the feature catalog in a fresh Node.js
        process and compare what it prints, or how it fails, with the
        documented behavior.

        Examples:
            jsfeatures verify                                # Whole catalog
            jsfeatures verify --category spread-rest         # One category
            jsfeatures verify --id const-block-scope -v      # One entry, with progress
            jsfeatures verify --format json                  # Machine-readable output
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    verify_parser.add_argument(
        "--category",
        choices=[category.value for category in Category],
        help="Verify only entries of this category"
    )
    verify_parser.add_argument(
        "--id",
        dest="ids",
        action="append",
        default=[],
        metavar="ID",
        help="Verify only this entry (may be provided multiple times)"
    )
    add_catalog_arguments(verify_parser)
    verify_parser.add_argument(
        "--timeout",
        type=_positive_number,
        default=None,
        metavar="SECONDS",
        help="Maximum time to wait for one snippet (default: 5, or JSFEATURES_TIMEOUT)"
    )
    verify_parser.add_argument(
        "--workers",
        type=_positive_int,
        default=None,
        help="Number of snippets run concurrently (default: 4, or JSFEATURES_WORKERS)"
    )
    verify_parser.add_argument(
        "--node",
        metavar="PATH",
        default=None,
        help="Node.js executable to use (default: node on PATH, or JSFEATURES_NODE)"
    )
    verify_parser.add_argument(
        "--format",
        choices=["human", "json"],
        default="human",
        help="Output format (default: human)"
    )
    verify_parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print a status line for every snippet as it finishes"
    )
    verify_parser.set_defaults(func=cmd_verify)


__all__ = ["cmd_verify", "add_verify_command"]
