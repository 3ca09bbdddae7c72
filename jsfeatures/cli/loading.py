"""
Catalog loading for CLI operations.
"""

import argparse
from pathlib import Path
from typing import List

from ..catalog import FeatureCatalog, default_catalog, load_catalog
from .context import get_cli_context
from .errors import CLIFileNotFoundError


def catalog_paths_from_args(args: argparse.Namespace) -> List[Path]:
    """Configured catalog paths followed by any given with --catalog."""
    ctx = get_cli_context(args)
    paths = list(ctx.settings.catalog_paths)
    for raw in getattr(args, "catalog", None) or []:
        path = Path(raw)
        if not path.is_absolute():
            path = (ctx.workspace_root / path).resolve()
        paths.append(path)
    return paths


def load_cli_catalog(args: argparse.Namespace) -> FeatureCatalog:
    """
    Load the catalog selected by workspace settings and command-line flags.

    The built-in catalog is shared through :func:`default_catalog` when no
    extra definition files are involved.

    Raises:
        CLIFileNotFoundError: If a --catalog path does not exist
        CatalogError: If any definition file is invalid
    """
    ctx = get_cli_context(args)
    paths = catalog_paths_from_args(args)
    include_builtin = ctx.settings.include_builtin and not getattr(args, "no_builtin", False)

    for path in paths:
        if not path.exists():
            raise CLIFileNotFoundError(
                f"Catalog path not found: {path}",
                hint="Check the --catalog argument or the [verifier] catalog setting",
            )

    if not paths and include_builtin:
        return default_catalog()
    return load_catalog(paths, include_builtin=include_builtin)


def add_catalog_arguments(parser: argparse.ArgumentParser) -> None:
    """Options shared by every command that reads the catalog."""
    parser.add_argument(
        '--catalog',
        action='append',
        default=[],
        metavar='PATH',
        help='Extra definition file or directory (may be provided multiple times)'
    )
    parser.add_argument(
        '--no-builtin',
        action='store_true',
        help='Do not load the definitions shipped with jsfeatures'
    )


__all__ = ["add_catalog_arguments", "catalog_paths_from_args", "load_cli_catalog"]
