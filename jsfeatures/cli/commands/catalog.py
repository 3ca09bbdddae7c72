"""
Catalog browsing commands: list, show, search and categories.
"""

import argparse

from ...catalog import Category
from ...errors import CatalogError, NotFoundError
from ..errors import CLIError, handle_cli_exception
from ..loading import add_catalog_arguments, load_cli_catalog
from ..output import format_category_counts, format_entry, print_entry_rows


def cmd_list(args: argparse.Namespace) -> int:
    """List catalog entries, optionally limited to one category."""
    try:
        catalog = load_cli_catalog(args)
    except (CLIError, CatalogError) as exc:
        handle_cli_exception(exc, exit_code=2)
        return 2

    entries = catalog.list_by_category(args.category) if args.category else catalog.all()
    print_entry_rows(entries)
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Print one entry with all of its snippets."""
    try:
        catalog = load_cli_catalog(args)
        entry = catalog.get(args.id)
    except NotFoundError as exc:
        handle_cli_exception(exc, exit_code=1)
        return 1
    except (CLIError, CatalogError) as exc:
        handle_cli_exception(exc, exit_code=2)
        return 2

    print(format_entry(entry))
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    """Search ids, titles, descriptions and tags; exit 1 when nothing matches."""
    try:
        catalog = load_cli_catalog(args)
    except (CLIError, CatalogError) as exc:
        handle_cli_exception(exc, exit_code=2)
        return 2

    found = print_entry_rows(catalog.search(args.query))
    if not found:
        print(f"No features match '{args.query}'")
        return 1
    return 0


def cmd_categories(args: argparse.Namespace) -> int:
    """Print the number of entries in every category."""
    try:
        catalog = load_cli_catalog(args)
    except (CLIError, CatalogError) as exc:
        handle_cli_exception(exc, exit_code=2)
        return 2

    print(format_category_counts(catalog.category_counts()))
    return 0


def add_catalog_commands(subparsers: argparse._SubParsersAction) -> None:
    """Add the catalog browsing commands to the CLI."""
    list_parser = subparsers.add_parser('list', help='List documented features')
    list_parser.add_argument(
        '--category',
        choices=[category.value for category in Category],
        help='Only list entries of this category'
    )
    add_catalog_arguments(list_parser)
    list_parser.set_defaults(func=cmd_list)

    show_parser = subparsers.add_parser('show', help='Show one feature with its snippets')
    show_parser.add_argument('id', help='Feature id (see "jsfeatures list")')
    add_catalog_arguments(show_parser)
    show_parser.set_defaults(func=cmd_show)

    search_parser = subparsers.add_parser('search', help='Search features by keyword')
    search_parser.add_argument('query', help='Case-insensitive text to look for')
    add_catalog_arguments(search_parser)
    search_parser.set_defaults(func=cmd_search)

    categories_parser = subparsers.add_parser('categories', help='Count features per category')
    add_catalog_arguments(categories_parser)
    categories_parser.set_defaults(func=cmd_categories)


__all__ = [
    "cmd_list",
    "cmd_show",
    "cmd_search",
    "cmd_categories",
    "add_catalog_commands",
]
