"""
Output formatting for catalog commands.
"""

import textwrap
from typing import Dict, Iterable, List

from ..catalog import Category, FeatureEntry, Snippet


def format_entry_row(entry: FeatureEntry) -> str:
    return f"{entry.id:40} {entry.category.value:22} {entry.display_title}"


def print_entry_rows(entries: Iterable[FeatureEntry]) -> int:
    """Print one row per entry and return how many were printed."""
    count = 0
    for entry in entries:
        print(format_entry_row(entry))
        count += 1
    return count


def _snippet_lines(index: int, snippet: Snippet) -> List[str]:
    heading = f"Snippet {index}"
    if snippet.note:
        heading += f": {snippet.note}"
    if snippet.module:
        heading += " [module]"
    lines = [heading]
    lines.extend(f"    {line}" for line in snippet.source.rstrip("\n").splitlines())
    if snippet.expected_output:
        lines.append("  Output:")
        lines.extend(f"    {line}" for line in snippet.expected_lines)
    if snippet.fails_with is not None:
        lines.append(f"  Fails with: {snippet.fails_with.value}")
    elif snippet.may_throw:
        lines.append("  Fails with: any uncaught error")
    return lines


def format_entry(entry: FeatureEntry) -> str:
    """
    Full human-readable view of one entry with all of its snippets.

    Examples:
        >>> print(format_entry(entry))  # doctest: +SKIP
        Merging objects
        id: spread-merge-objects  category: spread-rest
        ...
    """
    lines = [
        entry.display_title,
        f"id: {entry.id}  category: {entry.category.value}",
    ]
    if entry.tags:
        lines.append(f"tags: {', '.join(entry.tags)}")
    if entry.description:
        lines.append("")
        lines.extend(textwrap.wrap(entry.description, width=78))
    for index, snippet in enumerate(entry.snippets):
        lines.append("")
        lines.extend(_snippet_lines(index, snippet))
    return "\n".join(lines)


def format_category_counts(counts: Dict[Category, int]) -> str:
    lines = [f"{category.value:22} {count:4}" for category, count in counts.items()]
    lines.append(f"{'total':22} {sum(counts.values()):4}")
    return "\n".join(lines)


__all__ = [
    "format_category_counts",
    "format_entry",
    "format_entry_row",
    "print_entry_rows",
]
