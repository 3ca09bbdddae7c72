"""
Rendering of verification results.

All functions here are pure formatting over already computed reports.
"""

from __future__ import annotations

import difflib
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional

from jsfeatures import __version__
from jsfeatures.catalog.models import Category
from jsfeatures.catalog.registry import FeatureCatalog
from jsfeatures.verifier.results import Outcome, SnippetReport


SYMBOLS = {
    Outcome.MATCH: "✓",
    Outcome.EXPECTED_FAILURE: "✓",
    Outcome.MISMATCH: "✗",
}

RULE = "=" * 60


def _count(reports: Iterable[SnippetReport]) -> Dict[Outcome, int]:
    counts = {outcome: 0 for outcome in Outcome}
    for report in reports:
        counts[report.result.outcome] += 1
    return counts


def _by_category(reports: List[SnippetReport]) -> "OrderedDict[str, List[SnippetReport]]":
    grouped: "OrderedDict[str, List[SnippetReport]]" = OrderedDict(
        (category.value, []) for category in Category
    )
    for report in reports:
        grouped.setdefault(report.category or "uncategorized", []).append(report)
    return OrderedDict((name, items) for name, items in grouped.items() if items)


def _title(report: SnippetReport, catalog: Optional[FeatureCatalog]) -> str:
    if catalog is not None and report.entry_id in catalog:
        return catalog.get(report.entry_id).display_title
    return report.entry_id


def render_line(report: SnippetReport) -> str:
    """One status line for a single snippet."""
    result = report.result
    line = (
        f"{SYMBOLS[result.outcome]} [{result.outcome.label:15}] "
        f"{report.entry_id}[{report.snippet_index}]"
    )
    if result.error_kind is not None:
        line += f" ({result.error_kind.value})"
    if result.outcome == Outcome.MISMATCH and result.reason:
        line += f": {result.reason}"
    return line


def render_diff(expected: List[str], actual: List[str]) -> List[str]:
    """Unified diff of expected against actual output lines."""
    return list(
        difflib.unified_diff(
            expected,
            actual,
            fromfile="expected",
            tofile="actual",
            lineterm="",
        )
    )


def render_summary(reports: List[SnippetReport], catalog: Optional[FeatureCatalog] = None) -> str:
    """
    Human-readable summary of a verification run.

    Shows totals, per-category counts and then every mismatch with its
    reason and a diff of the documented against the observed output.
    """
    if not reports:
        return "No snippets verified"

    reports = list(reports)
    counts = _count(reports)
    total = len(reports)
    passed = counts[Outcome.MATCH] + counts[Outcome.EXPECTED_FAILURE]

    lines = [
        RULE,
        "SNIPPET VERIFICATION SUMMARY",
        RULE,
        f"Total:            {total}",
        f"Match:            {counts[Outcome.MATCH]}",
        f"ExpectedFailure:  {counts[Outcome.EXPECTED_FAILURE]}",
        f"Mismatch:         {counts[Outcome.MISMATCH]}",
        f"Verified:         {passed}/{total} ({passed / total * 100:.1f}%)",
        RULE,
        "",
        "By category:",
    ]
    for name, items in _by_category(reports).items():
        group = _count(items)
        lines.append(
            f"  {name:22} {group[Outcome.MATCH]:3} match  "
            f"{group[Outcome.EXPECTED_FAILURE]:3} expected-failure  "
            f"{group[Outcome.MISMATCH]:3} mismatch"
        )

    mismatches = [r for r in reports if r.result.outcome == Outcome.MISMATCH]
    if mismatches:
        lines.append("")
        lines.append("Mismatches:")
        for report in mismatches:
            result = report.result
            lines.append(f"  - {report.entry_id}[{report.snippet_index}] {_title(report, catalog)}")
            if result.reason:
                lines.append(f"    {result.reason}")
            if result.expected != result.actual:
                for diff_line in render_diff(result.expected, result.actual):
                    lines.append(f"    {diff_line}")
    return "\n".join(lines)


def reports_to_dict(
    reports: List[SnippetReport],
    catalog: Optional[FeatureCatalog] = None,
    filters: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """JSON-serializable payload of a verification run."""
    counts = _count(reports)
    results = []
    for report in reports:
        payload = report.to_dict()
        payload["title"] = _title(report, catalog)
        results.append(payload)
    return {
        "jsfeatures_version": __version__,
        "filters": filters or {},
        "summary": {
            "total": len(reports),
            "match": counts[Outcome.MATCH],
            "expected_failure": counts[Outcome.EXPECTED_FAILURE],
            "mismatch": counts[Outcome.MISMATCH],
        },
        "results": results,
    }


__all__ = ["render_line", "render_diff", "render_summary", "reports_to_dict"]
