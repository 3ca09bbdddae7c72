"""
Snippet verifier: runs catalog snippets and scores them against their
documented output or failure.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Iterable, List, Optional, Tuple, Union

from jsfeatures.catalog.models import Category, ErrorKind, FeatureEntry, Snippet
from jsfeatures.catalog.registry import FeatureCatalog
from jsfeatures.verifier.engine import Execution, NodeEngine
from jsfeatures.verifier.results import Outcome, SnippetReport, VerificationResult


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0
DEFAULT_WORKERS = 4

ReportCallback = Callable[[SnippetReport], None]


def score(snippet: Snippet, execution: Execution, *, timeout: Optional[float] = None) -> VerificationResult:
    """
    Compare one execution with what the snippet documents.

    Pure function of its inputs; all engine interaction happens before it is
    called.
    """
    expected = snippet.expected_lines
    actual = list(execution.stdout_lines)

    def result(outcome: Outcome, **kwargs) -> VerificationResult:
        return VerificationResult(
            outcome=outcome,
            expected=expected,
            actual=actual,
            duration_ms=execution.duration_ms,
            stderr=execution.stderr,
            **kwargs,
        )

    if execution.timed_out:
        waited = f" after {timeout:g}s" if timeout else ""
        return result(
            Outcome.MISMATCH,
            error_kind=ErrorKind.TIMEOUT,
            error_message=f"snippet did not finish{waited}",
            reason=f"Timed out{waited} with work still pending",
        )

    failure = execution.failure
    if failure is None:
        if snippet.may_throw:
            wanted = snippet.fails_with.value if snippet.fails_with else "a failure"
            return result(
                Outcome.MISMATCH,
                reason=f"Expected {wanted} but the snippet completed normally",
            )
        if actual == expected:
            return result(Outcome.MATCH)
        return result(Outcome.MISMATCH, reason="Printed output differs from the documented output")

    failed = dict(error_kind=failure.kind, error_message=failure.message)
    if not snippet.may_throw:
        return result(
            Outcome.MISMATCH,
            reason=f"Unexpected {failure.kind.value}: {failure.message}",
            **failed,
        )
    if snippet.fails_with is not None and snippet.fails_with != failure.kind:
        return result(
            Outcome.MISMATCH,
            reason=f"Expected {snippet.fails_with.value} but observed {failure.kind.value}: {failure.message}",
            **failed,
        )
    if snippet.expected_output and actual != expected:
        return result(
            Outcome.MISMATCH,
            reason="Output printed before the failure differs from the documented output",
            **failed,
        )
    return result(Outcome.EXPECTED_FAILURE, **failed)


class SnippetVerifier:
    """
    Executes snippets with a JavaScript engine and scores the results.

    Per-snippet problems never propagate: an engine that cannot start, or any
    other fault while running one snippet, is reported as a mismatch for that
    snippet alone.
    """

    def __init__(
        self,
        engine: Optional[NodeEngine] = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        workers: int = DEFAULT_WORKERS,
    ) -> None:
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.engine = engine or NodeEngine()
        self.timeout = timeout
        self.workers = workers

    def verify(self, snippet: Snippet) -> VerificationResult:
        return asyncio.run(self.verify_async(snippet))

    async def verify_async(self, snippet: Snippet) -> VerificationResult:
        timeout = snippet.timeout or self.timeout
        start_time = time.time()
        try:
            execution = await self.engine.execute(
                snippet.source,
                timeout=timeout,
                module=snippet.module,
            )
            return score(snippet, execution, timeout=timeout)
        except Exception as exc:
            logger.warning(f"Engine failed to run snippet: {exc}")
            return VerificationResult(
                outcome=Outcome.MISMATCH,
                expected=snippet.expected_lines,
                error_kind=ErrorKind.LAUNCH,
                error_message=str(exc),
                reason=f"Engine could not run the snippet: {exc}",
                duration_ms=(time.time() - start_time) * 1000,
            )

    def verify_all(
        self,
        catalog: FeatureCatalog,
        category: Optional[Union[Category, str]] = None,
        ids: Optional[Iterable[str]] = None,
        on_result: Optional[ReportCallback] = None,
    ) -> List[SnippetReport]:
        return asyncio.run(self.verify_all_async(catalog, category, ids, on_result))

    async def verify_all_async(
        self,
        catalog: FeatureCatalog,
        category: Optional[Union[Category, str]] = None,
        ids: Optional[Iterable[str]] = None,
        on_result: Optional[ReportCallback] = None,
    ) -> List[SnippetReport]:
        """
        Verify every selected snippet, in catalog order.

        Snippets run concurrently, at most ``workers`` at a time; the returned
        reports follow catalog order regardless of completion order.

        Raises:
            NotFoundError: If ``ids`` names an entry that is not in the catalog
        """
        entries = select_entries(catalog, category, ids)
        jobs: List[Tuple[FeatureEntry, int, Snippet]] = [
            (entry, index, snippet)
            for entry in entries
            for index, snippet in enumerate(entry.snippets)
        ]
        logger.info(f"Verifying {len(jobs)} snippets from {len(entries)} entries with {self.workers} workers")

        semaphore = asyncio.Semaphore(self.workers)

        async def run_one(entry: FeatureEntry, index: int, snippet: Snippet) -> SnippetReport:
            async with semaphore:
                result = await self.verify_async(snippet)
            report = SnippetReport(
                entry_id=entry.id,
                snippet_index=index,
                result=result,
                category=entry.category.value,
            )
            logger.debug(f"{entry.id}[{index}]: {result.outcome.label}")
            if on_result is not None:
                on_result(report)
            return report

        reports = await asyncio.gather(*(run_one(*job) for job in jobs))
        return list(reports)


def select_entries(
    catalog: FeatureCatalog,
    category: Optional[Union[Category, str]] = None,
    ids: Optional[Iterable[str]] = None,
) -> List[FeatureEntry]:
    """Entries matching both filters, in catalog order."""
    entries = catalog.all() if category is None else catalog.list_by_category(category)
    if ids is None:
        return entries
    wanted = list(ids)
    for entry_id in wanted:
        catalog.get(entry_id)
    selected = set(wanted)
    return [entry for entry in entries if entry.id in selected]


__all__ = [
    "DEFAULT_TIMEOUT",
    "DEFAULT_WORKERS",
    "SnippetVerifier",
    "score",
    "select_entries",
]
