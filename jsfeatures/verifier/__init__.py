"""
Snippet verifier: executes catalog snippets with Node.js and scores them.
"""

from jsfeatures.verifier.engine import (
    EngineNotFoundError,
    Execution,
    Failure,
    NodeEngine,
    classify_failure,
)
from jsfeatures.verifier.results import Outcome, SnippetReport, VerificationResult
from jsfeatures.verifier.runner import (
    DEFAULT_TIMEOUT,
    DEFAULT_WORKERS,
    SnippetVerifier,
    score,
    select_entries,
)

__all__ = [
    "EngineNotFoundError",
    "Execution",
    "Failure",
    "NodeEngine",
    "classify_failure",
    "Outcome",
    "SnippetReport",
    "VerificationResult",
    "DEFAULT_TIMEOUT",
    "DEFAULT_WORKERS",
    "SnippetVerifier",
    "score",
    "select_entries",
]
