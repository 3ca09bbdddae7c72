"""Result types produced by the snippet verifier."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from jsfeatures.catalog.models import ErrorKind


class Outcome(str, Enum):
    """Score of one verified snippet."""
    MATCH = "match"
    EXPECTED_FAILURE = "expected_failure"
    MISMATCH = "mismatch"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Outcome.MATCH: "Match",
    Outcome.EXPECTED_FAILURE: "ExpectedFailure",
    Outcome.MISMATCH: "Mismatch",
}


@dataclass
class VerificationResult:
    """
    Outcome of running one snippet.

    ``duration_ms`` and ``stderr`` vary between runs and are excluded from
    equality, so verifying the same snippet twice yields equal results.
    """
    outcome: Outcome
    expected: List[str] = field(default_factory=list)
    actual: List[str] = field(default_factory=list)
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None
    reason: Optional[str] = None
    duration_ms: float = field(default=0.0, compare=False)
    stderr: str = field(default="", compare=False)

    @property
    def ok(self) -> bool:
        return self.outcome != Outcome.MISMATCH

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for JSON serialization."""
        return {
            "outcome": self.outcome.label,
            "expected": list(self.expected),
            "actual": list(self.actual),
            "error_kind": self.error_kind.value if self.error_kind else None,
            "error_message": self.error_message,
            "reason": self.reason,
            "duration_ms": round(self.duration_ms, 2),
        }


@dataclass(frozen=True)
class SnippetReport:
    """A verification result tagged with the snippet it belongs to."""
    entry_id: str
    snippet_index: int
    result: VerificationResult
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "entry_id": self.entry_id,
            "snippet_index": self.snippet_index,
            "category": self.category,
        }
        payload.update(self.result.to_dict())
        return payload


__all__ = ["Outcome", "VerificationResult", "SnippetReport"]
