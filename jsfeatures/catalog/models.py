"""
Data model for the feature catalog.

A :class:`FeatureEntry` documents one JavaScript behavior with an ordered
sequence of :class:`Snippet` values.  Each snippet is a literal piece of code
paired with the lines it prints, or with the failure it is documented to
raise.  Entries are immutable once built; the catalog hands out the same
objects to every reader.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from jsfeatures.catalog.values import JsValue, UnrenderableValueError, split_lines


class Category(str, Enum):
    """The fixed set of feature categories."""
    VARIABLE_DECLARATION = "variable-declaration"
    DESTRUCTURING = "destructuring"
    SPREAD_REST = "spread-rest"
    TEMPLATE_LITERAL = "template-literal"
    ARROW_FUNCTION = "arrow-function"
    ASYNC_CONTROL_FLOW = "async-control-flow"
    OBJECT_UTILITY = "object-utility"
    ERROR_HANDLING = "error-handling"

    @classmethod
    def parse(cls, value: Union[str, "Category"]) -> Optional["Category"]:
        """Return the matching category, or None for unknown names."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return None


class ErrorKind(str, Enum):
    """Classification of a failure observed while running a snippet."""
    REFERENCE = "ReferenceFailure"
    TYPE = "TypeFailure"
    RANGE = "RangeFailure"
    SYNTAX = "SyntaxFailure"
    URI = "URIFailure"
    UNCAUGHT = "UncaughtFailure"
    TIMEOUT = "Timeout"
    LAUNCH = "LaunchFailure"

    @classmethod
    def from_js_name(cls, name: str) -> "ErrorKind":
        """Map a JavaScript error constructor name onto a kind."""
        return _KIND_BY_JS_NAME.get(name, cls.UNCAUGHT)


_KIND_BY_JS_NAME: Dict[str, ErrorKind] = {
    "ReferenceError": ErrorKind.REFERENCE,
    "TypeError": ErrorKind.TYPE,
    "RangeError": ErrorKind.RANGE,
    "SyntaxError": ErrorKind.SYNTAX,
    "URIError": ErrorKind.URI,
}

# Kinds the verifier assigns itself; no snippet can be documented to raise them.
VERIFIER_ONLY_KINDS = frozenset({ErrorKind.TIMEOUT, ErrorKind.LAUNCH})


@dataclass(frozen=True)
class ExpectedLine:
    """
    One documented output item.

    Either literal ``text`` (which may span several printed lines) or a
    tagged ``value`` rendered the way ``console.log`` prints it.
    """
    text: Optional[str] = None
    value: Optional[JsValue] = None
    lines: Tuple[str, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        if (self.text is None) == (self.value is None):
            raise ValueError("Expected line must have exactly one of text or value")
        if self.value is not None:
            rendered = self.value.render()
        else:
            rendered = split_lines(self.text)
        object.__setattr__(self, "lines", tuple(rendered))

    @classmethod
    def from_dict(cls, data: Union[str, int, float, bool, None, Dict[str, Any]]) -> ExpectedLine:
        if isinstance(data, dict):
            if set(data) != {"value"}:
                raise ValueError(
                    f"Structured output lines take a single 'value' key, got {sorted(data)}"
                )
            return cls(value=JsValue.from_python(data["value"]))
        if isinstance(data, str):
            return cls(text=data)
        # Bare scalars in YAML (numbers, booleans, null) print as themselves.
        return cls(value=JsValue.from_python(data))


@dataclass(frozen=True)
class Snippet:
    """One literal, runnable example."""
    source: str
    expected_output: Tuple[ExpectedLine, ...] = ()
    may_throw: bool = False
    fails_with: Optional[ErrorKind] = None
    note: Optional[str] = None
    module: bool = False
    timeout: Optional[float] = None

    def __post_init__(self) -> None:
        lines = tuple(
            line if isinstance(line, ExpectedLine) else ExpectedLine(text=str(line))
            for line in self.expected_output
        )
        object.__setattr__(self, "expected_output", lines)
        if self.fails_with is not None:
            kind = ErrorKind(self.fails_with)
            if kind in VERIFIER_ONLY_KINDS:
                raise ValueError(
                    f"fails_with: {kind.value} is reported by the verifier, not raised by a snippet"
                )
            object.__setattr__(self, "fails_with", kind)
            object.__setattr__(self, "may_throw", True)

    @property
    def expected_lines(self) -> List[str]:
        """The exact lines the snippet is documented to print."""
        rendered: List[str] = []
        for line in self.expected_output:
            rendered.extend(line.lines)
        return rendered

    def is_well_formed(self) -> bool:
        return bool(self.expected_output) or self.may_throw

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Snippet:
        if "source" not in data:
            raise KeyError("source")
        raw_lines = data.get("expected_output")
        if raw_lines is None:
            raw_lines = []
        if not isinstance(raw_lines, list):
            raw_lines = [raw_lines]
        fails_with = data.get("fails_with")
        timeout = data.get("timeout")
        return cls(
            source=str(data["source"]),
            expected_output=tuple(ExpectedLine.from_dict(line) for line in raw_lines),
            may_throw=bool(data.get("may_throw", False)),
            fails_with=ErrorKind(fails_with) if fails_with is not None else None,
            note=data.get("note"),
            module=bool(data.get("module", False)),
            timeout=float(timeout) if timeout is not None else None,
        )


@dataclass(frozen=True)
class FeatureEntry:
    """
    One documented language behavior.

    ``category`` holds a :class:`Category` whenever the given name is valid;
    an unknown name is kept as the raw string so that registration can reject
    it with a precise error.
    """
    id: str
    category: Union[Category, str]
    description: str
    snippets: Tuple[Snippet, ...]
    title: Optional[str] = None
    tags: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        parsed = Category.parse(self.category)
        if parsed is not None:
            object.__setattr__(self, "category", parsed)
        object.__setattr__(self, "snippets", tuple(self.snippets))
        object.__setattr__(self, "tags", tuple(self.tags))

    @property
    def display_title(self) -> str:
        return self.title or self.id

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_category: Optional[str] = None) -> FeatureEntry:
        """Create an entry from its definition-file mapping."""
        category = data.get("category", default_category)
        if category is None:
            raise KeyError("category")
        return cls(
            id=str(data["id"]),
            category=category,
            description=str(data.get("description", "")).strip(),
            snippets=tuple(Snippet.from_dict(s) for s in data.get("snippets") or []),
            title=data.get("title"),
            tags=tuple(str(tag) for tag in data.get("tags", [])),
        )

    def matches(self, query: str) -> bool:
        needle = query.lower()
        haystacks: Sequence[str] = (self.id, self.title or "", self.description, *self.tags)
        return any(needle in text.lower() for text in haystacks)


__all__ = [
    "Category",
    "ErrorKind",
    "ExpectedLine",
    "Snippet",
    "FeatureEntry",
    "UnrenderableValueError",
]
