"""Error model for catalog construction and lookup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorLocation:
    path: Optional[str] = None
    entry_id: Optional[str] = None
    snippet_index: Optional[int] = None

    def describe(self) -> str:
        parts = []
        if self.path:
            parts.append(self.path)
        if self.entry_id:
            parts.append(f"entry '{self.entry_id}'")
        if self.snippet_index is not None:
            parts.append(f"snippet {self.snippet_index}")
        if not parts:
            return "unknown location"
        return ", ".join(parts)


class CatalogError(Exception):
    """Base class for all catalog faults surfaced to users."""

    code: Optional[str] = None
    hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        entry_id: Optional[str] = None,
        snippet_index: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.location = ErrorLocation(path=path, entry_id=entry_id, snippet_index=snippet_index)
        self.path = path
        self.entry_id = entry_id
        self.snippet_index = snippet_index
        if code is not None:
            self.code = code
        if hint is not None:
            self.hint = hint

    def format(self) -> str:
        components = [self.message]
        meta_parts = []
        location_desc = self.location.describe()
        if location_desc != "unknown location":
            meta_parts.append(location_desc)
        if self.code:
            meta_parts.append(self.code)
        if meta_parts:
            components[-1] = f"{components[-1]} ({'; '.join(meta_parts)})"
        if self.hint:
            components.append(f"Hint: {self.hint}")
        return " ".join(part for part in components if part)


class DuplicateIdError(CatalogError):
    """Raised when an entry id is registered twice."""

    code = "DUPLICATE_ID"


class InvalidCategoryError(CatalogError):
    """Raised when an entry names a category outside the fixed set."""

    code = "INVALID_CATEGORY"


class EmptySnippetError(CatalogError):
    """Raised for an entry without snippets, or a snippet with nothing to check."""

    code = "EMPTY_SNIPPET"


class NotFoundError(CatalogError, KeyError):
    """Raised when looking up an id that is not in the catalog."""

    code = "NOT_FOUND"

    def __str__(self) -> str:
        return self.message


class CatalogFormatError(CatalogError):
    """Raised when a definition file cannot be read or is ill-formed."""

    code = "CATALOG_FORMAT"


class CatalogSealedError(CatalogError):
    """Raised when registering into a catalog that has finished loading."""

    code = "CATALOG_SEALED"


__all__ = [
    "CatalogError",
    "DuplicateIdError",
    "InvalidCategoryError",
    "EmptySnippetError",
    "NotFoundError",
    "CatalogFormatError",
    "CatalogSealedError",
    "ErrorLocation",
]
