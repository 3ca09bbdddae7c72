"""In-memory registry of feature entries."""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Union

from jsfeatures.catalog.models import Category, FeatureEntry
from jsfeatures.errors import (
    CatalogSealedError,
    DuplicateIdError,
    EmptySnippetError,
    InvalidCategoryError,
    NotFoundError,
)


logger = logging.getLogger(__name__)


class FeatureCatalog:
    """
    Registry of all documented features, in registration order.

    The catalog is filled once at start-up and then sealed; after that it is
    only read, so any number of verification workers may share it.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, FeatureEntry] = {}
        self._sealed = False

    def register(self, entry: FeatureEntry) -> FeatureEntry:
        """
        Insert an entry.

        All checks run before the entry is stored, so a rejected entry leaves
        the catalog unchanged.

        Raises:
            CatalogSealedError: If the catalog has finished loading
            DuplicateIdError: If an entry with the same id exists
            InvalidCategoryError: If the category is outside the fixed set
            EmptySnippetError: If the entry has no snippets, or a snippet has
                neither expected output nor a documented failure
        """
        if self._sealed:
            raise CatalogSealedError(
                f"Cannot register '{entry.id}': the catalog is sealed",
                entry_id=entry.id,
            )
        if entry.id in self._entries:
            raise DuplicateIdError(
                f"Feature id '{entry.id}' is already registered",
                entry_id=entry.id,
                hint="Feature ids must be unique across all definition files",
            )
        if not isinstance(entry.category, Category):
            allowed = ", ".join(c.value for c in Category)
            raise InvalidCategoryError(
                f"Unknown category '{entry.category}'",
                entry_id=entry.id,
                hint=f"Use one of: {allowed}",
            )
        if not entry.snippets:
            raise EmptySnippetError(
                f"Feature '{entry.id}' has no snippets",
                entry_id=entry.id,
            )
        for index, snippet in enumerate(entry.snippets):
            if not snippet.is_well_formed():
                raise EmptySnippetError(
                    "Snippet documents neither output nor an expected failure",
                    entry_id=entry.id,
                    snippet_index=index,
                    hint="Add expected_output lines or set may_throw/fails_with",
                )

        self._entries[entry.id] = entry
        logger.debug(f"Registered feature {entry.id} ({entry.category.value}, {len(entry.snippets)} snippets)")
        return entry

    def get(self, entry_id: str) -> FeatureEntry:
        try:
            return self._entries[entry_id]
        except KeyError:
            raise NotFoundError(
                f"No feature with id '{entry_id}'",
                entry_id=entry_id,
                hint="Run 'jsfeatures list' or 'jsfeatures search' to find ids",
            ) from None

    def list_by_category(self, category: Union[Category, str]) -> List[FeatureEntry]:
        """Entries of one category in registration order (empty when none match)."""
        wanted = Category.parse(category)
        if wanted is None:
            logger.debug(f"Category filter '{category}' matches no known category")
            return []
        return [entry for entry in self._entries.values() if entry.category == wanted]

    def all(self) -> List[FeatureEntry]:
        return list(self._entries.values())

    def search(self, query: str) -> List[FeatureEntry]:
        """Entries whose id, title, description or tags contain ``query``."""
        query = query.strip()
        if not query:
            return []
        return [entry for entry in self._entries.values() if entry.matches(query)]

    def category_counts(self) -> Dict[Category, int]:
        counts = {category: 0 for category in Category}
        for entry in self._entries.values():
            counts[entry.category] += 1
        return counts

    def snippet_count(self) -> int:
        return sum(len(entry.snippets) for entry in self._entries.values())

    def seal(self) -> None:
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._entries

    def __iter__(self) -> Iterator[FeatureEntry]:
        return iter(list(self._entries.values()))


__all__ = ["FeatureCatalog"]
