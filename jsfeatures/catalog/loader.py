"""
Loading the catalog from YAML definition files.

Each definition file holds a list of entries and an optional file-level
category applied to entries that do not name their own:

.. code-block:: yaml

    category: spread-rest
    entries:
      - id: spread-merge-objects
        description: Later keys win when objects are merged with spread.
        snippets:
          - source: |
              const merged = { ...{ a: 1, b: 2 }, ...{ b: 3, c: 4 } };
              console.log(merged);
            expected_output:
              - value: {a: 1, b: 3, c: 4}

The load is all-or-nothing: any fault in any file aborts it.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import yaml

from jsfeatures.catalog.models import FeatureEntry
from jsfeatures.catalog.registry import FeatureCatalog
from jsfeatures.catalog.values import UnrenderableValueError
from jsfeatures.errors import CatalogError, CatalogFormatError


logger = logging.getLogger(__name__)

BUILTIN_DATA_DIR = Path(__file__).resolve().parent / "data"
DEFINITION_SUFFIXES = (".yaml", ".yml")


def iter_definition_files(paths: Iterable[Union[str, Path]]) -> List[Path]:
    """
    Expand files and directories into an ordered list of definition files.

    Directories are searched recursively and their files sorted by path so
    that registration order is stable between runs.
    """
    files: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            found = sorted(
                p for p in path.rglob("*") if p.is_file() and p.suffix in DEFINITION_SUFFIXES
            )
            files.extend(found)
        elif path.is_file():
            files.append(path)
        else:
            raise CatalogFormatError(
                f"Catalog path does not exist: {path}",
                path=str(path),
            )
    return files


def _read_definition(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise CatalogFormatError(f"Cannot read definition file: {exc}", path=str(path)) from exc
    except yaml.YAMLError as exc:
        raise CatalogFormatError(f"Invalid YAML: {exc}", path=str(path)) from exc

    if data is None:
        return {"entries": []}
    if isinstance(data, list):
        return {"entries": data}
    if not isinstance(data, dict):
        raise CatalogFormatError(
            "Definition file must be a mapping with an 'entries' list",
            path=str(path),
        )
    return data


def load_definition_file(path: Path) -> List[FeatureEntry]:
    """Parse one definition file into feature entries (not yet registered)."""
    data = _read_definition(path)
    default_category = data.get("category")
    raw_entries = data.get("entries") or []
    if not isinstance(raw_entries, list):
        raise CatalogFormatError("'entries' must be a list", path=str(path))

    entries: List[FeatureEntry] = []
    for position, raw in enumerate(raw_entries):
        if not isinstance(raw, dict):
            raise CatalogFormatError(f"Entry #{position} must be a mapping", path=str(path))
        entry_id = raw.get("id")
        try:
            entries.append(FeatureEntry.from_dict(raw, default_category=default_category))
        except KeyError as exc:
            raise CatalogFormatError(
                f"Entry #{position} is missing required field {exc}",
                path=str(path),
                entry_id=entry_id,
            ) from exc
        except UnrenderableValueError as exc:
            raise CatalogFormatError(
                f"Expected value cannot be rendered: {exc}",
                path=str(path),
                entry_id=entry_id,
            ) from exc
        except (TypeError, ValueError) as exc:
            raise CatalogFormatError(str(exc), path=str(path), entry_id=entry_id) from exc
    return entries


def load_catalog(
    paths: Optional[Sequence[Union[str, Path]]] = None,
    *,
    include_builtin: bool = True,
) -> FeatureCatalog:
    """
    Build and seal a catalog from definition files.

    Args:
        paths: Extra files or directories to load after the built-in data
        include_builtin: Whether to load the definitions shipped with the package

    Returns:
        A sealed catalog

    Raises:
        CatalogError: On the first fault; no partial catalog is returned
    """
    sources: List[Path] = []
    if include_builtin:
        sources.append(BUILTIN_DATA_DIR)
    sources.extend(Path(p) for p in paths or [])

    catalog = FeatureCatalog()
    for path in iter_definition_files(sources):
        for entry in load_definition_file(path):
            try:
                catalog.register(entry)
            except CatalogError as exc:
                if exc.path is None:
                    exc.path = str(path)
                    exc.location.path = str(path)
                raise
    catalog.seal()

    logger.info(
        f"Loaded feature catalog with {len(catalog)} entries and "
        f"{catalog.snippet_count()} snippets"
    )
    return catalog


@lru_cache(maxsize=1)
def default_catalog() -> FeatureCatalog:
    """The built-in catalog, loaded once per process."""
    return load_catalog()


__all__ = [
    "BUILTIN_DATA_DIR",
    "iter_definition_files",
    "load_definition_file",
    "load_catalog",
    "default_catalog",
]
