"""
Feature catalog: data model, registry and loader.
"""

from jsfeatures.catalog.models import (
    Category,
    ErrorKind,
    ExpectedLine,
    FeatureEntry,
    Snippet,
)
from jsfeatures.catalog.registry import FeatureCatalog
from jsfeatures.catalog.loader import (
    BUILTIN_DATA_DIR,
    default_catalog,
    load_catalog,
    load_definition_file,
)
from jsfeatures.catalog.values import JsValue, ValueKind, render_value

__all__ = [
    "Category",
    "ErrorKind",
    "ExpectedLine",
    "FeatureEntry",
    "Snippet",
    "FeatureCatalog",
    "BUILTIN_DATA_DIR",
    "default_catalog",
    "load_catalog",
    "load_definition_file",
    "JsValue",
    "ValueKind",
    "render_value",
]
