"""
Table metadata: dimensions, categories and codelists.

Raw JSON-stat 2 metadata and codelist resources are validated with Pydantic
schemas and turned into read-only metadata objects held by a Catalog.
"""

from .base import MetadataObject
from .catalog import Catalog, CodelistFetcher
from .codelist import (
    Codelist,
    CodelistEntry,
    CodelistKind,
    CodelistRef,
    effective_eliminable,
    resolve_codelist,
    sort_codelist_refs,
)
from .dimension import Category, Dimension

__all__ = [
    "MetadataObject",
    "Category",
    "Dimension",
    "CodelistKind",
    "CodelistRef",
    "CodelistEntry",
    "Codelist",
    "Catalog",
    "CodelistFetcher",
    "effective_eliminable",
    "resolve_codelist",
    "sort_codelist_refs",
]
