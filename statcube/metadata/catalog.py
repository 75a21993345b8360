"""
Dimension and codelist catalog of one statistical table.

The catalog is populated once from table metadata and is read-only
afterwards, except for the keyed slots holding resolved codelists and
preferred value orderings. A new table gets a new catalog.
"""

from __future__ import annotations

import difflib
from collections.abc import Callable, Iterator
from typing import Any

from pydantic import ValidationError

from ..errors import CodelistResolutionError, ModelError, NoSuchDimensionError
from ..logging import get_logger
from .codelist import Codelist, CodelistRef, resolve_codelist, sort_codelist_refs
from .dimension import Category, Dimension
from .schemas import TableMetadataSchema

__all__ = ["Catalog", "CodelistFetcher"]

CodelistFetcher = Callable[[str], Any]


class Catalog:
    """In-memory map of dimension code to Dimension, with lazily resolved
    codelists.

    ``dimension_ids`` is the metadata order of dimensions. It is the order
    queries and data responses use. ``heading`` and ``stub`` are hints for
    display only.
    """

    def __init__(
        self,
        dimensions: list[Dimension],
        heading: list[str] | None = None,
        stub: list[str] | None = None,
        label: str | None = None,
    ):
        self.label = label
        self._dimensions: dict[str, Dimension] = {}
        for dim in dimensions:
            if dim.code in self._dimensions:
                raise ModelError(f"Duplicate dimension '{dim.code}' in table metadata")
            self._dimensions[dim.code] = dim

        self.heading = [code for code in (heading or []) if code in self._dimensions]
        self.stub = [code for code in (stub or []) if code in self._dimensions]

        self._codelists: dict[str, Codelist] = {}
        self._value_order: dict[str, list[str]] = {}

        self.logger = get_logger()

    @classmethod
    def from_metadata(cls, metadata: dict[str, Any]) -> Catalog:
        """
        Create a catalog from JSON-stat 2 table metadata.

        Args:
            metadata: Table metadata with ``id``, ``dimension`` and optional
                ``extension.px.heading``/``stub``

        Returns:
            New Catalog

        Raises:
            ModelError: If metadata is malformed
        """
        try:
            schema = TableMetadataSchema.model_validate(metadata)
        except ValidationError as e:
            raise ModelError(f"Invalid table metadata: {e}") from e

        dimensions = []
        for code in schema.id:
            try:
                raw_dim = schema.dimension[code]
            except KeyError:
                raise ModelError(
                    f"Dimension '{code}' is listed in 'id' but has no metadata"
                ) from None

            category = raw_dim.category
            categories = [
                Category(code=cat_code, label=category.label.get(cat_code), index=i)
                for cat_code, i in category.positions().items()
            ]

            try:
                dimensions.append(
                    Dimension(
                        code=code,
                        label=raw_dim.label,
                        categories=categories,
                        eliminable=raw_dim.extension.elimination,
                        codelists=[
                            CodelistRef(id=ref.id, label=ref.label)
                            for ref in raw_dim.extension.codelists
                        ],
                    )
                )
            except ValidationError as e:
                raise ModelError(f"Invalid dimension '{code}': {e}") from e

        px = schema.extension.px
        return cls(dimensions, heading=px.heading, stub=px.stub, label=schema.label)

    # Dimension access

    @property
    def dimension_ids(self) -> list[str]:
        return list(self._dimensions)

    @property
    def dimensions(self) -> list[Dimension]:
        return list(self._dimensions.values())

    def dimension(self, code: str) -> Dimension:
        """
        Get dimension by code.

        Raises:
            NoSuchDimensionError: If dimension not found
        """
        try:
            return self._dimensions[code]
        except KeyError:
            suggestion = ""
            matches = difflib.get_close_matches(str(code), self._dimensions, n=1)
            if matches:
                suggestion = f" Did you mean '{matches[0]}'?"
            raise NoSuchDimensionError(
                f"Table has no dimension '{code}'.{suggestion}", code
            ) from None

    def __contains__(self, code: object) -> bool:
        return code in self._dimensions

    def __iter__(self) -> Iterator[Dimension]:
        return iter(self._dimensions.values())

    def __len__(self) -> int:
        return len(self._dimensions)

    def display_order(self) -> list[str]:
        """Dimension codes as presented: heading first, then stub, then any
        dimension not mentioned in either."""
        ordered = list(dict.fromkeys(self.heading + self.stub))
        return ordered + [code for code in self._dimensions if code not in ordered]

    # Value ordering

    def value_codes(self, code: str) -> list[str]:
        """Base category codes of a dimension in display order.

        Time dimensions are listed newest first. Other dimensions follow the
        preferred order recorded from their first codelist, with remaining
        codes appended in index order.
        """
        dimension = self.dimension(code)
        codes = dimension.codes

        if dimension.is_time:
            return list(reversed(codes))

        preferred = self._value_order.get(code)
        if not preferred:
            return codes

        known = set(codes)
        ordered = [c for c in dict.fromkeys(preferred) if c in known]
        placed = set(ordered)
        return ordered + [c for c in codes if c not in placed]

    def record_value_order(self, code: str, raw: Any) -> None:
        """Remember the flattened value-map order of a codelist resource as
        the preferred presentation order of dimension `code`."""
        self.dimension(code)
        values = raw.get("values") if isinstance(raw, dict) else None
        if not isinstance(values, list):
            return

        order: list[str] = []
        for item in values:
            if not isinstance(item, dict) or item.get("code") is None:
                continue
            value_map = item.get("valueMap")
            if isinstance(value_map, list) and value_map:
                order.extend(str(c) for c in value_map)
            else:
                order.append(str(item["code"]))
        self._value_order[code] = order

    def preload_value_order(self, fetcher: CodelistFetcher) -> None:
        """Fetch the first codelist (in presentation order) of every dimension
        that has codelists and record its ordering. Failures leave the
        dimension in index order."""
        for dimension in self:
            refs = self.codelist_refs(dimension.code)
            if not refs:
                continue
            first = refs[0].id
            try:
                raw = fetcher(first)
            except Exception as e:
                self.logger.warning(
                    f"Could not preload codelist '{first}' of dimension "
                    f"'{dimension.code}': {e}"
                )
                continue
            self.record_value_order(dimension.code, raw)

    # Codelists

    def codelist_refs(self, code: str) -> list[CodelistRef]:
        """Codelists of dimension `code` in presentation order."""
        return sort_codelist_refs(self.dimension(code).codelists)

    def load_codelist(self, code: str, codelist_id: str, raw: Any) -> Codelist:
        """Resolve a fetched codelist resource for dimension `code` and store
        it in the codelist slot for `codelist_id`.

        Raises:
            CodelistResolutionError: If the codelist is not offered by the
                dimension or the resource can not be resolved
        """
        dimension = self.dimension(code)
        if codelist_id not in {ref.id for ref in dimension.codelists}:
            raise CodelistResolutionError(
                f"Dimension '{code}' does not offer codelist '{codelist_id}'",
                codelist=codelist_id,
                dimension=code,
            )

        codelist = resolve_codelist(raw, dimension, codelist_id=codelist_id)
        self._codelists[codelist_id] = codelist
        return codelist

    def codelist(self, codelist_id: str) -> Codelist | None:
        """Previously resolved codelist, if any."""
        return self._codelists.get(codelist_id)

    def clear(self) -> None:
        """Forget resolved codelists and preferred orderings."""
        self._codelists.clear()
        self._value_order.clear()

    def __repr__(self):
        return f"<Catalog(dimensions={self.dimension_ids})>"
