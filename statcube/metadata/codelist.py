"""
Codelists: alternate, named groupings of a dimension's categories.

A codelist either filters the base categories (every entry maps to itself)
or aggregates them (an entry stands for one or more base categories listed
in its value map). Only references to codelists are part of table metadata;
entries are fetched and resolved lazily.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
)

from ..errors import CodelistResolutionError
from ..logging import get_logger
from .base import MetadataObject
from .schemas import CodelistResourceSchema

if TYPE_CHECKING:
    from .dimension import Dimension

__all__ = [
    "CodelistKind",
    "CodelistRef",
    "CodelistEntry",
    "Codelist",
    "sort_codelist_refs",
    "resolve_codelist",
    "effective_eliminable",
]


class CodelistKind(str, Enum):
    """Naming convention of codelist ids."""

    VALUESET = "vs"
    AGGREGATION = "agg"
    OTHER = "other"


class CodelistRef(BaseModel):
    """Reference to a codelist as listed in dimension metadata."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1)
    label: str | None = None

    @property
    def kind(self) -> CodelistKind:
        lower = self.id.lower()
        if lower.startswith("vs_"):
            return CodelistKind.VALUESET
        if lower.startswith("agg_"):
            return CodelistKind.AGGREGATION
        return CodelistKind.OTHER

    def get_label(self) -> str:
        return self.label or self.id


_KIND_ORDER = {
    CodelistKind.VALUESET: 0,
    CodelistKind.OTHER: 1,
    CodelistKind.AGGREGATION: 2,
}


def sort_codelist_refs(refs: list[CodelistRef]) -> list[CodelistRef]:
    """Presentation order of codelists: ``vs_`` first, unprefixed next,
    ``agg_`` last. Order within a group is preserved."""
    return sorted(refs, key=lambda ref: _KIND_ORDER[ref.kind])


class CodelistEntry(MetadataObject):
    """One value of a codelist and the base category codes it represents."""

    value_map: list[str] = Field(..., min_length=1)

    @field_validator("value_map", mode="before")
    @classmethod
    def stringify_codes(cls, v: Any) -> Any:
        if isinstance(v, list | tuple):
            return [str(code) for code in v]
        return v

    @property
    def is_singleton(self) -> bool:
        """Entry maps exactly to itself (filter-style entry)."""
        return self.value_map == [self.code]


class Codelist(BaseModel):
    """A resolved codelist."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(..., min_length=1)
    label: str | None = None
    eliminable: bool = Field(
        False, description="Codelist allows the dimension to be eliminated"
    )
    entries: list[CodelistEntry] = Field(default_factory=list)
    skipped: int = Field(0, ge=0, description="Number of malformed entries dropped")

    @computed_field
    @property
    def is_aggregated(self) -> bool:
        """True when any entry represents something else than itself."""
        return any(not entry.is_singleton for entry in self.entries)

    @computed_field
    @property
    def original_codes(self) -> list[str]:
        """Ordered union of base category codes covered by the codelist."""
        seen: dict[str, None] = {}
        for entry in self.entries:
            for code in entry.value_map:
                seen.setdefault(code, None)
        return list(seen)

    @property
    def codes(self) -> list[str]:
        """Entry codes in codelist order."""
        return [entry.code for entry in self.entries]

    def entry(self, code: str) -> CodelistEntry:
        for entry in self.entries:
            if entry.code == code:
                return entry
        raise KeyError(code)

    def expand(self, codes) -> list[str]:
        """Expand entry `codes` to base category codes, in entry order and
        without duplicates."""
        wanted = set(codes)
        seen: dict[str, None] = {}
        for entry in self.entries:
            if entry.code in wanted:
                for code in entry.value_map:
                    seen.setdefault(code, None)
        return list(seen)

    def get_label(self) -> str:
        return self.label or self.id

    def __repr__(self):
        return f"<Codelist(id='{self.id}', entries={len(self.entries)})>"


def effective_eliminable(dimension: Dimension, codelist: Codelist | None) -> bool:
    """A codelist may make a mandatory dimension optional, never the
    reverse."""
    if codelist is None:
        return dimension.eliminable
    return dimension.eliminable or codelist.eliminable


def resolve_codelist(
    raw: Any, dimension: Dimension | None = None, codelist_id: str | None = None
) -> Codelist:
    """
    Build a Codelist from a raw codelist resource.

    Malformed entries do not fail the resolution: an entry without a code is
    skipped, an entry without a usable value map maps to itself. When
    `dimension` is given, value-map codes that are not categories of the
    dimension are dropped and an entry left without codes is skipped.

    Args:
        raw: Codelist resource ``{id, label, elimination, values}``
        dimension: Dimension the codelist belongs to
        codelist_id: Requested id; takes precedence over the id of the resource

    Returns:
        Resolved Codelist

    Raises:
        CodelistResolutionError: If the resource shape is unusable
    """
    logger = get_logger()
    dim_code = dimension.code if dimension is not None else None

    if not isinstance(raw, dict):
        raise CodelistResolutionError(
            f"Codelist resource must be a mapping, got {type(raw).__name__}",
            codelist=codelist_id,
            dimension=dim_code,
        )

    try:
        resource = CodelistResourceSchema.model_validate(raw)
    except ValidationError as e:
        raise CodelistResolutionError(
            f"Invalid codelist resource: {e}",
            codelist=codelist_id,
            dimension=dim_code,
            cause=e,
        ) from e

    cl_id = codelist_id or resource.id
    if not cl_id:
        raise CodelistResolutionError(
            "Codelist resource has no id", dimension=dim_code
        )

    entries: list[CodelistEntry] = []
    skipped = 0
    seen_codes: set[str] = set()

    for position, item in enumerate(resource.values):
        code = item.get("code") if isinstance(item, dict) else None
        if code is None or str(code).strip() == "":
            logger.warning(
                f"Codelist '{cl_id}' entry {position} has no code, skipping"
            )
            skipped += 1
            continue
        code = str(code)

        if code in seen_codes:
            logger.warning(f"Codelist '{cl_id}' has duplicate entry '{code}', skipping")
            skipped += 1
            continue

        value_map = item.get("valueMap")
        if isinstance(value_map, list | tuple) and value_map:
            value_map = [str(c) for c in value_map if c is not None and str(c) != ""]
        else:
            value_map = []
        if not value_map:
            value_map = [code]

        if dimension is not None:
            unknown = [c for c in value_map if not dimension.has_category(c)]
            if unknown:
                logger.warning(
                    f"Codelist '{cl_id}' entry '{code}' refers to codes {unknown} "
                    f"unknown to dimension '{dimension.code}'"
                )
                value_map = [c for c in value_map if dimension.has_category(c)]
            if not value_map:
                skipped += 1
                continue

        entries.append(
            CodelistEntry(
                code=code, label=str(item.get("label") or code), value_map=value_map
            )
        )
        seen_codes.add(code)

    codelist = Codelist(
        id=cl_id,
        label=resource.label,
        eliminable=resource.elimination,
        entries=entries,
        skipped=skipped,
    )

    if not codelist.original_codes:
        logger.error(f"No valid codes extracted from codelist '{cl_id}'")
    else:
        logger.info(
            f"Resolved codelist '{cl_id}': {len(entries)} entries, "
            f"{len(codelist.original_codes)} original codes, "
            f"aggregated={codelist.is_aggregated}"
        )

    return codelist
