"""Pydantic schemas for raw service payloads (JSON-stat 2 metadata and
codelist resources).

Schemas validate the outer shape of what the service returns and ignore
fields the engine does not use. Conversion into metadata objects happens in
the catalog and codelist modules.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RawModel(BaseModel):
    """Base model for service payloads."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CodelistRefSchema(RawModel):
    id: str = Field(..., min_length=1)
    label: str | None = None


class CategorySchema(RawModel):
    """JSON-stat category: ``index`` is either a code -> position mapping or
    an ordered list of codes."""

    index: dict[str, int] | list[str] | None = None
    label: dict[str, str] = Field(default_factory=dict)

    @field_validator("label", mode="before")
    @classmethod
    def stringify_label_keys(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {str(k): "" if lbl is None else str(lbl) for k, lbl in v.items()}
        return v

    def ordered_codes(self) -> list[str]:
        """Codes in canonical index order."""
        if self.index is None:
            return list(self.label.keys())
        if isinstance(self.index, list):
            return [str(code) for code in self.index]
        return [code for code, _ in sorted(self.index.items(), key=lambda kv: kv[1])]

    def positions(self) -> dict[str, int]:
        return {code: i for i, code in enumerate(self.ordered_codes())}


class DimensionExtensionSchema(RawModel):
    elimination: bool = False
    codelists: list[CodelistRefSchema] = Field(default_factory=list)

    @field_validator("codelists", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return v or []


class DimensionSchema(RawModel):
    label: str | None = None
    category: CategorySchema = Field(default_factory=CategorySchema)
    extension: DimensionExtensionSchema = Field(
        default_factory=DimensionExtensionSchema
    )


class PxExtensionSchema(RawModel):
    heading: list[str] = Field(default_factory=list)
    stub: list[str] = Field(default_factory=list)


class TableExtensionSchema(RawModel):
    px: PxExtensionSchema = Field(default_factory=PxExtensionSchema)


class TableMetadataSchema(RawModel):
    """Table metadata as returned by ``/tables/{id}/metadata``."""

    id: list[str] = Field(..., min_length=1)
    label: str | None = None
    dimension: dict[str, DimensionSchema]
    extension: TableExtensionSchema = Field(default_factory=TableExtensionSchema)


class CodelistResourceSchema(RawModel):
    """Codelist resource as returned by ``/codeLists/{id}``. Entries are kept
    as raw mappings so that malformed ones can be skipped one by one."""

    id: str | None = None
    label: str | None = None
    elimination: bool = False
    values: list[Any]


class DatasetSchema(RawModel):
    """JSON-stat 2 dataset: dimension order, sizes and flat values."""

    id: list[str] = Field(..., min_length=1)
    size: list[int] = Field(..., min_length=1)
    value: list[float | int | None] | dict[str, float | int | None]
    dimension: dict[str, DimensionSchema] = Field(default_factory=dict)
