"""
Pydantic-based dimension and category classes.

A dimension is one axis of a statistical cube. Its categories are kept in
canonical index order, which is the order used for flat addressing of data
values. Display order may differ and is decided by the catalog.
"""

from pydantic import Field, PrivateAttr, computed_field, field_validator, model_validator

from ..common import is_time_dimension, parse_hierarchy_label
from ..errors import ArgumentError, ModelError
from .base import MetadataObject
from .codelist import CodelistRef


class Category(MetadataObject):
    """One coded value within a dimension."""

    index: int = Field(..., ge=0, description="Canonical 0-based position")

    @computed_field
    @property
    def depth(self) -> int:
        """Hierarchy depth encoded in the label with leading '¬' markers."""
        return parse_hierarchy_label(self.label)[1]

    @computed_field
    @property
    def clean_label(self) -> str:
        """Label without hierarchy markers, falling back to the code."""
        clean, _ = parse_hierarchy_label(self.label)
        return clean or self.code

    def __hash__(self):
        return hash((self.code, self.index))

    def __repr__(self):
        return f"<Category(code='{self.code}', index={self.index})>"


class Dimension(MetadataObject):
    """Represents a table dimension with its base categories."""

    categories: list[Category] = Field(default_factory=list)
    eliminable: bool = Field(
        False, description="Dimension may be omitted from a query"
    )
    codelists: list[CodelistRef] = Field(
        default_factory=list, description="Alternate groupings of categories"
    )

    _by_code: dict[str, Category] = PrivateAttr(default_factory=dict)

    @field_validator("categories", mode="before")
    @classmethod
    def convert_categories_input(cls, v):
        """Accept Category objects, dicts, or plain codes (indexed by position)."""
        if not v:
            return []

        if not isinstance(v, list | tuple):
            raise ValueError(f"Categories must be a list, got {type(v)}")

        result = []
        for position, category in enumerate(v):
            if isinstance(category, Category):
                result.append(category)
            elif isinstance(category, dict):
                data = dict(category)
                data.setdefault("index", position)
                result.append(Category.model_validate(data))
            elif isinstance(category, str):
                result.append(Category(code=category, index=position))
            else:
                raise ValueError(
                    f"Categories must be strings, dicts, or Category objects, got {type(category)}"
                )
        return result

    @field_validator("codelists", mode="before")
    @classmethod
    def convert_codelists_input(cls, v):
        if not v:
            return []
        return [CodelistRef.model_validate(ref) if isinstance(ref, dict) else ref for ref in v]

    @model_validator(mode="after")
    def validate_categories(self):
        """Order categories by index and check that codes and indices form a
        proper 0..n-1 enumeration."""
        categories = sorted(self.categories, key=lambda c: c.index)

        codes = [c.code for c in categories]
        if len(codes) != len(set(codes)):
            raise ModelError(f"Dimension '{self.code}' has duplicate category codes")

        indices = [c.index for c in categories]
        if indices != list(range(len(categories))):
            raise ModelError(
                f"Category indices of dimension '{self.code}' must enumerate "
                f"0..{len(categories) - 1}, got {indices}"
            )

        # Bypass validate_assignment to avoid re-running this validator
        self.__dict__["categories"] = categories
        self._by_code = {c.code: c for c in categories}
        return self

    @property
    def size(self) -> int:
        """Number of base categories."""
        return len(self.categories)

    @property
    def codes(self) -> list[str]:
        """Category codes in canonical index order."""
        return [c.code for c in self.categories]

    @property
    def is_time(self) -> bool:
        return is_time_dimension(self.code)

    @property
    def has_codelists(self) -> bool:
        return bool(self.codelists)

    def category(self, code: str) -> Category:
        """Get category by code."""
        try:
            return self._by_code[code]
        except KeyError:
            raise ArgumentError(
                f"Unknown category '{code}' in dimension '{self.code}'"
            ) from None

    def has_category(self, code: str) -> bool:
        return code in self._by_code

    def index_of(self, code: str) -> int:
        """Canonical index of the category `code`."""
        return self.category(code).index

    def codelist_ref(self, codelist_id: str) -> CodelistRef:
        for ref in self.codelists:
            if ref.id == codelist_id:
                return ref
        raise ArgumentError(
            f"Dimension '{self.code}' has no codelist '{codelist_id}'"
        )

    def __hash__(self):
        return hash(self.code)

    def __repr__(self):
        return f"<Dimension(code='{self.code}', categories={len(self.categories)})>"
