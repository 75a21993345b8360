"""
Flat value arrays addressed by one category index per dimension.

Values are stored row-major: the last dimension changes fastest. The
dimension order of a cube is fixed; display layouts never reorder storage.
"""

from __future__ import annotations

from functools import reduce
from operator import mul
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..errors import ArgumentError, ModelError, NoSuchDimensionError
from ..metadata import Category, Dimension
from ..metadata.schemas import DatasetSchema

__all__ = ["strides", "DataCube"]


def strides(sizes: list[int]) -> list[int]:
    """Per-dimension multipliers of flat offsets, computed right to left:
    the last stride is 1 and every other is the next stride times the next
    size.

    >>> strides([2, 3, 4])
    [12, 4, 1]
    """
    result = [1] * len(sizes)
    for i in range(len(sizes) - 2, -1, -1):
        result[i] = result[i + 1] * sizes[i + 1]
    return result


class DataCube(BaseModel):
    """Fetched values together with the dimension order and sizes that
    produced them."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    dimension_ids: list[str] = Field(..., min_length=1)
    sizes: list[int] = Field(..., min_length=1)
    values: list[float | int | None] = Field(default_factory=list)
    dimensions: dict[str, Dimension] = Field(default_factory=dict)

    _strides: list[int] = PrivateAttr(default_factory=list)

    @model_validator(mode="after")
    def validate_shape(self):
        if len(self.dimension_ids) != len(self.sizes):
            raise ModelError(
                f"Cube has {len(self.dimension_ids)} dimensions but "
                f"{len(self.sizes)} sizes"
            )
        if len(set(self.dimension_ids)) != len(self.dimension_ids):
            raise ModelError(f"Duplicate dimensions in cube: {self.dimension_ids}")
        if any(size < 0 for size in self.sizes):
            raise ModelError(f"Negative dimension size in {self.sizes}")

        expected = reduce(mul, self.sizes, 1)
        if len(self.values) != expected:
            raise ModelError(
                f"Cube has {len(self.values)} values, expected {expected} "
                f"for sizes {self.sizes}"
            )

        for code, size in zip(self.dimension_ids, self.sizes):
            dimension = self.dimensions.get(code)
            if dimension is None:
                # Categories coded by index
                self.dimensions[code] = Dimension(
                    code=code, categories=[str(i) for i in range(size)]
                )
            elif dimension.size != size:
                raise ModelError(
                    f"Dimension '{code}' has {dimension.size} categories "
                    f"but size {size}"
                )

        self._strides = strides(self.sizes)
        return self

    @classmethod
    def from_jsonstat(cls, data: dict[str, Any]) -> DataCube:
        """
        Create a cube from a JSON-stat 2 dataset.

        ``value`` is either a dense list or a sparse mapping of flat offsets
        to values; missing offsets are ``None``.

        Raises:
            ModelError: If the dataset is malformed
        """
        try:
            schema = DatasetSchema.model_validate(data)
        except PydanticValidationError as e:
            raise ModelError(f"Invalid dataset: {e}") from e

        total = reduce(mul, schema.size, 1)
        if isinstance(schema.value, dict):
            values: list[Any] = [None] * total
            for key, value in schema.value.items():
                try:
                    offset = int(key)
                except ValueError:
                    raise ModelError(f"Invalid value offset '{key}'") from None
                if not 0 <= offset < total:
                    raise ModelError(f"Value offset {offset} out of range 0..{total - 1}")
                values[offset] = value
        else:
            values = list(schema.value)

        dimensions = {}
        for code in schema.id:
            raw_dim = schema.dimension.get(code)
            if raw_dim is None:
                raise ModelError(f"Dataset has no metadata for dimension '{code}'")
            category = raw_dim.category
            try:
                dimensions[code] = Dimension(
                    code=code,
                    label=raw_dim.label,
                    categories=[
                        Category(code=cat_code, label=category.label.get(cat_code), index=i)
                        for cat_code, i in category.positions().items()
                    ],
                )
            except PydanticValidationError as e:
                raise ModelError(f"Invalid dimension '{code}' in dataset: {e}") from e

        return cls(
            dimension_ids=schema.id,
            sizes=schema.size,
            values=values,
            dimensions=dimensions,
        )

    @property
    def strides(self) -> list[int]:
        return list(self._strides)

    def dimension(self, code: str) -> Dimension:
        try:
            return self.dimensions[code]
        except KeyError:
            raise NoSuchDimensionError(f"Cube has no dimension '{code}'", code) from None

    def size_of(self, code: str) -> int:
        try:
            return self.sizes[self.dimension_ids.index(code)]
        except ValueError:
            raise NoSuchDimensionError(f"Cube has no dimension '{code}'", code) from None

    def offset(self, indices: list[int]) -> int:
        """Flat offset of a full index vector given in cube dimension
        order."""
        if len(indices) != len(self.sizes):
            raise ArgumentError(
                f"Expected {len(self.sizes)} indices, got {len(indices)}"
            )
        offset = 0
        for i, (index, size, stride) in enumerate(zip(indices, self.sizes, self._strides)):
            if not 0 <= index < size:
                raise ArgumentError(
                    f"Index {index} out of range for dimension "
                    f"'{self.dimension_ids[i]}' of size {size}"
                )
            offset += index * stride
        return offset

    def unravel(self, offset: int) -> list[int]:
        """Index vector of a flat offset. Inverse of `offset()`."""
        if not 0 <= offset < len(self.values):
            raise ArgumentError(f"Offset {offset} out of range 0..{len(self.values) - 1}")
        indices = []
        for stride in self._strides:
            index, offset = divmod(offset, stride)
            indices.append(index)
        return indices

    def value_at(self, indices: list[int]) -> float | int | None:
        return self.values[self.offset(indices)]

    def value_for(self, coordinates: dict[str, str]) -> float | int | None:
        """Value at category codes given per dimension, for example
        ``{"Kjonn": "1", "Tid": "2020"}``."""
        missing = [code for code in self.dimension_ids if code not in coordinates]
        if missing:
            raise ArgumentError(f"No category given for dimensions {missing}")
        indices = [
            self.dimension(code).index_of(coordinates[code]) for code in self.dimension_ids
        ]
        return self.value_at(indices)

    def __len__(self) -> int:
        return len(self.values)

    def __repr__(self):
        return f"<DataCube(dimensions={self.dimension_ids}, sizes={self.sizes})>"
