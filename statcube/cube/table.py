"""
Two-dimensional views of a cube.

`PivotTable` projects a `DataCube` onto a row/column layout. Headers are the
Cartesian products of the categories of the row and column dimensions in
category index order. Changing the layout only rebuilds the headers: values,
dimension order and strides of the cube stay untouched.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from itertools import product

from ..errors import ArgumentError
from ..logging import get_logger
from .datacube import DataCube
from .layout import COLUMNS, ROWS, LayoutSpec

__all__ = ["HeaderCombination", "build_combinations", "PivotTable"]


@dataclass(frozen=True, slots=True)
class HeaderCombination:
    """One row or column header: a category code and index per header
    dimension."""

    codes: tuple[str, ...] = ()
    indices: tuple[int, ...] = ()


def build_combinations(cube: DataCube, dimensions) -> list[HeaderCombination]:
    """All combinations of categories of `dimensions`, the first dimension
    varying slowest. No dimensions yield one empty combination."""
    axes = []
    for code in dimensions:
        categories = cube.dimension(code).categories
        axes.append([(c.code, c.index) for c in categories])

    return [
        HeaderCombination(
            codes=tuple(code for code, _ in combo),
            indices=tuple(index for _, index in combo),
        )
        for combo in product(*axes)
    ]


class PivotTable:
    """Cube values arranged by a layout."""

    def __init__(self, cube: DataCube, layout: LayoutSpec | None = None):
        if layout is None:
            layout = LayoutSpec.default(cube.dimension_ids)
        layout.validate_for(cube.dimension_ids)

        self.cube = cube
        self.layout = layout
        self.row_headers = build_combinations(cube, layout.rows)
        self.column_headers = build_combinations(cube, layout.columns)

        # For every cube dimension: (axis, position within the header)
        self._sources: list[tuple[str, int]] = []
        for code in cube.dimension_ids:
            if code in layout.rows:
                self._sources.append((ROWS, layout.rows.index(code)))
            else:
                self._sources.append((COLUMNS, layout.columns.index(code)))

    @property
    def shape(self) -> tuple[int, int]:
        return (len(self.row_headers), len(self.column_headers))

    def _header(self, headers: list[HeaderCombination], item, axis: str):
        if isinstance(item, HeaderCombination):
            return item
        try:
            return headers[item]
        except (IndexError, TypeError):
            raise ArgumentError(f"Invalid {axis} header {item!r}") from None

    def indices(self, row, column) -> list[int]:
        """Full index vector in cube dimension order for a row and column
        header (or their positions)."""
        row = self._header(self.row_headers, row, ROWS)
        column = self._header(self.column_headers, column, COLUMNS)

        result = []
        for axis, position in self._sources:
            header = row if axis == ROWS else column
            result.append(header.indices[position])
        return result

    def value(self, row, column) -> float | int | None:
        return self.cube.value_at(self.indices(row, column))

    def rows(self) -> Iterator[tuple[HeaderCombination, list[float | int | None]]]:
        """Iterate over ``(row_header, values)`` in display order."""
        for row in self.row_headers:
            yield row, [self.value(row, column) for column in self.column_headers]

    def to_matrix(self) -> list[list[float | int | None]]:
        return [values for _, values in self.rows()]

    def header_spans(self, depth: int) -> list[tuple[str, int]]:
        """Grouped column headers of the column dimension at `depth`:
        ``(category_code, span)`` for every run of columns sharing the
        categories of this and all outer column dimensions."""
        if not 0 <= depth < len(self.layout.columns):
            raise ArgumentError(
                f"Header depth {depth} out of range for "
                f"{len(self.layout.columns)} column dimensions"
            )

        spans: list[tuple[str, int]] = []
        previous = None
        for header in self.column_headers:
            prefix = header.codes[: depth + 1]
            if prefix == previous:
                code, span = spans[-1]
                spans[-1] = (code, span + 1)
            else:
                spans.append((header.codes[depth], 1))
                previous = prefix
        return spans

    # Re-layout

    def pivot(self, layout: LayoutSpec) -> PivotTable:
        """Same cube arranged by another layout."""
        table = PivotTable(self.cube, layout)
        get_logger().debug(f"Layout changed from {self.layout} to {layout}")
        return table

    def transpose(self) -> PivotTable:
        return self.pivot(self.layout.transposed())

    def move(self, dimension: str, to: str, position: int | None = None) -> PivotTable:
        return self.pivot(self.layout.move(dimension, to, position))

    def apply_preset(self, name: str) -> PivotTable:
        return self.pivot(LayoutSpec.preset(name, self.cube.dimension_ids, self.layout))

    def __repr__(self):
        return f"<PivotTable({self.layout}, shape={self.shape})>"
