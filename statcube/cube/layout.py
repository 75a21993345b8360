"""
Row/column layouts of a cube and the layout presets.

A layout partitions the cube dimensions into row dimensions and column
dimensions. Layouts are immutable; every operation returns a new layout.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any

from ..common import is_time_dimension
from ..errors import ArgumentError, LayoutError

__all__ = ["LayoutSpec", "ROWS", "COLUMNS", "PRESETS"]

ROWS = "rows"
COLUMNS = "columns"

PRESETS = ("default", "transpose", "all-rows", "all-columns")

# Alternate preset names
_PRESET_ALIASES = {"all-cols": "all-columns"}


@dataclass(frozen=True, slots=True)
class LayoutSpec:
    """Immutable partition of dimensions into rows and columns.

    The order of dimensions within `rows` and `columns` is the nesting order
    of headers: the first dimension is the outermost one.
    """

    rows: tuple[str, ...] = ()
    columns: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "rows", tuple(self.rows))
        object.__setattr__(self, "columns", tuple(self.columns))

    def __str__(self) -> str:
        return f"rows={list(self.rows)} columns={list(self.columns)}"

    @property
    def dimensions(self) -> tuple[str, ...]:
        return self.rows + self.columns

    def axis_of(self, dimension: str) -> str:
        if dimension in self.rows:
            return ROWS
        if dimension in self.columns:
            return COLUMNS
        raise ArgumentError(f"Dimension '{dimension}' is not part of the layout")

    def validate_for(self, dimension_ids: list[str]) -> None:
        """
        Check that the layout is a partition of `dimension_ids`.

        Raises:
            LayoutError: If a dimension is duplicated, missing or unknown, or
                when the layout has no dimensions at all
        """
        if not self.rows and not self.columns:
            raise LayoutError("Layout must have at least one dimension")

        counts = Counter(self.dimensions)
        expected = set(dimension_ids)

        duplicated = sorted(code for code, count in counts.items() if count > 1)
        missing = [code for code in dimension_ids if code not in counts]
        unknown = sorted(code for code in counts if code not in expected)

        problems = []
        if duplicated:
            problems.append(f"duplicated: {', '.join(duplicated)}")
        if missing:
            problems.append(f"missing: {', '.join(missing)}")
        if unknown:
            problems.append(f"unknown: {', '.join(unknown)}")

        if problems:
            error = LayoutError(
                "Every dimension must be either in rows or in columns "
                f"({'; '.join(problems)})",
                field="layout",
            )
            error.add_context("rows", list(self.rows))
            error.add_context("columns", list(self.columns))
            raise error

    # Presets

    @classmethod
    def default(cls, dimension_ids: list[str]) -> LayoutSpec:
        """Time dimension alone in rows and the rest in columns. Without a
        time dimension the last dimension goes to columns and the rest to
        rows; a single dimension goes to columns."""
        ids = list(dimension_ids)
        time_dims = [code for code in ids if is_time_dimension(code)]

        if time_dims:
            time_dim = time_dims[0]
            return cls(rows=[time_dim], columns=[code for code in ids if code != time_dim])
        elif len(ids) > 1:
            return cls(rows=ids[:-1], columns=ids[-1:])
        else:
            return cls(rows=[], columns=ids)

    @classmethod
    def all_rows(cls, dimension_ids: list[str]) -> LayoutSpec:
        return cls(rows=dimension_ids, columns=[])

    @classmethod
    def all_columns(cls, dimension_ids: list[str]) -> LayoutSpec:
        return cls(rows=[], columns=dimension_ids)

    def transposed(self) -> LayoutSpec:
        """Swap rows and columns."""
        return LayoutSpec(rows=self.columns, columns=self.rows)

    @classmethod
    def preset(
        cls,
        name: str,
        dimension_ids: list[str],
        current: LayoutSpec | None = None,
    ) -> LayoutSpec:
        """
        Create a layout from a named preset: ``default``, ``transpose``,
        ``all-rows`` or ``all-columns``.

        ``transpose`` swaps `current`, or the default layout when no current
        layout is given.
        """
        name = _PRESET_ALIASES.get(name, name)

        if name == "default":
            return cls.default(dimension_ids)
        elif name == "transpose":
            base = current if current is not None else cls.default(dimension_ids)
            return base.transposed()
        elif name == "all-rows":
            return cls.all_rows(dimension_ids)
        elif name == "all-columns":
            return cls.all_columns(dimension_ids)
        else:
            raise ArgumentError(
                f"Unknown layout preset '{name}'. Use one of: {', '.join(PRESETS)}"
            )

    def move(self, dimension: str, to: str, position: int | None = None) -> LayoutSpec:
        """
        Move `dimension` to `to` (``"rows"`` or ``"columns"``) at `position`
        (appended when ``None``). Moving within the same list reorders it.
        """
        if to not in (ROWS, COLUMNS):
            raise ArgumentError(f"Invalid layout axis '{to}', use 'rows' or 'columns'")
        self.axis_of(dimension)

        rows = [code for code in self.rows if code != dimension]
        columns = [code for code in self.columns if code != dimension]

        target = rows if to == ROWS else columns
        if position is None:
            target.append(dimension)
        else:
            if not 0 <= position <= len(target):
                raise ArgumentError(
                    f"Position {position} out of range 0..{len(target)} for {to}"
                )
            target.insert(position, dimension)

        return LayoutSpec(rows=rows, columns=columns)

    def to_dict(self) -> dict[str, list[str]]:
        return {ROWS: list(self.rows), COLUMNS: list(self.columns)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LayoutSpec:
        if not isinstance(data, dict):
            raise ArgumentError(f"Layout must be a dictionary, got {type(data)}")
        return cls(rows=data.get(ROWS) or [], columns=data.get(COLUMNS) or [])
