"""Tests for header combinations and pivot tables."""

import pytest

from statcube.cube import DataCube, HeaderCombination, LayoutSpec, PivotTable, build_combinations
from statcube.errors import ArgumentError, LayoutError

from tests.common import DATASET, DATASET_3D


@pytest.fixture
def cube():
    return DataCube.from_jsonstat(DATASET)


@pytest.fixture
def cube_3d():
    return DataCube.from_jsonstat(DATASET_3D)


def test_build_combinations(cube_3d):
    combinations = build_combinations(cube_3d, ["Kjonn", "Tid"])
    assert len(combinations) == 6
    assert combinations[0] == HeaderCombination(codes=("1", "2021"), indices=(0, 0))
    assert combinations[1] == HeaderCombination(codes=("1", "2022"), indices=(0, 1))
    assert combinations[-1] == HeaderCombination(codes=("2", "2023"), indices=(1, 2))


def test_build_combinations_without_dimensions(cube):
    assert build_combinations(cube, []) == [HeaderCombination()]


def test_sex_year_scenario(cube):
    """Sex in rows, year in columns: value at Sex=1, Year=1 is V[3]."""
    table = PivotTable(cube, LayoutSpec(rows=["Kjonn"], columns=["Tid"]))
    assert table.shape == (2, 2)
    assert table.value(1, 1) == 40
    assert table.to_matrix() == [[10, 20], [30, 40]]


def test_cube_from_ids_and_sizes():
    """A cube without category metadata pivots on index-coded headers."""
    cube = DataCube(dimension_ids=["Sex", "Year"], sizes=[2, 2], values=[10, 20, 30, 40])
    table = PivotTable(cube, LayoutSpec(rows=["Sex"], columns=["Year"]))
    assert table.value(1, 1) == 40
    assert table.to_matrix() == [[10, 20], [30, 40]]
    assert [h.codes for h in table.row_headers] == [("0",), ("1",)]


def test_value_by_header(cube):
    table = PivotTable(cube, LayoutSpec(rows=["Tid"], columns=["Kjonn"]))
    row = table.row_headers[0]
    column = table.column_headers[1]
    assert row.codes == ("2022",)
    assert column.codes == ("2",)
    assert table.value(row, column) == 30
    assert table.indices(row, column) == [1, 0]


def test_invalid_header_position(cube):
    table = PivotTable(cube, LayoutSpec(rows=["Kjonn"], columns=["Tid"]))
    with pytest.raises(ArgumentError):
        table.value(2, 0)
    with pytest.raises(ArgumentError):
        table.value("first", 0)


def test_default_layout(cube):
    table = PivotTable(cube)
    assert table.layout == LayoutSpec(rows=["Tid"], columns=["Kjonn"])
    assert table.to_matrix() == [[10, 30], [20, 40]]


def test_invalid_layout(cube):
    with pytest.raises(LayoutError):
        PivotTable(cube, LayoutSpec(rows=["Kjonn"], columns=[]))


def test_transpose(cube):
    table = PivotTable(cube, LayoutSpec(rows=["Kjonn"], columns=["Tid"]))
    transposed = table.transpose()
    assert transposed.to_matrix() == [[10, 30], [20, 40]]
    assert transposed.transpose().to_matrix() == table.to_matrix()


def test_relayout_keeps_storage(cube_3d):
    """Pivoting never touches values, dimension order or strides."""
    table = PivotTable(cube_3d, LayoutSpec(rows=["Region", "Kjonn"], columns=["Tid"]))
    values = list(cube_3d.values)

    for layout in [
        LayoutSpec(rows=["Tid"], columns=["Region", "Kjonn"]),
        LayoutSpec(rows=["Kjonn", "Tid", "Region"], columns=[]),
        LayoutSpec(rows=[], columns=["Tid", "Region", "Kjonn"]),
    ]:
        pivoted = table.pivot(layout)
        assert pivoted.cube is cube_3d
        assert cube_3d.values == values
        assert cube_3d.strides == [6, 3, 1]
        cells = sorted(v for _, row in pivoted.rows() for v in row)
        assert cells == values


def test_rows_with_all_dimensions_in_columns(cube_3d):
    table = PivotTable(cube_3d, LayoutSpec.all_columns(cube_3d.dimension_ids))
    rows = list(table.rows())
    assert len(rows) == 1
    header, values = rows[0]
    assert header == HeaderCombination()
    assert values == list(range(12))


def test_move(cube_3d):
    table = PivotTable(cube_3d, LayoutSpec(rows=["Region", "Kjonn"], columns=["Tid"]))
    moved = table.move("Kjonn", "columns", 0)
    assert moved.layout == LayoutSpec(rows=["Region"], columns=["Kjonn", "Tid"])
    assert moved.shape == (2, 6)
    # Region=4601, Kjonn=2, Tid=2022
    assert moved.value(1, 4) == 10


def test_apply_preset(cube_3d):
    table = PivotTable(cube_3d)
    assert table.layout == LayoutSpec(rows=["Tid"], columns=["Region", "Kjonn"])
    assert table.apply_preset("transpose").layout == LayoutSpec(
        rows=["Region", "Kjonn"], columns=["Tid"]
    )
    assert table.apply_preset("all-rows").shape == (12, 1)


def test_header_spans(cube_3d):
    table = PivotTable(cube_3d, LayoutSpec(rows=["Tid"], columns=["Region", "Kjonn"]))
    assert table.header_spans(0) == [("0301", 2), ("4601", 2)]
    assert table.header_spans(1) == [("1", 1), ("2", 1), ("1", 1), ("2", 1)]
    with pytest.raises(ArgumentError):
        table.header_spans(2)
