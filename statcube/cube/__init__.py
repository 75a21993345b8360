"""
Cube addressing and layout.
"""

from .datacube import DataCube, strides
from .layout import COLUMNS, PRESETS, ROWS, LayoutSpec
from .table import HeaderCombination, PivotTable, build_combinations

__all__ = [
    "DataCube",
    "strides",
    "LayoutSpec",
    "ROWS",
    "COLUMNS",
    "PRESETS",
    "HeaderCombination",
    "build_combinations",
    "PivotTable",
]
