"""
Selections, query construction and cell estimation.
"""

from .builder import (
    ALL_VALUES,
    Placement,
    Query,
    QueryBody,
    SelectionEntry,
    build_query,
    format_top,
    parse_query_value,
    to_post_body,
    to_url_params,
    validate_query,
)
from .cardinality import CellEstimate, DimensionCount, estimate_cells
from .selection import (
    All,
    Clear,
    Explicit,
    SelectAll,
    SelectEvery,
    SelectExplicit,
    Selection,
    SelectionAction,
    SelectRange,
    SelectTopN,
    Toggle,
    TopN,
    apply_selection_action,
    parse_action,
)
from .session import DimensionState, TableSession

__all__ = [
    "Explicit",
    "All",
    "TopN",
    "Selection",
    "SelectExplicit",
    "SelectAll",
    "SelectTopN",
    "Toggle",
    "SelectRange",
    "SelectEvery",
    "Clear",
    "SelectionAction",
    "apply_selection_action",
    "parse_action",
    "ALL_VALUES",
    "Query",
    "build_query",
    "validate_query",
    "parse_query_value",
    "format_top",
    "SelectionEntry",
    "Placement",
    "QueryBody",
    "to_post_body",
    "to_url_params",
    "DimensionCount",
    "CellEstimate",
    "estimate_cells",
    "DimensionState",
    "TableSession",
]
