"""Cell-count estimation of a selection, computed before any data is fetched."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, computed_field

from ..config import DEFAULT_CONFIG, EngineConfig
from .selection import All, Explicit, TopN

if TYPE_CHECKING:
    from .session import TableSession

__all__ = ["DimensionCount", "CellEstimate", "estimate_cells"]


class DimensionCount(BaseModel):
    """Selected and maximal value count of one dimension in the query."""

    model_config = ConfigDict(frozen=True)

    dimension: str
    selected: int = Field(..., ge=0)
    true_max: int = Field(..., ge=0)
    eliminable: bool = False


class CellEstimate(BaseModel):
    model_config = ConfigDict(frozen=True)

    selected_cells: int = Field(0, ge=0)
    max_cells: int = Field(0, ge=0)
    dimensions: list[DimensionCount] = Field(default_factory=list)
    valid: bool = True
    over_limit: bool = False
    over_warning: bool = False

    @computed_field
    @property
    def fetchable(self) -> bool:
        """Estimate allows a data request."""
        return self.valid and not self.over_limit


def _selected_count(selection, codelist, true_max: int) -> int:
    if isinstance(selection, All):
        return true_max
    if isinstance(selection, TopN):
        return min(selection.n, true_max)
    if codelist is not None:
        # base categories of the entries, as sent in the query
        return len(codelist.expand(selection.codes))
    return len(selection.codes)


def estimate_cells(
    session: TableSession, config: EngineConfig | None = None
) -> CellEstimate:
    """
    Estimate how many cells the current selections of `session` produce.

    Dimensions left out of the query (eliminable, nothing selected) are not
    counted. Maximal counts come from the catalog and the active codelists,
    never from truncated value lists.
    """
    config = config or DEFAULT_CONFIG

    counts: list[DimensionCount] = []
    selected_cells = 1
    max_cells = 1
    valid = True

    for code in session.catalog.dimension_ids:
        state = session.state(code)
        selection = state.selection
        codelist = state.codelist
        eliminable = session.is_eliminable(code)

        if isinstance(selection, Explicit) and selection.is_empty and eliminable:
            continue

        if codelist is not None:
            true_max = len(codelist.original_codes)
        else:
            true_max = session.catalog.dimension(code).size

        selected = _selected_count(selection, codelist, true_max)
        counts.append(
            DimensionCount(
                dimension=code,
                selected=selected,
                true_max=true_max,
                eliminable=eliminable,
            )
        )

        if selected == 0 and not eliminable:
            valid = False
        if selected > 0:
            selected_cells *= selected
        max_cells *= true_max

    if not valid:
        selected_cells = 0

    if not counts:
        selected_cells = 0
        max_cells = 0

    return CellEstimate(
        selected_cells=selected_cells,
        max_cells=max_cells,
        dimensions=counts,
        valid=valid,
        over_limit=selected_cells > config.max_cells,
        over_warning=selected_cells > config.cell_warning_threshold,
    )
