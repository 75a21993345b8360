"""
Query construction and validation.

A query maps dimension codes to one of:

* a list of base category codes,
* ``"*"`` for every value,
* ``"top(N)"`` for the last N values.

A dimension missing from the query is aggregated over by the service. Only
eliminable dimensions with nothing selected are left out.

Selections are kept as `Explicit`/`All`/`TopN` objects everywhere else; the
string forms exist only here, at the transport boundary.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from ..errors import ArgumentError, MandatoryDimensionError
from .selection import All, Explicit, TopN

if TYPE_CHECKING:
    from .session import TableSession
    from ..cube.layout import LayoutSpec

__all__ = [
    "ALL_VALUES",
    "Query",
    "QueryValue",
    "build_query",
    "validate_query",
    "parse_query_value",
    "format_top",
    "SelectionEntry",
    "Placement",
    "QueryBody",
    "to_post_body",
    "to_url_params",
]

ALL_VALUES = "*"

_TOP_PATTERN = re.compile(r"^top\((\d+)\)$")

QueryValue = list[str] | str
Query = dict[str, QueryValue]


def format_top(n: int) -> str:
    return f"top({n})"


def parse_query_value(value: Any):
    """Convert a query value back to a selection.

    ``"*"`` becomes `All`, ``"top(N)"`` becomes `TopN` and a list of codes
    becomes `Explicit`.

    Raises:
        ArgumentError: If the value has none of the known forms
    """
    if isinstance(value, str):
        if value == ALL_VALUES:
            return All()
        match = _TOP_PATTERN.match(value.strip())
        if match:
            return TopN(n=int(match.group(1)))
        raise ArgumentError(f"Invalid query value '{value}'")

    if isinstance(value, list | tuple | set | frozenset):
        return Explicit(codes=value)

    raise ArgumentError(f"Invalid query value of type {type(value).__name__}")


def _sort_chronologically(session: TableSession, code: str, codes: list[str]) -> list[str]:
    dimension = session.catalog.dimension(code)
    return sorted(codes, key=dimension.index_of)


def build_query(session: TableSession) -> Query:
    """
    Build the query of the current selections of `session`.

    The function has no side effects. Dimensions are emitted in metadata
    order.
    """
    query: Query = {}

    for code in session.catalog.dimension_ids:
        state = session.state(code)
        selection = state.selection
        codelist = state.codelist

        if isinstance(selection, All):
            if codelist is None:
                query[code] = ALL_VALUES
                continue
            # "*" would mean every base category, not every codelist entry
            values = list(codelist.original_codes)

        elif isinstance(selection, TopN):
            query[code] = format_top(selection.n)
            continue

        elif codelist is not None:
            values = codelist.expand(selection.codes)

        else:
            values = [c for c in session.value_codes(code) if c in selection.codes]

        if not values and session.is_eliminable(code):
            continue

        if session.catalog.dimension(code).is_time:
            values = _sort_chronologically(session, code, values)

        query[code] = values

    return query


def _true_max(session: TableSession, code: str) -> int:
    codelist = session.state(code).codelist
    if codelist is not None:
        return len(codelist.original_codes)
    return session.catalog.dimension(code).size


def _has_values(session: TableSession, code: str, value: QueryValue | None) -> bool:
    if value is None:
        return False
    if isinstance(value, list):
        return bool(value)
    if value == ALL_VALUES:
        return _true_max(session, code) > 0
    match = _TOP_PATTERN.match(value)
    if match:
        return int(match.group(1)) >= 1 and _true_max(session, code) > 0
    return False


def validate_query(session: TableSession, query: Query) -> list[MandatoryDimensionError]:
    """
    Check that every dimension that can not be eliminated has values.

    A dimension without any categories never has values, not even with
    ``"*"``.

    Returns:
        List of errors, empty when the query is valid
    """
    errors = []
    for code in session.catalog.dimension_ids:
        if session.is_eliminable(code):
            continue
        if not _has_values(session, code, query.get(code)):
            error = MandatoryDimensionError(code)
            codelist = session.state(code).codelist
            if codelist is not None:
                error.add_context("codelist", codelist.id)
            errors.append(error)
    return errors


# Transport payloads


class SelectionEntry(BaseModel):
    """One dimension of a POST query body."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    variable_code: str = Field(..., alias="variableCode")
    value_codes: list[str] = Field(..., alias="valueCodes")
    codelist: str | None = None


class Placement(BaseModel):
    """Requested output layout: `stub` are row dimensions, `heading` are
    column dimensions."""

    model_config = ConfigDict(extra="forbid")

    heading: list[str] = Field(default_factory=list)
    stub: list[str] = Field(default_factory=list)


class QueryBody(BaseModel):
    """JSON body of a data request."""

    model_config = ConfigDict(extra="forbid")

    selection: list[SelectionEntry] = Field(default_factory=list)
    placement: Placement | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def to_post_body(
    query: Query,
    codelist_ids: dict[str, str] | None = None,
    layout: LayoutSpec | None = None,
) -> QueryBody:
    """Create the POST body of `query`. Scalar values are wrapped in
    one-element lists."""
    codelist_ids = codelist_ids or {}
    entries = []

    for code, value in query.items():
        values = [value] if isinstance(value, str) else list(value)
        entries.append(
            SelectionEntry(
                variable_code=code,
                value_codes=values,
                codelist=codelist_ids.get(code),
            )
        )

    placement = None
    if layout is not None:
        placement = Placement(heading=list(layout.columns), stub=list(layout.rows))

    return QueryBody(selection=entries, placement=placement)


def to_url_params(
    query: Query, lang: str | None = None, codelist_ids: dict[str, str] | None = None
) -> list[tuple[str, str]]:
    """Create GET parameters of `query` as ``("valueCodes[Dim]", "a,b")``
    pairs. Encoding is left to the transport."""
    params: list[tuple[str, str]] = []
    if lang:
        params.append(("lang", lang))

    for code, value in query.items():
        text = value if isinstance(value, str) else ",".join(value)
        params.append((f"valueCodes[{code}]", text))

    for code, codelist_id in (codelist_ids or {}).items():
        if code in query:
            params.append((f"codelist[{code}]", codelist_id))

    return params
