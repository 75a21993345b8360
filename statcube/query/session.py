"""
Selection state of one table.

`TableSession` owns the per-dimension selection state and the active
codelists. All mutations go through the session; derived values (query,
validation errors, cell estimate) are computed from its state and memoized
per mutation revision.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from ..config import DEFAULT_CONFIG, EngineConfig
from ..errors import (
    ArgumentError,
    CellLimitError,
    CodelistResolutionError,
    MandatoryDimensionError,
    NoSuchDimensionError,
)
from ..logging import get_logger
from ..metadata import Catalog, Codelist, CodelistFetcher, effective_eliminable
from .builder import Query, build_query, parse_query_value, validate_query
from .cardinality import CellEstimate, estimate_cells
from .selection import (
    Clear,
    Explicit,
    SelectAll,
    SelectEvery,
    SelectExplicit,
    SelectRange,
    SelectTopN,
    Toggle,
    apply_selection_action,
)

__all__ = ["DimensionState", "TableSession"]

AsyncCodelistFetcher = Callable[[str], Awaitable[Any]]


@dataclass(slots=True)
class DimensionState:
    """Selection, active codelist and fetch flag of one dimension."""

    selection: Any = field(default_factory=Explicit)
    codelist: Codelist | None = None
    pending: bool = False


class TableSession:
    """Selections of one table.

    A session is created per loaded table. Changing the table means creating
    a new session (or calling `reset()` with the new catalog).
    """

    def __init__(self, catalog: Catalog, config: EngineConfig | None = None):
        self.catalog = catalog
        self.config = config or DEFAULT_CONFIG
        self.logger = get_logger()

        self._states: dict[str, DimensionState] = {}
        self.revision = 0
        self._memo: dict[str, tuple[int, Any]] = {}
        self.reset()

    @classmethod
    def from_metadata(
        cls, metadata: dict[str, Any], config: EngineConfig | None = None
    ) -> TableSession:
        return cls(Catalog.from_metadata(metadata), config=config)

    def reset(self, catalog: Catalog | None = None) -> None:
        """Drop all selections and codelists, optionally switching to a new
        table catalog."""
        if catalog is not None:
            self.catalog = catalog
        self._states = {code: DimensionState() for code in self.catalog.dimension_ids}
        self._changed()

    # State access

    def _state(self, code: str) -> DimensionState:
        try:
            return self._states[code]
        except KeyError:
            # Raises NoSuchDimensionError with a suggestion
            self.catalog.dimension(code)
            raise NoSuchDimensionError(f"No state for dimension '{code}'", code) from None

    def state(self, code: str) -> DimensionState:
        """State of dimension `code`. Treat it as read-only; use the mutation
        methods to change it."""
        return self._state(code)

    def selection(self, code: str):
        return self._state(code).selection

    def active_codelist(self, code: str) -> Codelist | None:
        return self._state(code).codelist

    def active_codelist_ids(self) -> dict[str, str]:
        """Ids of active codelists by dimension code, as sent to the service."""
        return {
            code: state.codelist.id
            for code, state in self._states.items()
            if state.codelist is not None
        }

    def is_eliminable(self, code: str) -> bool:
        """Effective elimination flag: an active codelist may make a
        mandatory dimension optional."""
        return effective_eliminable(
            self.catalog.dimension(code), self._state(code).codelist
        )

    def value_codes(self, code: str) -> list[str]:
        """Codes of the active catalog of a dimension in display order:
        codelist entries when a codelist is active, base categories
        otherwise."""
        codelist = self._state(code).codelist
        if codelist is not None:
            return codelist.codes
        return self.catalog.value_codes(code)

    # Mutations

    def _changed(self) -> None:
        self.revision += 1

    def _set_selection(self, code: str, selection) -> None:
        state = self._state(code)
        if state.selection != selection:
            state.selection = selection
            self._changed()

    def apply(self, code: str, action):
        """Apply a selection action to dimension `code` and return the new
        selection."""
        state = self._state(code)
        selection = apply_selection_action(
            state.selection, action, self.value_codes(code)
        )
        self._set_selection(code, selection)
        return selection

    def select_explicit(self, code: str, codes):
        return self.apply(code, SelectExplicit(codes=list(codes)))

    def select_all(self, code: str):
        return self.apply(code, SelectAll())

    def select_top_n(self, code: str, n: int | None = None):
        if n is None:
            n = self.config.default_top_n
        return self.apply(code, SelectTopN(n=n))

    def toggle(self, code: str, value: str):
        return self.apply(code, Toggle(code=value))

    def select_range(self, code: str, start: int, end: int, extend: bool = False):
        return self.apply(code, SelectRange(start=start, end=end, extend=extend))

    def select_every(self, code: str):
        return self.apply(code, SelectEvery())

    def clear(self, code: str):
        return self.apply(code, Clear())

    def auto_select_single_values(self) -> list[str]:
        """Select the only value of every mandatory dimension that has
        exactly one value and nothing selected. Returns the codes of the
        changed dimensions."""
        changed = []
        for code, state in self._states.items():
            if self.is_eliminable(code):
                continue
            if not (isinstance(state.selection, Explicit) and state.selection.is_empty):
                continue
            values = self.value_codes(code)
            if len(values) == 1:
                self._set_selection(code, Explicit(codes=values))
                changed.append(code)

        if changed:
            self.logger.debug(f"Auto-selected single values of {changed}")
        return changed

    # Codelists

    def _begin_activation(self, code: str, codelist_id: str) -> DimensionState:
        state = self._state(code)
        if state.pending:
            raise ArgumentError(
                f"Codelist of dimension '{code}' is already being fetched"
            )
        self.catalog.dimension(code).codelist_ref(codelist_id)
        state.pending = True
        return state

    def _revert_activation(self, state: DimensionState, code: str) -> None:
        state.pending = False
        if state.codelist is not None:
            state.codelist = None
            state.selection = Explicit()
            self._changed()
        self.logger.debug(f"Dimension '{code}' reverted to base categories")

    def _check_current(
        self, state: DimensionState, code: str, codelist_id: str, cause=None
    ) -> None:
        """Raise if the session was reset while the codelist was fetched."""
        if self._states.get(code) is state:
            return
        state.pending = False
        self.logger.warning(
            f"Discarding codelist '{codelist_id}' of dimension '{code}': "
            f"the table was reset during the fetch"
        )
        raise CodelistResolutionError(
            f"Table was reset while codelist '{codelist_id}' was fetched",
            codelist=codelist_id,
            dimension=code,
            cause=cause,
        )

    def _complete_activation(
        self, state: DimensionState, code: str, codelist_id: str, raw: Any
    ) -> Codelist:
        self._check_current(state, code, codelist_id)
        try:
            codelist = self.catalog.load_codelist(code, codelist_id, raw)
        except CodelistResolutionError as e:
            self.logger.error(f"Resolution of codelist '{codelist_id}' failed: {e}")
            self._revert_activation(state, code)
            raise

        state.pending = False
        state.codelist = codelist
        state.selection = Explicit()
        self._changed()
        return codelist

    def _fetch_failed(
        self, state: DimensionState, code: str, codelist_id: str, error: Exception
    ) -> CodelistResolutionError:
        self._check_current(state, code, codelist_id, cause=error)
        self.logger.error(f"Fetching codelist '{codelist_id}' failed: {error}")
        self._revert_activation(state, code)
        return CodelistResolutionError(
            f"Could not fetch codelist '{codelist_id}': {error}",
            codelist=codelist_id,
            dimension=code,
            cause=error,
        )

    def activate_codelist(
        self, code: str, codelist_id: str, fetcher: CodelistFetcher
    ) -> Codelist:
        """
        Fetch, resolve and activate codelist `codelist_id` for dimension
        `code`. The selection of the dimension is reset to nothing selected.

        Args:
            code: Dimension code
            codelist_id: Id of one of the codelists of the dimension
            fetcher: Callable returning the raw codelist resource for an id

        Returns:
            The active Codelist

        Raises:
            ArgumentError: If the dimension does not offer the codelist or a
                fetch for the dimension is already in progress
            CodelistResolutionError: If fetching or resolving fails. The
                dimension is reverted to its base categories first.
        """
        state = self._begin_activation(code, codelist_id)
        try:
            raw = fetcher(codelist_id)
        except Exception as e:
            raise self._fetch_failed(state, code, codelist_id, e) from e
        return self._complete_activation(state, code, codelist_id, raw)

    async def activate_codelist_async(
        self, code: str, codelist_id: str, fetcher: AsyncCodelistFetcher
    ) -> Codelist:
        """Same as `activate_codelist()` with an awaitable fetcher. While the
        fetch is suspended the dimension is marked pending and a second
        activation for it is rejected."""
        state = self._begin_activation(code, codelist_id)
        try:
            raw = await fetcher(codelist_id)
        except Exception as e:
            raise self._fetch_failed(state, code, codelist_id, e) from e
        return self._complete_activation(state, code, codelist_id, raw)

    def deactivate_codelist(self, code: str) -> None:
        """Return dimension `code` to its base categories."""
        state = self._state(code)
        if state.pending:
            raise ArgumentError(
                f"Codelist of dimension '{code}' is being fetched"
            )
        if state.codelist is not None:
            state.codelist = None
            state.selection = Explicit()
            self._changed()

    def restore(
        self,
        query: Query,
        codelist_ids: dict[str, str] | None = None,
        fetcher: CodelistFetcher | None = None,
    ) -> None:
        """
        Re-apply a saved query.

        Codelists are activated first; a codelist that can not be activated
        is dropped. Saved values are then applied: ``"*"`` and ``"top(N)"``
        as they are, code lists reduced to the codes currently known for the
        dimension. Unknown dimensions are ignored.
        """
        if codelist_ids and fetcher is None:
            raise ArgumentError("A codelist fetcher is required to restore codelists")

        for code, codelist_id in (codelist_ids or {}).items():
            if code not in self.catalog:
                self.logger.warning(f"Ignoring codelist of unknown dimension '{code}'")
                continue
            try:
                self.activate_codelist(code, codelist_id, fetcher)
            except (ArgumentError, CodelistResolutionError) as e:
                self.logger.warning(f"Dropping saved codelist '{codelist_id}': {e}")

        for code, value in query.items():
            if code not in self.catalog:
                self.logger.warning(f"Ignoring saved values of unknown dimension '{code}'")
                continue
            try:
                selection = parse_query_value(value)
            except ArgumentError as e:
                self.logger.warning(f"Ignoring saved values of dimension '{code}': {e}")
                continue

            if isinstance(selection, Explicit):
                known = set(self.value_codes(code))
                selection = Explicit(codes=selection.codes & known)

            self._set_selection(code, selection)

    # Derived values

    def _memoized(self, key: str, compute: Callable[[], Any]) -> Any:
        cached = self._memo.get(key)
        if cached is not None and cached[0] == self.revision:
            return cached[1]
        value = compute()
        self._memo[key] = (self.revision, value)
        return value

    def query(self) -> Query:
        """Query of the current selections. Dimensions are in metadata
        order."""
        query = self._memoized("query", lambda: build_query(self))
        return {
            code: list(value) if isinstance(value, list) else value
            for code, value in query.items()
        }

    def validate(self) -> list[MandatoryDimensionError]:
        return list(
            self._memoized("validation", lambda: validate_query(self, self.query()))
        )

    def estimate(self) -> CellEstimate:
        return self._memoized("estimate", lambda: estimate_cells(self, self.config))

    def check_fetchable(self) -> None:
        """
        Raise the first reason why data can not be requested.

        Raises:
            MandatoryDimensionError: A mandatory dimension has no values
            CellLimitError: The selection exceeds the cell limit
        """
        errors = self.validate()
        if errors:
            raise errors[0]

        estimate = self.estimate()
        if estimate.over_limit:
            raise CellLimitError(estimate.selected_cells, self.config.max_cells)

    def is_fetchable(self) -> bool:
        try:
            self.check_fetchable()
        except (MandatoryDimensionError, CellLimitError):
            return False
        return True

    def __repr__(self):
        return f"<TableSession(dimensions={self.catalog.dimension_ids}, revision={self.revision})>"
