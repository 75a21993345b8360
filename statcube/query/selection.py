"""
Per-dimension selections and the selection reducer.

A selection is one of three variants:

* ``Explicit(codes)`` - a set of codes of the active catalog of the dimension
  (base categories or entries of the active codelist),
* ``All()`` - every value (wildcard),
* ``TopN(n)`` - the `n` values with the highest category index.

User actions are plain Pydantic models as well. `apply_selection_action()`
is a pure function from a selection and an action to a new selection.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from ..errors import ArgumentError

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
    "parse_action",
    "apply_selection_action",
]


class SelectionBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Explicit(SelectionBase):
    """Explicitly chosen codes. An empty set means nothing is selected."""

    kind: Literal["explicit"] = "explicit"
    codes: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("codes", mode="before")
    @classmethod
    def convert_codes(cls, v: Any) -> Any:
        if isinstance(v, str):
            return frozenset([v])
        if isinstance(v, list | tuple | set | frozenset):
            return frozenset(str(code) for code in v)
        return v

    @property
    def is_empty(self) -> bool:
        return not self.codes

    def __str__(self):
        return ",".join(sorted(self.codes))


class All(SelectionBase):
    """Every value of the dimension."""

    kind: Literal["all"] = "all"

    def __str__(self):
        return "*"


class TopN(SelectionBase):
    """The last `n` values in category index order."""

    kind: Literal["top"] = "top"
    n: int = Field(..., ge=0)

    def __str__(self):
        return f"top({self.n})"


Selection = Annotated[Union[Explicit, All, TopN], Field(discriminator="kind")]


# Actions


class ActionBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class SelectExplicit(ActionBase):
    """Replace the selection with the given codes."""

    action: Literal["select_explicit"] = "select_explicit"
    codes: list[str] = Field(default_factory=list)


class SelectAll(ActionBase):
    """Switch to the wildcard selection."""

    action: Literal["select_all"] = "select_all"


class SelectTopN(ActionBase):
    """Switch to "last N" mode."""

    action: Literal["select_top_n"] = "select_top_n"
    n: int = Field(..., ge=0)


class Toggle(ActionBase):
    """Add `code` to or remove it from the explicit selection."""

    action: Literal["toggle"] = "toggle"
    code: str


class SelectRange(ActionBase):
    """Select codes between two display positions, both inclusive.

    With `extend` the range is added to the current explicit selection,
    otherwise it replaces it.
    """

    action: Literal["select_range"] = "select_range"
    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)
    extend: bool = False


class SelectEvery(ActionBase):
    """Explicitly select every listed code."""

    action: Literal["select_every"] = "select_every"


class Clear(ActionBase):
    """Deselect everything."""

    action: Literal["clear"] = "clear"


SelectionAction = Annotated[
    Union[SelectExplicit, SelectAll, SelectTopN, Toggle, SelectRange, SelectEvery, Clear],
    Field(discriminator="action"),
]

_action_adapter: TypeAdapter = TypeAdapter(SelectionAction)


def parse_action(data: Any):
    """Create an action from its dictionary form, for example
    ``{"action": "toggle", "code": "2"}``."""
    try:
        return _action_adapter.validate_python(data)
    except ValidationError as e:
        raise ArgumentError(f"Invalid selection action {data!r}: {e}") from e


def _explicit_codes(selection) -> frozenset[str]:
    """Codes kept when an item-level action leaves wildcard or top mode."""
    if isinstance(selection, Explicit):
        return selection.codes
    return frozenset()


def apply_selection_action(selection, action, codes: list[str]):
    """
    Apply `action` to `selection` and return the resulting selection.

    Args:
        selection: Current selection of the dimension
        action: One of the selection action models
        codes: Codes of the active catalog of the dimension in display order

    Returns:
        New selection. The input selection is not modified.

    Raises:
        ArgumentError: If the action refers to an unknown code or position
    """
    known = set(codes)

    if isinstance(action, SelectExplicit):
        unknown = [code for code in action.codes if code not in known]
        if unknown:
            raise ArgumentError(f"Unknown codes {unknown}")
        return Explicit(codes=action.codes)

    elif isinstance(action, SelectAll):
        return All()

    elif isinstance(action, SelectTopN):
        return TopN(n=action.n)

    elif isinstance(action, Toggle):
        if action.code not in known:
            raise ArgumentError(f"Unknown code '{action.code}'")
        current = _explicit_codes(selection)
        if action.code in current:
            return Explicit(codes=current - {action.code})
        return Explicit(codes=current | {action.code})

    elif isinstance(action, SelectRange):
        low, high = sorted((action.start, action.end))
        if high >= len(codes):
            raise ArgumentError(
                f"Range {action.start}..{action.end} is out of bounds for "
                f"{len(codes)} values"
            )
        selected = frozenset(codes[low : high + 1])
        if action.extend:
            selected = _explicit_codes(selection) | selected
        return Explicit(codes=selected)

    elif isinstance(action, SelectEvery):
        return Explicit(codes=codes)

    elif isinstance(action, Clear):
        return Explicit()

    else:
        raise ArgumentError(f"Unknown selection action {action!r}")
