"""Exceptions used within statcube"""

from __future__ import annotations

from typing import Any

__all__ = [
    "StatCubeError",
    "UserError",
    "InternalError",
    "ConfigurationError",
    "ArgumentError",
    "ModelError",
    "NoSuchDimensionError",
    "ValidationError",
    "MandatoryDimensionError",
    "CellLimitError",
    "LayoutError",
    "CodelistResolutionError",
]


class StatCubeError(Exception):
    """Generic error class with context preservation."""

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.cause = cause

    def add_context(self, key: str, value: Any) -> StatCubeError:
        """Fluent interface for adding context."""
        self.context[key] = value
        return self

    def __str__(self) -> str:
        base_msg = self.message
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base_msg} (context: {context_str})"
        return base_msg


class UserError(StatCubeError):
    """Superclass for all errors caused by the library user: wrong
    arguments, invalid selections or layouts."""


class InternalError(StatCubeError):
    """Superclass for all errors that happened internally: unexpected
    metadata shapes or failures of external collaborators."""


class ConfigurationError(UserError):
    """Raised when engine configuration is invalid."""


class ArgumentError(UserError):
    """Invalid or missing argument."""


class ModelError(InternalError):
    """Table metadata or cube payload is malformed."""


class NoSuchDimensionError(UserError, KeyError):
    """Raised when an unknown dimension is requested."""

    def __init__(self, message: str, name: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.name = name
        if name:
            self.add_context("dimension", name)

    __str__ = StatCubeError.__str__


class ValidationError(UserError):
    """Validation gate failure. Always blocks the dependent action (fetch,
    layout apply) and is never corrected automatically."""

    def __init__(
        self, message: str, *, field: str | None = None, value: Any = None, **kwargs
    ):
        super().__init__(message, **kwargs)
        if field:
            self.add_context("field", field)
        if value is not None:
            self.add_context("value", value)


class MandatoryDimensionError(ValidationError):
    """A dimension that can not be eliminated has no selected values."""

    def __init__(self, dimension: str, **kwargs):
        super().__init__(
            f"Dimension '{dimension}' is mandatory and has no selected values",
            field="dimension",
            value=dimension,
            **kwargs,
        )
        self.dimension = dimension


class CellLimitError(ValidationError):
    """The selection would produce more cells than the service allows."""

    def __init__(self, cells: int, limit: int, **kwargs):
        super().__init__(
            f"Selection yields {cells} cells which exceeds the limit of {limit}",
            **kwargs,
        )
        self.cells = cells
        self.limit = limit


class LayoutError(ValidationError):
    """Row/column layout is not a partition of the cube dimensions."""


class CodelistResolutionError(InternalError):
    """Codelist could not be fetched or parsed. The affected dimension is
    reverted to its base categories before this is raised."""

    def __init__(
        self, message: str, *, codelist: str | None = None, dimension: str | None = None, **kwargs
    ):
        super().__init__(message, **kwargs)
        self.codelist = codelist
        self.dimension = dimension
        if codelist:
            self.add_context("codelist", codelist)
        if dimension:
            self.add_context("dimension", dimension)
