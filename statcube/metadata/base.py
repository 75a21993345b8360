"""
Pydantic base class for statcube metadata objects.

Every metadata object is identified by a ``code`` (the key used by the
statistics service) and carries an optional human readable label.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import ArgumentError, ModelError


class MetadataObject(BaseModel):
    """
    Base class for all statcube metadata objects.

    Uses Pydantic for validation and serialization. Metadata objects are
    built once per table load and treated as read-only afterwards.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        arbitrary_types_allowed=True,
        populate_by_name=True,
    )

    code: str = Field(..., description="Unique identifier used by the service")
    label: str | None = Field(None, description="Human-readable label")
    info: dict[str, Any] = Field(
        default_factory=dict, description="Additional metadata"
    )

    @field_validator("code", mode="before")
    @classmethod
    def validate_code(cls, v: Any) -> str:
        """Codes are strings; numeric codes from JSON are converted."""
        if isinstance(v, int | float) and not isinstance(v, bool):
            v = str(v)
        if not isinstance(v, str) or not v.strip():
            raise ValueError("code must be a non-empty string")
        return v

    @field_validator("info", mode="before")
    @classmethod
    def validate_info(cls, v: Any) -> dict[str, Any]:
        """Ensure info is always a dictionary."""
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("info must be a dictionary")
        return v

    def get_label(self) -> str:
        """Get display label, using the code as fallback."""
        return self.label or self.code

    @classmethod
    def from_metadata(cls, metadata):
        """
        Create instance from metadata.

        Args:
            metadata: String code or dictionary metadata

        Returns:
            New instance of the class

        Raises:
            ArgumentError: If metadata type is invalid
            ModelError: If object creation fails
        """
        if isinstance(metadata, str):
            return cls(code=metadata)
        elif isinstance(metadata, dict):
            try:
                return cls.model_validate(metadata)
            except Exception as e:
                raise ModelError(f"Failed to create {cls.__name__}: {e}") from e
        else:
            raise ArgumentError(f"Invalid metadata type: {type(metadata)}")

    def to_dict(self, **options: Any) -> dict[str, Any]:
        """Dictionary representation using Pydantic's model_dump."""
        return self.model_dump(exclude_none=True, **options)

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r})"

    def __hash__(self) -> int:
        return hash((self.__class__.__name__, self.code))
