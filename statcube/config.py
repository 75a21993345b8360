"""Engine configuration: service limits and presentation defaults."""

from __future__ import annotations

from configparser import ConfigParser
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import ConfigurationError

__all__ = ["EngineConfig", "read_config", "DEFAULT_CONFIG"]

# INI option name -> config field
_OPTION_FIELDS = {
    "limits": {
        "max_cells": "max_cells",
        "cell_warning_threshold": "cell_warning_threshold",
    },
    "ui": {
        "default_top_n": "default_top_n",
        "max_display_values": "max_display_values",
        "language": "language",
    },
}


class EngineConfig(BaseModel):
    """Limits enforced by the cardinality gate and defaults used by
    presentation layers."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_cells: int = Field(
        800_000, gt=0, description="Hard limit of cells per data request"
    )
    cell_warning_threshold: int = Field(
        600_000, gt=0, description="Cell count above which a warning is shown"
    )
    default_top_n: int = Field(12, ge=1, description="Initial N for 'last N' mode")
    max_display_values: int = Field(
        500, ge=1, description="Values listed before a value list is truncated"
    )
    language: str = Field("no", min_length=2, description="Metadata language")

    @model_validator(mode="after")
    def validate_thresholds(self):
        if self.cell_warning_threshold > self.max_cells:
            raise ValueError(
                "cell_warning_threshold must not be greater than max_cells"
            )
        return self

    @classmethod
    def from_dict(cls, options: dict[str, Any]) -> EngineConfig:
        try:
            return cls.model_validate(options)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid engine configuration: {e}") from e


DEFAULT_CONFIG = EngineConfig()


def read_config(path: str) -> EngineConfig:
    """Read engine configuration from an INI file with optional ``[limits]``
    and ``[ui]`` sections. Missing options keep their defaults."""
    parser = ConfigParser()
    if not parser.read(path, encoding="utf-8"):
        raise ConfigurationError(f"Can not read configuration file '{path}'")

    options: dict[str, Any] = {}
    for section, fields in _OPTION_FIELDS.items():
        if not parser.has_section(section):
            continue
        for option, field in fields.items():
            if parser.has_option(section, option):
                options[field] = parser.get(section, option)

    return EngineConfig.from_dict(options)
