"""Pydantic models for all configuration."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from dialog_actions.richtext.render import RenderOptions

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class RenderConfig(BaseModel):
    """How rich-text payloads are flattened."""

    fallback_to_original: bool = False

    def to_options(self) -> RenderOptions:
        return RenderOptions(fallback_to_original=self.fallback_to_original)


class EntityConfig(BaseModel):
    """Entity values used when the caller does not supply one."""

    defaults: dict[str, str] = Field(default_factory=dict)

    def resolve(self, overrides: dict[str, str] | None = None) -> dict[str, str]:
        """Return the defaults overlaid with *overrides*."""
        values = dict(self.defaults)
        if overrides:
            values.update(overrides)
        return values


class AppConfig(BaseModel):
    """Top-level configuration."""

    log_level: LogLevel = "WARNING"
    render: RenderConfig = Field(default_factory=RenderConfig)
    entities: EntityConfig = Field(default_factory=EntityConfig)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value
