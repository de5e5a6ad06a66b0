"""Configuration loading and validation."""

from dialog_actions.config.schema import AppConfig, EntityConfig, RenderConfig
from dialog_actions.config.loader import (
    load_config,
    load_entities,
    merge_configs,
    normalize_entity_values,
)

__all__ = [
    "AppConfig",
    "EntityConfig",
    "RenderConfig",
    "load_config",
    "load_entities",
    "merge_configs",
    "normalize_entity_values",
]
