"""Loading of the YAML config file and of entity value files.

Entity values reach the renderer as strings.  YAML happily produces
numbers, booleans and nulls for hand-written entity files, so every
mapping of entity values goes through :func:`normalize_entity_values`
before it is used: scalars are converted, anything else is dropped with
a warning naming the entity ID.
"""

from __future__ import annotations

import logging
from typing import Any

import yaml
from pydantic import ValidationError

from dialog_actions.config.schema import AppConfig

logger = logging.getLogger(__name__)


def _read_yaml(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def normalize_entity_values(raw: dict[Any, Any], source: str = "<memory>") -> dict[str, str]:
    """Coerce an entity-ID mapping to ``dict[str, str]``.

    Numbers become their decimal form and booleans ``"true"``/``"false"``.
    Lists, mappings and nulls have no string rendering and are skipped.
    """
    values: dict[str, str] = {}
    for entity_id, value in raw.items():
        key = str(entity_id)
        if isinstance(value, str):
            values[key] = value
        elif isinstance(value, bool):
            logger.warning("%s: entity %r has boolean value %r, using text", source, key, value)
            values[key] = "true" if value else "false"
        elif isinstance(value, (int, float)):
            logger.warning("%s: entity %r has numeric value %r, using text", source, key, value)
            values[key] = str(value)
        else:
            logger.warning(
                "%s: skipping entity %r, %s is not a usable value",
                source,
                key,
                type(value).__name__,
            )
    return values


def load_entities(path: str) -> dict[str, str]:
    """Read a YAML (or JSON) file mapping entity IDs to values.

    Unlike :func:`load_config` this does not fall back silently: the file
    was named explicitly, so a broken one is the caller's problem.

    Raises
    ------
    ValueError
        If the file cannot be parsed or does not hold a mapping.
    """
    try:
        data = _read_yaml(path)
    except yaml.YAMLError as exc:
        raise ValueError(f"{path} is not valid YAML/JSON: {exc}") from exc

    if data is None:
        logger.info("Entity file %s is empty", path)
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must map entity IDs to values")

    values = normalize_entity_values(data, source=path)
    logger.debug("Loaded %d entity value(s) from %s", len(values), path)
    return values


def load_config(path: str | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Parameters
    ----------
    path:
        Config file location.  *None*, a missing file, unparseable YAML
        or invalid values all yield the default :class:`AppConfig`, with
        the reason logged.

    Returns
    -------
    AppConfig
        Validated configuration; ``entities.defaults`` already normalized.
    """
    if path is None:
        return AppConfig()

    try:
        data = _read_yaml(path)
    except FileNotFoundError:
        logger.warning("No config at %s, rendering with defaults", path)
        return AppConfig()
    except yaml.YAMLError as exc:
        logger.error("Config %s is not valid YAML: %s", path, exc)
        return AppConfig()

    if not isinstance(data, dict):
        logger.warning("Config %s is not a mapping, rendering with defaults", path)
        return AppConfig()

    entities = data.get("entities")
    if isinstance(entities, dict) and isinstance(entities.get("defaults"), dict):
        data = {
            **data,
            "entities": {
                **entities,
                "defaults": normalize_entity_values(entities["defaults"], source=path),
            },
        }

    try:
        return AppConfig.model_validate(data)
    except ValidationError as exc:
        logger.error("Config %s rejected: %s", path, exc)
        return AppConfig()


def merge_configs(base: AppConfig, overrides: dict[str, Any]) -> AppConfig:
    """Return *base* with nested *overrides* applied.

    Entity defaults are merged key by key rather than replaced.  If the
    result does not validate, *base* itself is returned.
    """
    merged = _overlay(base.model_dump(), overrides)

    try:
        return AppConfig.model_validate(merged)
    except ValidationError as exc:
        logger.error("Ignoring config overrides %r: %s", overrides, exc)
        return base


def _overlay(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in overrides.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = _overlay(current, value)
        else:
            result[key] = value
    return result
