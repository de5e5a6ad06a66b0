"""Type-specific payload shapes and the tagged parser that produces them.

Each recognized action type stores a different JSON document in its
``payload`` string:

  ``TEXT``       : ``{"json": <rich text value>}``
  ``CARD``       : ``{"payload": <template name>, "arguments": [...]}``
  ``API_LOCAL``  : ``{"payload": <callback name>, "logicArguments": [...],
                   "renderArguments": [...]}``

Any other tag yields an ``UnknownPayload`` wrapping the raw string.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dialog_actions.actions.errors import MalformedPayloadError
from dialog_actions.actions.types import ActionType
from dialog_actions.richtext.document import RichTextValue
from dialog_actions.richtext.render import RenderOptions, collect_entity_ids, render

logger = logging.getLogger(__name__)


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# ── Text ────────────────────────────────────────────────────────────────────


class TextPayload(_Payload):
    json_value: RichTextValue = Field(default_factory=RichTextValue, alias="json")

    def render(
        self,
        entity_values: Mapping[str, str],
        options: RenderOptions | Mapping[str, Any] | None = None,
    ) -> str:
        return render(self.json_value, entity_values, options)

    def entity_ids(self) -> list[str]:
        return collect_entity_ids(self.json_value)


# ── Arguments ───────────────────────────────────────────────────────────────


class ActionArgument(_Payload):
    """A named rich-text value attached to a card or API action."""

    parameter: str
    value: TextPayload

    def render_value(
        self,
        entity_values: Mapping[str, str],
        options: RenderOptions | Mapping[str, Any] | None = None,
    ) -> str:
        """Render this argument's value with *entity_values* substituted."""
        return self.value.render(entity_values, options)


@dataclass(frozen=True)
class RenderedActionArgument:
    """An argument after rendering: parameter name and flat string value."""

    parameter: str
    value: str


def render_argument_list(
    arguments: tuple[ActionArgument, ...] | list[ActionArgument],
    entity_values: Mapping[str, str],
    options: RenderOptions | Mapping[str, Any] | None = None,
) -> list[RenderedActionArgument]:
    return [
        RenderedActionArgument(
            parameter=argument.parameter,
            value=argument.render_value(entity_values, options),
        )
        for argument in arguments
    ]


# ── Card / API ──────────────────────────────────────────────────────────────


class CardPayload(_Payload):
    payload: str
    arguments: list[ActionArgument] = Field(default_factory=list)

    @property
    def template_name(self) -> str:
        return self.payload


class ApiPayload(_Payload):
    payload: str
    logic_arguments: list[ActionArgument] = Field(
        default_factory=list, alias="logicArguments"
    )
    render_arguments: list[ActionArgument] = Field(
        default_factory=list, alias="renderArguments"
    )

    @property
    def callback_name(self) -> str:
        return self.payload


class UnknownPayload(_Payload):
    """Raw payload of an action whose tag has no parse rule."""

    raw: str


ActionPayload = Union[TextPayload, CardPayload, ApiPayload, UnknownPayload]

_PAYLOAD_MODELS: dict[ActionType, type[TextPayload | CardPayload | ApiPayload]] = {
    ActionType.TEXT: TextPayload,
    ActionType.CARD: CardPayload,
    ActionType.API_LOCAL: ApiPayload,
}


def parse_payload(action_type: str, payload: str, action_id: str = "") -> ActionPayload:
    """Parse *payload* according to *action_type*.

    Unknown tags are returned as :class:`UnknownPayload` without attempting
    to decode the string.

    Raises
    ------
    MalformedPayloadError
        If the tag is recognized and the payload is not valid JSON or does
        not have the expected shape.
    """
    known = ActionType.from_tag(action_type)
    if known is None:
        logger.debug(
            "Action %r has unrecognized type %r, keeping raw payload",
            action_id,
            action_type,
        )
        return UnknownPayload(raw=payload)

    try:
        data = json.loads(payload)
    except (TypeError, json.JSONDecodeError) as exc:
        logger.warning("Action %r payload is not valid JSON: %s", action_id, exc)
        raise MalformedPayloadError(action_id, known.value, str(exc)) from exc

    if not isinstance(data, dict):
        logger.warning(
            "Action %r payload decoded to %s, expected an object",
            action_id,
            type(data).__name__,
        )
        raise MalformedPayloadError(
            action_id, known.value, f"expected a JSON object, got {type(data).__name__}"
        )

    try:
        return _PAYLOAD_MODELS[known].model_validate(data)
    except ValidationError as exc:
        logger.warning("Action %r payload failed validation: %s", action_id, exc)
        raise MalformedPayloadError(action_id, known.value, str(exc)) from exc
