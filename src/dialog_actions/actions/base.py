"""The generic action record and type-agnostic payload access."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dialog_actions.actions.payloads import (
    ActionArgument,
    ActionPayload,
    ApiPayload,
    CardPayload,
    TextPayload,
    UnknownPayload,
    parse_payload,
)
from dialog_actions.actions.types import ActionType
from dialog_actions.richtext.render import RenderOptions

logger = logging.getLogger(__name__)


class ActionBase(BaseModel):
    """One unit of agent output as stored by the authoring system.

    The record is immutable.  ``payload`` is a JSON string whose shape
    depends on ``action_type``; every parsing method is a pure read.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    action_id: str = Field(default="", alias="actionId")
    action_type: str = Field(default=ActionType.TEXT.value, alias="actionType")
    payload: str = ""
    created_date_time: str = Field(default="", alias="createdDateTime")
    is_terminal: bool = Field(default=False, alias="isTerminal")

    # Selection gating, evaluated by the dialogue policy.
    required_entities_from_payload: tuple[str, ...] = Field(
        default=(), alias="requiredEntitiesFromPayload"
    )
    required_entities: tuple[str, ...] = Field(default=(), alias="requiredEntities")
    negative_entities: tuple[str, ...] = Field(default=(), alias="negativeEntities")
    required_conditions: tuple[Any, ...] = Field(
        default=(), alias="requiredConditions"
    )
    negative_conditions: tuple[Any, ...] = Field(
        default=(), alias="negativeConditions"
    )

    suggested_entity: str | None = Field(default=None, alias="suggestedEntity")
    entity_id: str | None = Field(default=None, alias="entityId")
    enum_value_id: str | None = Field(default=None, alias="enumValueId")

    version: int = 0
    package_creation_id: int = Field(default=0, alias="packageCreationId")
    package_deletion_id: int = Field(default=0, alias="packageDeletionId")

    @field_validator("action_type", mode="before")
    @classmethod
    def _tag_value(cls, value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        return value

    @classmethod
    def from_record(cls, record: Mapping[str, Any] | ActionBase) -> ActionBase:
        """Build an action from a stored attribute bag (or copy another one)."""
        if isinstance(record, ActionBase):
            return cls.model_validate(record.model_dump())
        return cls.model_validate(dict(record))

    @property
    def known_type(self) -> ActionType | None:
        return ActionType.from_tag(self.action_type)

    def parse_payload(self) -> ActionPayload:
        """Parse ``payload`` into the shape declared by ``action_type``."""
        return parse_payload(self.action_type, self.payload, self.action_id)

    def payload_entity_ids(self) -> list[str]:
        """Entity IDs referenced by completed mentions in the payload.

        Covers the text body and every argument, without duplicates.
        """
        parsed = self.parse_payload()
        if isinstance(parsed, TextPayload):
            return parsed.entity_ids()

        found: list[str] = []
        for argument in _arguments_of(parsed, include_render=True):
            for entity_id in argument.value.entity_ids():
                if entity_id not in found:
                    found.append(entity_id)
        return found

    # ------------------------------------------------------------------
    # Generic dispatch
    # ------------------------------------------------------------------

    @staticmethod
    def get_payload(
        action: ActionBase,
        entity_values: Mapping[str, str],
        options: RenderOptions | Mapping[str, Any] | None = None,
    ) -> str:
        """Return the action's primary output as a string.

        Text actions are rendered with *entity_values* substituted; card
        and API actions return their template or callback name; unknown
        types return ``payload`` untouched.

        Raises
        ------
        MalformedPayloadError
            If a recognized type carries a payload that cannot be parsed.
        """
        parsed = action.parse_payload()
        logger.debug("Resolving payload of %s action %r", action.action_type, action.action_id)

        if isinstance(parsed, TextPayload):
            return parsed.render(entity_values, options)
        if isinstance(parsed, CardPayload):
            return parsed.template_name
        if isinstance(parsed, ApiPayload):
            return parsed.callback_name
        return parsed.raw

    @staticmethod
    def get_action_arguments(action: ActionBase) -> list[ActionArgument]:
        """Return the arguments of a card (``arguments``) or API action
        (``logicArguments``).  Other types have none."""
        if action.known_type in (None, ActionType.TEXT):
            return []
        return list(_arguments_of(action.parse_payload()))


def _arguments_of(parsed: ActionPayload, include_render: bool = False) -> list[ActionArgument]:
    if isinstance(parsed, CardPayload):
        return list(parsed.arguments)
    if isinstance(parsed, ApiPayload):
        if include_render:
            return [*parsed.logic_arguments, *parsed.render_arguments]
        return list(parsed.logic_arguments)
    if isinstance(parsed, (TextPayload, UnknownPayload)):
        return []
    raise TypeError(f"Unexpected payload type {type(parsed).__name__}")
