"""Typed views over an ActionBase: TextAction, CardAction and ApiAction.

A typed action is validated and parsed once, at construction.  Either the
action's tag matches and its payload parses, or construction raises and
nothing is returned.  ``try_create`` offers the same check as a value for
callers that prefer to branch instead of catching.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar, TypeVar, cast

from dialog_actions.actions.base import ActionBase
from dialog_actions.actions.errors import MalformedPayloadError, TypeMismatchError
from dialog_actions.actions.payloads import (
    ActionArgument,
    ActionPayload,
    ApiPayload,
    CardPayload,
    RenderedActionArgument,
    TextPayload,
    render_argument_list,
)
from dialog_actions.actions.types import ActionType
from dialog_actions.richtext.render import RenderOptions

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="TypedAction")


class TypedAction(ABC):
    """Base for the typed action views."""

    action_type: ClassVar[ActionType]

    def __init__(self, action: ActionBase) -> None:
        if action.action_type != self.action_type.value:
            raise TypeMismatchError(
                self.action_type.value, action.action_type, action.action_id
            )
        self._action = action
        self._load(action.parse_payload())

    @abstractmethod
    def _load(self, parsed: ActionPayload) -> None:
        """Store the parsed payload."""

    @classmethod
    def try_create(
        cls: type[T], action: ActionBase
    ) -> T | TypeMismatchError | MalformedPayloadError:
        """Build the typed view, returning the error instead of raising."""
        try:
            return cls(action)
        except (TypeMismatchError, MalformedPayloadError) as exc:
            logger.debug("Cannot view action %r as %s: %s", action.action_id, cls.__name__, exc)
            return exc

    @property
    def action(self) -> ActionBase:
        return self._action

    @property
    def action_id(self) -> str:
        return self._action.action_id

    def __repr__(self) -> str:
        return f"{type(self).__name__}(action_id={self.action_id!r})"


class TextAction(TypedAction):
    action_type = ActionType.TEXT

    def _load(self, parsed: ActionPayload) -> None:
        self._value = cast(TextPayload, parsed)

    @property
    def value(self) -> TextPayload:
        return self._value

    def render_value(
        self,
        entity_values: Mapping[str, str],
        options: RenderOptions | Mapping[str, Any] | None = None,
    ) -> str:
        return self._value.render(entity_values, options)


class CardAction(TypedAction):
    action_type = ActionType.CARD

    def _load(self, parsed: ActionPayload) -> None:
        card = cast(CardPayload, parsed)
        self._template_name = card.template_name
        self._arguments = tuple(card.arguments)

    @property
    def template_name(self) -> str:
        return self._template_name

    @property
    def arguments(self) -> tuple[ActionArgument, ...]:
        return self._arguments

    def render_arguments(
        self,
        entity_values: Mapping[str, str],
        options: RenderOptions | Mapping[str, Any] | None = None,
    ) -> list[RenderedActionArgument]:
        """Render every argument, preserving order."""
        return render_argument_list(self._arguments, entity_values, options)


class ApiAction(TypedAction):
    action_type = ActionType.API_LOCAL

    def _load(self, parsed: ActionPayload) -> None:
        api = cast(ApiPayload, parsed)
        self._name = api.callback_name
        self._logic_arguments = tuple(api.logic_arguments)
        self._render_arguments = tuple(api.render_arguments)

    @property
    def name(self) -> str:
        return self._name

    @property
    def logic_arguments(self) -> tuple[ActionArgument, ...]:
        return self._logic_arguments

    @property
    def render_arguments(self) -> tuple[ActionArgument, ...]:
        return self._render_arguments

    def render_logic_arguments(
        self,
        entity_values: Mapping[str, str],
        options: RenderOptions | Mapping[str, Any] | None = None,
    ) -> list[RenderedActionArgument]:
        """Render the arguments passed to the callback's logic step."""
        return render_argument_list(self._logic_arguments, entity_values, options)

    def render_render_arguments(
        self,
        entity_values: Mapping[str, str],
        options: RenderOptions | Mapping[str, Any] | None = None,
    ) -> list[RenderedActionArgument]:
        """Render the arguments passed to the callback's render step."""
        return render_argument_list(self._render_arguments, entity_values, options)


_VARIANTS: dict[ActionType, type[TypedAction]] = {
    ActionType.TEXT: TextAction,
    ActionType.CARD: CardAction,
    ActionType.API_LOCAL: ApiAction,
}


def to_typed_action(action: ActionBase) -> TextAction | CardAction | ApiAction | None:
    """Upgrade *action* to its typed view, or None for unrecognized tags."""
    known = action.known_type
    if known is None:
        return None
    return _VARIANTS[known](action)  # type: ignore[return-value]
