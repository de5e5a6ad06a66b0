"""Action records, payload parsing, and typed action views."""

from dialog_actions.actions.base import ActionBase
from dialog_actions.actions.errors import (
    ActionError,
    MalformedPayloadError,
    TypeMismatchError,
)
from dialog_actions.actions.payloads import (
    ActionArgument,
    ActionPayload,
    ApiPayload,
    CardPayload,
    RenderedActionArgument,
    TextPayload,
    UnknownPayload,
    parse_payload,
)
from dialog_actions.actions.types import ActionType
from dialog_actions.actions.variants import (
    ApiAction,
    CardAction,
    TextAction,
    TypedAction,
    to_typed_action,
)

__all__ = [
    "ActionArgument",
    "ActionBase",
    "ActionError",
    "ActionPayload",
    "ActionType",
    "ApiAction",
    "ApiPayload",
    "CardAction",
    "CardPayload",
    "MalformedPayloadError",
    "RenderedActionArgument",
    "TextAction",
    "TextPayload",
    "TypeMismatchError",
    "TypedAction",
    "UnknownPayload",
    "parse_payload",
    "to_typed_action",
]
