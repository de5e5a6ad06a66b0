"""Shared fixtures: editor value builders and stored action records."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import pytest

from dialog_actions.actions import ActionBase, ActionType

_SIMPLE_TEXT = "simple text payload"
_CUSTOM_ENTITY_ID = "627a43be-4675-4b98-84a7-537262561be6"


class RichText:
    """Builders for serialized editor values."""

    @staticmethod
    def leaf_text(text: str) -> dict[str, Any]:
        return {"kind": "text", "leaves": [{"kind": "leaf", "text": text, "marks": []}]}

    @staticmethod
    def mention(entity_id: str, name: str, completed: bool = True) -> dict[str, Any]:
        return {
            "kind": "inline",
            "type": "mention-inline-node",
            "isVoid": False,
            "data": {"completed": completed, "option": {"id": entity_id, "name": name}},
            "nodes": [RichText.leaf_text(f"${name}")],
        }

    @staticmethod
    def line(*nodes: dict[str, Any]) -> dict[str, Any]:
        return {"kind": "block", "type": "line", "isVoid": False, "data": {}, "nodes": list(nodes)}

    @staticmethod
    def value(*blocks: dict[str, Any]) -> dict[str, Any]:
        return {
            "kind": "value",
            "document": {"kind": "document", "data": {}, "nodes": list(blocks)},
        }


def _make_action(action_type: str, payload: Any, **extra: Any) -> ActionBase:
    raw = payload if isinstance(payload, str) else json.dumps(payload)
    record = {"actionId": "action-1", "actionType": action_type, "payload": raw}
    record.update(extra)
    return ActionBase.from_record(record)


# ======================================================================
# Builders and constants
# ======================================================================


@pytest.fixture
def rich_text() -> type[RichText]:
    return RichText


@pytest.fixture
def make_action() -> Callable[..., ActionBase]:
    """Factory for stored actions; non-string payloads are JSON encoded."""
    return _make_action


@pytest.fixture
def simple_text() -> str:
    return _SIMPLE_TEXT


@pytest.fixture
def custom_entity_id() -> str:
    return _CUSTOM_ENTITY_ID


# ======================================================================
# Editor values
# ======================================================================


@pytest.fixture
def plain_value() -> dict[str, Any]:
    return RichText.value(RichText.line(RichText.leaf_text(_SIMPLE_TEXT)))


@pytest.fixture
def mention_value() -> dict[str, Any]:
    return RichText.value(
        RichText.line(
            RichText.leaf_text("The value of custom is: "),
            RichText.mention(_CUSTOM_ENTITY_ID, "custom"),
            RichText.leaf_text(""),
        )
    )


@pytest.fixture
def arguments(plain_value: dict[str, Any]) -> list[dict[str, Any]]:
    return [
        {"parameter": "p1", "value": {"json": plain_value}},
        {"parameter": "p2", "value": {"json": {}}},
    ]


# ======================================================================
# Actions
# ======================================================================


@pytest.fixture
def text_action(plain_value: dict[str, Any]) -> ActionBase:
    return _make_action(ActionType.TEXT, {"json": plain_value})


@pytest.fixture
def mention_text_action(mention_value: dict[str, Any]) -> ActionBase:
    return _make_action(ActionType.TEXT, {"json": mention_value})


@pytest.fixture
def card_action(arguments: list[dict[str, Any]]) -> ActionBase:
    return _make_action(
        ActionType.CARD, {"payload": "customTemplateName", "arguments": arguments}
    )


@pytest.fixture
def api_action(arguments: list[dict[str, Any]], mention_value: dict[str, Any]) -> ActionBase:
    return _make_action(
        ActionType.API_LOCAL,
        {
            "payload": "myCallback",
            "logicArguments": arguments,
            "renderArguments": [
                *arguments,
                {"parameter": "p3", "value": {"json": mention_value}},
            ],
        },
    )
