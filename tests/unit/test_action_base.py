"""Tests for dialog_actions.actions.base -- ActionBase and generic dispatch."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

from dialog_actions.actions import (
    ActionArgument,
    ActionBase,
    ActionType,
    MalformedPayloadError,
)


def _record(**overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "actionId": "fake-action-id",
        "actionType": ActionType.TEXT.value,
        "createdDateTime": datetime.now(timezone.utc).isoformat(),
        "payload": "fake-action-payload",
        "isTerminal": False,
        "requiredEntitiesFromPayload": [],
        "requiredEntities": [],
        "negativeEntities": [],
        "requiredConditions": [],
        "negativeConditions": [],
        "suggestedEntity": "fake-action",
        "version": 1,
        "packageCreationId": 1,
        "packageDeletionId": 0,
        "entityId": None,
        "enumValueId": None,
    }
    record.update(overrides)
    return record


# ======================================================================
# Construction
# ======================================================================


class TestActionBaseConstruction:
    def test_assigns_all_properties(self) -> None:
        record = _record(requiredEntities=["e1"], negativeConditions=[{"entityId": "e2"}])
        action = ActionBase.from_record(record)
        assert action.action_id == "fake-action-id"
        assert action.action_type == "TEXT"
        assert action.payload == "fake-action-payload"
        assert action.created_date_time == record["createdDateTime"]
        assert action.required_entities == ("e1",)
        assert action.negative_conditions == ({"entityId": "e2"},)
        assert action.suggested_entity == "fake-action"
        assert action.version == 1
        assert action.package_creation_id == 1
        assert action.package_deletion_id == 0
        assert action.entity_id is None
        assert action.enum_value_id is None

    def test_copy_from_another_action(self) -> None:
        original = ActionBase.from_record(_record(requiredEntities=["e1"]))
        copy = ActionBase.from_record(original)
        assert copy == original
        assert copy is not original

    def test_field_names_accepted(self) -> None:
        action = ActionBase(action_id="a", action_type=ActionType.CARD, payload="{}")
        assert action.action_type == "CARD"
        assert action.known_type is ActionType.CARD

    def test_unknown_type_is_kept(self) -> None:
        action = ActionBase.from_record(_record(actionType="fake-action-type"))
        assert action.action_type == "fake-action-type"
        assert action.known_type is None

    def test_immutable(self) -> None:
        action = ActionBase.from_record(_record())
        with pytest.raises(ValueError):
            action.payload = "changed"  # type: ignore[misc]

    @pytest.mark.parametrize(
        "field",
        [
            "required_entities",
            "required_entities_from_payload",
            "negative_entities",
            "required_conditions",
            "negative_conditions",
        ],
    )
    def test_gating_collections_cannot_grow(self, field: str) -> None:
        action = ActionBase.from_record(
            _record(
                requiredEntities=["e1"],
                requiredEntitiesFromPayload=["e1"],
                negativeEntities=["e1"],
                requiredConditions=["c1"],
                negativeConditions=["c1"],
            )
        )
        collection = getattr(action, field)
        assert isinstance(collection, tuple)
        with pytest.raises(AttributeError):
            collection.append("e2")
        assert len(getattr(action, field)) == 1

    def test_record_list_not_shared(self) -> None:
        entities = ["e1"]
        action = ActionBase.from_record(_record(requiredEntities=entities))
        entities.append("e2")
        assert action.required_entities == ("e1",)


# ======================================================================
# get_payload
# ======================================================================


class TestGetPayload:
    def test_invalid_payload_raises(self) -> None:
        corrupt = ActionBase.from_record(_record())
        with pytest.raises(MalformedPayloadError) as exc_info:
            ActionBase.get_payload(corrupt, {})
        assert exc_info.value.action_id == "fake-action-id"
        assert exc_info.value.action_type == "TEXT"

    @pytest.mark.parametrize("tag", [ActionType.TEXT, ActionType.CARD, ActionType.API_LOCAL])
    def test_invalid_payload_raises_for_every_known_type(self, tag: ActionType) -> None:
        corrupt = ActionBase.from_record(_record(actionType=tag.value))
        with pytest.raises(MalformedPayloadError):
            ActionBase.get_payload(corrupt, {})

    def test_malformed_error_is_value_error(self) -> None:
        corrupt = ActionBase.from_record(_record())
        with pytest.raises(ValueError):
            ActionBase.get_payload(corrupt, {})

    def test_wrong_shape_raises(self, make_action) -> None:
        action = make_action(ActionType.CARD, {"arguments": []})
        with pytest.raises(MalformedPayloadError):
            ActionBase.get_payload(action, {})

    def test_non_object_json_raises(self, make_action) -> None:
        action = make_action(ActionType.TEXT, "[1, 2]")
        with pytest.raises(MalformedPayloadError):
            ActionBase.get_payload(action, {})

    def test_unknown_type_returns_raw_payload(self) -> None:
        unknown = ActionBase.from_record(_record(actionType="fake-action-type"))
        assert ActionBase.get_payload(unknown, {}) == unknown.payload

    def test_unknown_type_with_json_payload_is_not_parsed(self, make_action) -> None:
        unknown = make_action("END_SESSION", {"json": {}})
        assert ActionBase.get_payload(unknown, {}) == '{"json": {}}'

    def test_text_action(self, text_action: ActionBase, simple_text: str) -> None:
        assert ActionBase.get_payload(text_action, {}) == simple_text

    def test_text_action_with_entity(
        self, mention_text_action: ActionBase, custom_entity_id: str
    ) -> None:
        result = ActionBase.get_payload(
            mention_text_action, {custom_entity_id: "customValue"}
        )
        assert result == "The value of custom is: customValue"

    def test_text_action_with_fallback(self, mention_text_action: ActionBase) -> None:
        result = ActionBase.get_payload(
            mention_text_action, {}, {"fallbackToOriginal": True}
        )
        assert result == "The value of custom is: $custom"

    def test_card_action(self, card_action: ActionBase) -> None:
        assert ActionBase.get_payload(card_action, {}) == "customTemplateName"
        assert ActionBase.get_payload(card_action, {"p1": "x"}) == "customTemplateName"

    def test_api_action(self, api_action: ActionBase) -> None:
        assert ActionBase.get_payload(api_action, {}) == "myCallback"

    def test_payload_string_untouched(
        self, mention_text_action: ActionBase, custom_entity_id: str
    ) -> None:
        before = mention_text_action.payload
        ActionBase.get_payload(mention_text_action, {custom_entity_id: "v"})
        assert mention_text_action.payload == before


# ======================================================================
# get_action_arguments
# ======================================================================


class TestGetActionArguments:
    def test_text_action_has_none(self, text_action: ActionBase) -> None:
        assert ActionBase.get_action_arguments(text_action) == []

    def test_text_action_with_corrupt_payload_has_none(self) -> None:
        corrupt = ActionBase.from_record(_record())
        assert ActionBase.get_action_arguments(corrupt) == []

    def test_card_action(
        self, card_action: ActionBase, arguments: list[dict[str, Any]]
    ) -> None:
        expected = [ActionArgument.model_validate(a) for a in arguments]
        actual = ActionBase.get_action_arguments(card_action)
        assert actual == expected
        assert all(isinstance(a, ActionArgument) for a in actual)
        assert [a.parameter for a in actual] == ["p1", "p2"]

    def test_api_action_returns_logic_arguments(self, api_action: ActionBase) -> None:
        actual = ActionBase.get_action_arguments(api_action)
        assert [a.parameter for a in actual] == ["p1", "p2"]

    def test_unknown_type_has_none(self) -> None:
        unknown = ActionBase.from_record(_record(actionType="fake-action-type"))
        assert ActionBase.get_action_arguments(unknown) == []

    def test_returns_fresh_list(self, card_action: ActionBase) -> None:
        first = ActionBase.get_action_arguments(card_action)
        first.clear()
        assert len(ActionBase.get_action_arguments(card_action)) == 2

    def test_argument_renders_value(self, card_action: ActionBase, simple_text: str) -> None:
        arguments = ActionBase.get_action_arguments(card_action)
        assert simple_text in arguments[0].render_value({})
        assert arguments[1].render_value({}) == ""


# ======================================================================
# payload_entity_ids
# ======================================================================


class TestPayloadEntityIds:
    def test_text_action(self, mention_text_action: ActionBase, custom_entity_id: str) -> None:
        assert mention_text_action.payload_entity_ids() == [custom_entity_id]

    def test_api_action_covers_both_argument_lists(
        self, api_action: ActionBase, custom_entity_id: str
    ) -> None:
        assert api_action.payload_entity_ids() == [custom_entity_id]

    def test_card_action_deduplicates(self, make_action, rich_text) -> None:
        arg_value = {
            "json": rich_text.value(
                rich_text.line(
                    rich_text.mention("e1", "a"),
                    rich_text.leaf_text(" "),
                    rich_text.mention("e2", "b"),
                )
            )
        }
        action = make_action(
            ActionType.CARD,
            {
                "payload": "t",
                "arguments": [
                    {"parameter": "x", "value": arg_value},
                    {"parameter": "y", "value": arg_value},
                ],
            },
        )
        assert action.payload_entity_ids() == ["e1", "e2"]

    def test_unknown_type(self) -> None:
        unknown = ActionBase.from_record(_record(actionType="fake-action-type"))
        assert unknown.payload_entity_ids() == []
