"""Exceptions raised while parsing and upgrading actions."""

from __future__ import annotations


class ActionError(Exception):
    """Base class for action errors."""


class MalformedPayloadError(ActionError, ValueError):
    """An action's payload is not valid JSON for its declared type."""

    def __init__(self, action_id: str, action_type: str, reason: str) -> None:
        self.action_id = action_id
        self.action_type = action_type
        self.reason = reason
        super().__init__(
            f"Malformed {action_type} payload for action {action_id!r}: {reason}"
        )


class TypeMismatchError(ActionError, TypeError):
    """A typed action was built from an action with a different tag."""

    def __init__(self, expected: str, actual: str, action_id: str = "") -> None:
        self.expected = expected
        self.actual = actual
        self.action_id = action_id
        super().__init__(
            f"Action {action_id!r} has type {actual!r}, expected {expected!r}"
        )
