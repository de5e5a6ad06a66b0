"""Action type tags."""

from __future__ import annotations

from enum import Enum


class ActionType(str, Enum):
    """Tags with a known payload shape.

    Stored actions may carry other tags; those are valid but opaque.
    """

    TEXT = "TEXT"
    CARD = "CARD"
    API_LOCAL = "API_LOCAL"

    @classmethod
    def from_tag(cls, tag: str | ActionType) -> ActionType | None:
        """Return the member for *tag*, or None if the tag is not recognized."""
        try:
            return cls(tag)
        except ValueError:
            return None
