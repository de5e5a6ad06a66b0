"""Pydantic models for the rich-text editor value tree.

The authoring UI serializes its editor state as a nested tree::

    value -> document -> block* -> (text | inline)* -> leaf*

Only leaves carry literal text; every other node is structural.  Inline
nodes of the mention type reference an entity by ID and keep the text the
author originally typed as a nested subtree.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

MENTION_NODE_TYPES = frozenset({"mention-inline-node", "mention"})


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# ── Leaves ──────────────────────────────────────────────────────────────────


class Leaf(_Node):
    """A run of literal text with style marks."""

    kind: Literal["leaf"] = "leaf"
    text: str = ""
    marks: list[Any] = Field(default_factory=list)


class TextNode(_Node):
    kind: Literal["text"] = "text"
    leaves: list[Leaf] = Field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(leaf.text for leaf in self.leaves)


# ── Structural nodes ────────────────────────────────────────────────────────


class InlineNode(_Node):
    """Inline element inside a block (mentions, optional groups, ...)."""

    kind: Literal["inline"] = "inline"
    type: str = ""
    is_void: bool = Field(default=False, alias="isVoid")
    data: dict[str, Any] = Field(default_factory=dict)
    nodes: list[Node] = Field(default_factory=list)

    @property
    def is_mention(self) -> bool:
        return self.type in MENTION_NODE_TYPES

    @property
    def mention_entity_id(self) -> str | None:
        """Entity ID referenced by a mention, or None."""
        if not self.is_mention:
            return None
        option = self.data.get("option")
        if not isinstance(option, dict):
            return None
        entity_id = option.get("id")
        return str(entity_id) if entity_id is not None else None

    @property
    def mention_completed(self) -> bool:
        return self.is_mention and bool(self.data.get("completed", False))


class BlockNode(_Node):
    kind: Literal["block"] = "block"
    type: str = ""
    is_void: bool = Field(default=False, alias="isVoid")
    data: dict[str, Any] = Field(default_factory=dict)
    nodes: list[Node] = Field(default_factory=list)


Node = Annotated[Union[BlockNode, InlineNode, TextNode], Field(discriminator="kind")]


# ── Root ────────────────────────────────────────────────────────────────────


class Document(_Node):
    kind: Literal["document"] = "document"
    data: dict[str, Any] = Field(default_factory=dict)
    nodes: list[Node] = Field(default_factory=list)


class RichTextValue(_Node):
    """Serialized editor value.  ``{}`` is valid and holds no document."""

    kind: Literal["value"] = "value"
    document: Document | None = None


# Rebuild for forward references
InlineNode.model_rebuild()
BlockNode.model_rebuild()
Document.model_rebuild()
RichTextValue.model_rebuild()
