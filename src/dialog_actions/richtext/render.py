"""Entity substitution engine: flattens a rich-text value into plain text."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from dialog_actions.richtext.document import (
    BlockNode,
    Document,
    InlineNode,
    RichTextValue,
    TextNode,
)

EntityValues = Mapping[str, str]


class RenderOptions(BaseModel):
    """Options controlling how unresolved mentions are rendered."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    fallback_to_original: bool = Field(default=False, alias="fallbackToOriginal")


_DEFAULT_OPTIONS = RenderOptions()


def coerce_document(value: RichTextValue | Document | Mapping[str, Any] | None) -> Document | None:
    """Return the document inside *value*, validating plain mappings."""
    if value is None:
        return None
    if isinstance(value, Document):
        return value
    if isinstance(value, RichTextValue):
        return value.document
    if isinstance(value, Mapping):
        if value.get("kind") == "document" or ("nodes" in value and "document" not in value):
            return Document.model_validate(value)
        return RichTextValue.model_validate(value).document
    raise TypeError(f"Cannot render object of type {type(value).__name__}")


def coerce_options(options: RenderOptions | Mapping[str, Any] | None) -> RenderOptions:
    if options is None:
        return _DEFAULT_OPTIONS
    if isinstance(options, RenderOptions):
        return options
    return RenderOptions.model_validate(options)


def render(
    value: RichTextValue | Document | Mapping[str, Any] | None,
    entity_values: EntityValues,
    options: RenderOptions | Mapping[str, Any] | None = None,
) -> str:
    """Flatten *value* to a string, substituting mentions from *entity_values*.

    Parameters
    ----------
    value:
        The editor value (or its document) to render.
    entity_values:
        Map of entity ID to its current string value.  Read only.
    options:
        ``fallback_to_original`` decides what an unresolved mention becomes:
        its authored text when true, nothing when false.

    Returns
    -------
    str
        Leaf text concatenated in document order.  Style marks are ignored
        and nothing is inserted between blocks.
    """
    document = coerce_document(value)
    if document is None:
        return ""

    opts = coerce_options(options)
    parts: list[str] = []
    _render_nodes(document.nodes, entity_values, opts, parts)
    return "".join(parts)


def _render_nodes(
    nodes: Iterable[BlockNode | InlineNode | TextNode],
    entity_values: EntityValues,
    options: RenderOptions,
    parts: list[str],
) -> None:
    for node in nodes:
        if isinstance(node, TextNode):
            parts.extend(leaf.text for leaf in node.leaves)
        elif isinstance(node, InlineNode) and node.is_mention:
            entity_id = node.mention_entity_id
            if entity_id is not None and entity_id in entity_values:
                parts.append(entity_values[entity_id])
            elif options.fallback_to_original:
                _render_nodes(node.nodes, entity_values, options, parts)
        else:
            _render_nodes(node.nodes, entity_values, options, parts)


def plain_text(value: RichTextValue | Document | Mapping[str, Any] | None) -> str:
    """Return the authored text with every mention left as typed."""
    return render(value, {}, RenderOptions(fallback_to_original=True))


def collect_entity_ids(
    value: RichTextValue | Document | Mapping[str, Any] | None,
    completed_only: bool = True,
) -> list[str]:
    """Return entity IDs referenced by mentions, in order, without duplicates.

    Mentions the author never completed (typed ``$foo`` but did not pick an
    entity) are skipped unless *completed_only* is false.
    """
    document = coerce_document(value)
    if document is None:
        return []

    found: list[str] = []
    stack: list[Any] = list(reversed(document.nodes))
    while stack:
        node = stack.pop()
        if isinstance(node, TextNode):
            continue
        if isinstance(node, InlineNode) and node.is_mention:
            entity_id = node.mention_entity_id
            if (
                entity_id is not None
                and (node.mention_completed or not completed_only)
                and entity_id not in found
            ):
                found.append(entity_id)
            continue
        stack.extend(reversed(node.nodes))
    return found
