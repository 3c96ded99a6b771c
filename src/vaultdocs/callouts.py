"""Callout blockquotes -> documentation asides.

A callout is a blockquote whose first line reads ``[!type] Optional title``
(an optional ``+``/``-`` fold marker may follow the closing bracket)::

    > [!warning] Mind the gap
    > Body text.

becomes::

    :::caution[Mind the gap]
    Body text.
    :::
"""

from __future__ import annotations

from vaultdocs import mdast
from vaultdocs.parser import CALLOUT_RE

ASIDE_DELIMITER = ":::"
DEFAULT_ASIDE_TYPE = "note"

CALLOUT_ASIDE_TYPES: dict[str, str] = {
    "note": "note",
    "abstract": "tip",
    "summary": "tip",
    "tldr": "tip",
    "info": "note",
    "todo": "note",
    "tip": "tip",
    "hint": "tip",
    "important": "tip",
    "success": "note",
    "check": "note",
    "done": "note",
    "question": "caution",
    "help": "caution",
    "faq": "caution",
    "warning": "caution",
    "caution": "caution",
    "attention": "caution",
    "failure": "danger",
    "fail": "danger",
    "missing": "danger",
    "danger": "danger",
    "error": "danger",
    "bug": "danger",
    "example": "tip",
    "quote": "note",
    "cite": "note",
}


def get_aside_type(callout_type: str) -> str:
    """Map a callout type (any case) to an aside type, falling back to ``note``."""
    return CALLOUT_ASIDE_TYPES.get(callout_type.lower(), DEFAULT_ASIDE_TYPE)


def convert_callout(node: mdast.Blockquote) -> list[mdast.Node] | None:
    """Return the aside nodes replacing *node*, or ``None`` if it is not a callout."""
    if not node.children or not isinstance(node.children[0], mdast.Paragraph):
        return None
    first_child, *other_children = node.children

    if not first_child.children or not isinstance(first_child.children[0], mdast.Text):
        return None
    first_text, *other_inlines = first_child.children

    first_line, *other_lines = first_text.value.split("\n")
    match = CALLOUT_RE.match(first_line) if first_line else None
    if match is None:
        return None

    title = match.group("title").strip()
    aside_title = f"[{title}]" if title else ""
    opening = mdast.Html(value=f"{ASIDE_DELIMITER}{get_aside_type(match.group('type'))}{aside_title}\n")
    body = "\n".join(other_lines)

    paragraph = mdast.Paragraph(children=[opening, *([mdast.Text(value=body)] if body else []), *other_inlines])
    if not other_children:
        paragraph.children.append(mdast.Html(value=f"\n{ASIDE_DELIMITER}"))
        return [paragraph]
    return [paragraph, *other_children, mdast.Html(value=ASIDE_DELIMITER)]
