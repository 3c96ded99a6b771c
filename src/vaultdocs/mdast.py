"""Markdown syntax tree.

A small, closed set of node kinds modelled on mdast.  Parent nodes keep
their content in ``children``; literal nodes keep it in ``value``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

# ---------------------------------------------------------------------------
# Literal nodes
# ---------------------------------------------------------------------------


@dataclass
class Text:
    value: str


@dataclass
class InlineCode:
    value: str


@dataclass
class InlineMath:
    value: str


@dataclass
class Html:
    """Raw markup, inline or block."""

    value: str


@dataclass
class Break:
    pass


@dataclass
class Image:
    url: str
    alt: str = ""
    title: str | None = None


@dataclass
class Yaml:
    """The metadata header; only ever a direct child of :class:`Root`."""

    value: str


@dataclass
class Code:
    value: str
    lang: str | None = None
    meta: str | None = None


@dataclass
class Math:
    value: str


@dataclass
class ThematicBreak:
    pass


# ---------------------------------------------------------------------------
# Parent nodes
# ---------------------------------------------------------------------------


@dataclass
class Emphasis:
    children: list[Node] = field(default_factory=list)


@dataclass
class Strong:
    children: list[Node] = field(default_factory=list)


@dataclass
class Delete:
    children: list[Node] = field(default_factory=list)


@dataclass
class Link:
    url: str
    children: list[Node] = field(default_factory=list)
    title: str | None = None


@dataclass
class Paragraph:
    children: list[Node] = field(default_factory=list)


@dataclass
class Heading:
    depth: int
    children: list[Node] = field(default_factory=list)


@dataclass
class Blockquote:
    children: list[Node] = field(default_factory=list)


@dataclass
class ListItem:
    children: list[Node] = field(default_factory=list)


@dataclass
class List:
    ordered: bool = False
    start: int | None = None
    spread: bool = False
    children: list[Node] = field(default_factory=list)


@dataclass
class TableCell:
    children: list[Node] = field(default_factory=list)


@dataclass
class TableRow:
    children: list[Node] = field(default_factory=list)


@dataclass
class Table:
    #: One of ``"left"``, ``"right"``, ``"center"`` or ``None`` per column
    align: list[str | None] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)


@dataclass
class Root:
    children: list[Node] = field(default_factory=list)


Parent = Union[
    Root, Paragraph, Heading, Blockquote, List, ListItem, Table, TableRow, TableCell,
    Emphasis, Strong, Delete, Link,
]

Node = Union[
    Parent, Text, InlineCode, InlineMath, Html, Break, Image, Yaml, Code, Math, ThematicBreak,
]

PARENT_TYPES = (
    Root, Paragraph, Heading, Blockquote, List, ListItem, Table, TableRow, TableCell,
    Emphasis, Strong, Delete, Link,
)
BLOCK_TYPES = (Paragraph, Heading, Blockquote, List, Table, Code, Math, ThematicBreak, Yaml)


def is_parent(node: Node) -> bool:
    return isinstance(node, PARENT_TYPES)
