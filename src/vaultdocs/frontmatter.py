"""Metadata header synthesis; runs after every other pass."""

from __future__ import annotations

from typing import Any

import yaml

from vaultdocs import mdast
from vaultdocs.context import TransformContext
from vaultdocs.parser import parse_frontmatter, parse_tags

KATEX_STYLESHEET = "https://cdn.jsdelivr.net/npm/katex@0.16.9/dist/katex.min.css"


def katex_head_entry() -> dict[str, Any]:
    return {"tag": "link", "attrs": {"rel": "stylesheet", "href": KATEX_STYLESHEET}}


def build_frontmatter(
    title: str | None,
    include_katex_styles: bool = False,
    author: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Merge computed fields into the author's metadata.

    ``title`` always wins over the author's; ``tags`` is kept only when
    non-empty; the KaTeX stylesheet is appended to ``head`` at most once.
    """
    remaining = dict(author or {})
    author_title = remaining.pop("title", None)
    tags = parse_tags(remaining.pop("tags", None))
    head = remaining.pop("head", None)
    head = list(head) if isinstance(head, list) else []

    frontmatter: dict[str, Any] = {}
    if title is not None:
        frontmatter["title"] = title
    elif author_title is not None:
        frontmatter["title"] = author_title
    frontmatter.update(remaining)

    if include_katex_styles and katex_head_entry() not in head:
        head.append(katex_head_entry())
    if head:
        frontmatter["head"] = head
    if tags:
        frontmatter["tags"] = tags
    return frontmatter


def dump_frontmatter(frontmatter: dict[str, Any]) -> str:
    return yaml.safe_dump(frontmatter, sort_keys=False, allow_unicode=True).strip()


def synthesize_frontmatter(tree: mdast.Root, context: TransformContext, include_katex_styles: bool = False) -> None:
    """Merge into the root-level metadata header of *tree*, inserting one if absent."""
    for node in tree.children:
        if isinstance(node, mdast.Yaml):
            author = parse_frontmatter(node.value)
            node.value = dump_frontmatter(build_frontmatter(context.stem, include_katex_styles, author))
            return

    value = dump_frontmatter(build_frontmatter(context.stem, include_katex_styles))
    tree.children.insert(0, mdast.Yaml(value=value))
