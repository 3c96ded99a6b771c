"""Structural pass over the markdown tree.

One traversal handles every node kind that needs attention: math marks
the document as needing KaTeX styles, links and images are resolved,
note embeds are inlined and callout blockquotes become asides.  Code
blocks are left for :mod:`vaultdocs.diagrams`.
"""

from __future__ import annotations

from dataclasses import dataclass

from vaultdocs import mdast
from vaultdocs.callouts import convert_callout
from vaultdocs.config import LinkSyntax
from vaultdocs.context import TransformContext
from vaultdocs.embeds import custom_asset_node, embed_link, embed_note, is_custom_asset, is_markdown_asset
from vaultdocs.inline import rewrite_inline
from vaultdocs.links import resolve_image_url, resolve_link_url
from vaultdocs.markdown import parse_markdown
from vaultdocs.paths import is_absolute_url, is_anchor, slugify_anchor


@dataclass
class VisitResult:
    """What the structural pass learnt about the document."""

    include_katex_styles: bool = False


def visit_tree(tree: mdast.Root, context: TransformContext) -> VisitResult:
    context.ensure()
    result = VisitResult()
    _visit_children(tree, context, result)
    return result


def parse_and_resolve(content: str, context: TransformContext) -> tuple[mdast.Root, VisitResult]:
    """Parse *content* and run the inline and structural passes; front-matter is dropped.

    Used for embedded notes, whose own links resolve against their own folder.
    """
    tree = parse_markdown(content)
    tree.children[:] = [child for child in tree.children if not isinstance(child, mdast.Yaml)]
    rewrite_inline(tree, context)
    return tree, visit_tree(tree, context)


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def _visit_children(parent: mdast.Parent, context: TransformContext, result: VisitResult) -> None:
    index = 0
    while index < len(parent.children):
        index = _visit(parent.children[index], index, parent, context, result)
    _hoist_blocks(parent)


def _visit(
    node: mdast.Node,
    index: int,
    parent: mdast.Parent,
    context: TransformContext,
    result: VisitResult,
) -> int:
    """Handle *node* and return the index of the next sibling to visit."""
    if isinstance(node, (mdast.Math, mdast.InlineMath)):
        result.include_katex_styles = True
        return index + 1

    if isinstance(node, mdast.Link):
        _handle_link(node, context)
        return index + 1

    if isinstance(node, mdast.Image):
        replacement = _handle_image(node, parent, context, result)
        if replacement is not None:
            parent.children[index] = replacement
        return index + 1

    if isinstance(node, mdast.Blockquote):
        aside = convert_callout(node)
        if aside is None:
            _visit_children(node, context, result)
            return index + 1
        # Revisit from the same index so the callout body is handled too
        parent.children[index : index + 1] = aside
        return index

    if isinstance(node, mdast.Code):
        return index + 1

    if mdast.is_parent(node):
        _visit_children(node, context, result)
    return index + 1


def _hoist_blocks(parent: mdast.Parent) -> None:
    """Lift block nodes (embedded notes) out of paragraphs and drop paragraphs left empty."""
    if not any(isinstance(child, mdast.Paragraph) for child in parent.children):
        return

    children: list[mdast.Node] = []
    for child in parent.children:
        if not isinstance(child, mdast.Paragraph):
            children.append(child)
            continue
        if not any(isinstance(grandchild, mdast.BLOCK_TYPES) for grandchild in child.children):
            if not _is_blank(child.children):
                children.append(child)
            continue

        run: list[mdast.Node] = []
        for grandchild in child.children:
            if isinstance(grandchild, mdast.BLOCK_TYPES):
                if not _is_blank(run):
                    children.append(mdast.Paragraph(children=run))
                children.append(grandchild)
                run = []
            else:
                run.append(grandchild)
        if not _is_blank(run):
            children.append(mdast.Paragraph(children=run))
    parent.children[:] = children


def _is_blank(nodes: list[mdast.Node]) -> bool:
    return all(isinstance(node, mdast.Text) and not node.value.strip() for node in nodes)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _handle_link(node: mdast.Link, context: TransformContext) -> None:
    if (
        context.vault.options.link_syntax is LinkSyntax.WIKILINK
        or is_absolute_url(node.url)
        or context.dirname is None
    ):
        return

    if is_anchor(node.url):
        node.url = slugify_anchor(node.url)
        return

    url = resolve_link_url(context, node.url)
    if url is not None:
        node.url = url


def _handle_image(
    node: mdast.Image,
    parent: mdast.Parent,
    context: TransformContext,
    result: VisitResult,
) -> mdast.Node | None:
    """Resolve *node* in place, or return the node replacing it."""
    if is_absolute_url(node.url) or context.dirname is None:
        return None

    options = context.vault.options
    if is_markdown_asset(node.url, options.link_syntax):
        if not isinstance(parent, mdast.Paragraph):
            # Only paragraphs can be split around a quoted block
            return embed_link(context, node.url, node.alt)
        embedded, include_katex_styles = embed_note(context, node.url)
        result.include_katex_styles = result.include_katex_styles or include_katex_styles
        return embedded

    file_url = node.url
    if options.link_syntax is not LinkSyntax.WIKILINK:
        file_url = resolve_image_url(context, node.url)

    if is_custom_asset(node.url):
        return custom_asset_node(file_url)

    node.url = file_url
    return None
