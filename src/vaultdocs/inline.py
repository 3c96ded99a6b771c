"""Text-level rewrites of the dialect's inline syntax.

Runs before the structural pass.  Every rule is applied over the whole
tree in turn, so later rules see the text left over by earlier ones:

1. ``==highlight==``  -> ``<mark>``
2. ``%%comment%%``    -> removed
3. ``[[wikilink]]``   -> link / image node with a resolved URL
4. ``#tag``           -> tag ``<span>`` (digits-only tags are left alone)
"""

from __future__ import annotations

import re
from functools import partial
from typing import Callable, Union

from vaultdocs import mdast
from vaultdocs.context import TransformContext
from vaultdocs.embeds import is_markdown_asset
from vaultdocs.links import resolve_wikilink
from vaultdocs.parser import COMMENT_RE, HIGHLIGHT_RE, NUMERIC_TAG_RE, TAG_RE, WIKILINK_RE
from vaultdocs.paths import extract_path_and_anchor, is_anchor, is_block_anchor, slugify_anchor

TAG_OPENING = '<span class="vaultdocs-tag">'

#: A node or nodes to insert, ``None`` to delete the match, ``False`` to keep it
Replacement = Union[mdast.Node, list, None, bool]
Replacer = Callable[["re.Match[str]"], Replacement]


def find_and_replace(tree: mdast.Parent, rules: list[tuple[re.Pattern[str], Replacer]]) -> None:
    """Apply each ``(pattern, replacer)`` rule, in order, to every text node of *tree*."""
    for pattern, replacer in rules:
        _replace_in(tree, pattern, replacer)


def _replace_in(parent: mdast.Parent, pattern: re.Pattern[str], replacer: Replacer) -> None:
    children: list[mdast.Node] = []
    for child in parent.children:
        if isinstance(child, mdast.Text) and not _inside_rendered_tag(children):
            children.extend(_split_text(child, pattern, replacer))
            continue
        if mdast.is_parent(child):
            _replace_in(child, pattern, replacer)
        children.append(child)
    parent.children[:] = children


def _split_text(node: mdast.Text, pattern: re.Pattern[str], replacer: Replacer) -> list[mdast.Node]:
    value = node.value
    result: list[mdast.Node] = []
    last = 0
    for match in pattern.finditer(value):
        replacement = replacer(match)
        if replacement is False:
            continue
        if match.start() > last:
            result.append(mdast.Text(value=value[last : match.start()]))
        if isinstance(replacement, list):
            result.extend(replacement)
        elif replacement is not None:
            result.append(replacement)
        last = match.end()

    if last == 0 and not result:
        return [node]
    if last < len(value):
        result.append(mdast.Text(value=value[last:]))
    return result


def _inside_rendered_tag(preceding: list[mdast.Node]) -> bool:
    # Tag text of a document that was already transformed
    return bool(preceding) and isinstance(preceding[-1], mdast.Html) and preceding[-1].value == TAG_OPENING


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def _highlight(match: "re.Match[str]") -> mdast.Node:
    return mdast.Html(value=f'<mark class="vaultdocs-highlight">{match.group("highlight")}</mark>')


def _comment(match: "re.Match[str]") -> None:
    return None


def _wikilink(context: TransformContext, match: "re.Match[str]") -> mdast.Node:
    url = match.group("url")
    label = match.group("text")
    text = label if label is not None else url

    if is_anchor(url):
        file_url = slugify_anchor(url)
        if label is None:
            text = url[2:] if is_block_anchor(url) else url[1:]
    else:
        url_path, anchor = extract_path_and_anchor(url)
        file_url = resolve_wikilink(context, url_path, anchor)

    if match.group(0).startswith("!"):
        # Note embeds keep the raw target for the structural pass
        embed_url = url if is_markdown_asset(url, context.vault.options.link_syntax) else file_url
        return mdast.Image(url=embed_url, alt=text)

    return mdast.Link(url=file_url, children=[mdast.Text(value=text)])


def _tag(match: "re.Match[str]") -> Replacement:
    tag = match.group("tag")
    if NUMERIC_TAG_RE.match(tag):
        return False
    return mdast.Html(value=f" {TAG_OPENING}#{tag}</span>")


def rewrite_inline(tree: mdast.Root, context: TransformContext) -> None:
    """Rewrite highlights, comments, wikilinks and tags in *tree* in place."""
    context.ensure()
    find_and_replace(
        tree,
        [
            (HIGHLIGHT_RE, _highlight),
            (COMMENT_RE, _comment),
            (WIKILINK_RE, partial(_wikilink, context)),
            (TAG_RE, _tag),
        ],
    )
