"""Embedded notes and non-image assets."""

from __future__ import annotations

import html
import logging
import posixpath
from urllib.parse import unquote

from vaultdocs import mdast
from vaultdocs.config import LinkFormat, LinkSyntax
from vaultdocs.context import TransformContext
from vaultdocs.errors import CyclicEmbedError
from vaultdocs.files import VaultFile
from vaultdocs.links import relative_file_path
from vaultdocs.paths import NOTE_EXTENSION, extract_path_and_anchor, get_extension, is_asset, join_url

logger = logging.getLogger(__name__)


def is_markdown_asset(file_path: str, link_syntax: LinkSyntax) -> bool:
    """An embed target is a note if markdown syntax points at a ``.md`` file or it has no extension."""
    path, _ = extract_path_and_anchor(file_path)
    return (link_syntax is LinkSyntax.MARKDOWN and path.endswith(NOTE_EXTENSION)) or get_extension(path) == ""


def is_custom_asset(file_path: str) -> bool:
    """Assets rendered by a dedicated element rather than an ``<img>``."""
    return is_asset(file_path) and not is_asset(file_path, "image")


def custom_asset_node(file_url: str) -> mdast.Html:
    src = html.escape(file_url)
    if is_asset(file_url, "audio"):
        return mdast.Html(value=f'<audio class="vaultdocs-embed-audio" controls src="{src}"></audio>')
    if is_asset(file_url, "video"):
        return mdast.Html(value=f'<video class="vaultdocs-embed-video" controls src="{src}"></video>')
    return mdast.Html(value=f'<iframe class="vaultdocs-embed-pdf" src="{src}"></iframe>')


def find_embedded_file(context: TransformContext, url: str) -> VaultFile | None:
    """Find the note an embed *url* refers to, by exact vault path."""
    options = context.vault.options
    extension = NOTE_EXTENSION if options.link_syntax is LinkSyntax.WIKILINK else ""
    path, _ = extract_path_and_anchor(url)
    if options.link_format is LinkFormat.RELATIVE:
        path = relative_file_path(context, path)
    vault_path = posixpath.normpath(posixpath.join("/", f"{unquote(path)}{extension}"))

    for vault_file in context.files:
        if vault_file.path == vault_path:
            return vault_file
    return None


def embed_note(context: TransformContext, url: str) -> tuple[mdast.Node, bool]:
    """Return the blockquote embedding the note at *url* and whether it contains math.

    An unknown note yields an empty text node.  Raises
    :class:`CyclicEmbedError` when the note is already being embedded.
    """
    from vaultdocs.visitor import parse_and_resolve

    vault_file = find_embedded_file(context, url)
    if vault_file is None:
        logger.debug("Embedded note %r not found from %s", url, context.path)
        return mdast.Text(value=""), False

    if vault_file.path in context.embed_chain:
        raise CyclicEmbedError([*context.embed_chain, vault_file.path])

    content = vault_file.fs_path.read_text(encoding="utf-8")
    tree, result = parse_and_resolve(content, context.for_embed(vault_file))
    quote = mdast.Blockquote(
        children=[mdast.Html(value=f"<strong>{html.escape(vault_file.stem)}</strong>"), *tree.children]
    )
    return quote, result.include_katex_styles


def embed_link(context: TransformContext, url: str, text: str = "") -> mdast.Node:
    """Link to the note at *url*, for embeds whose parent only holds inline content."""
    vault_file = find_embedded_file(context, url)
    if vault_file is None:
        logger.debug("Embedded note %r not found from %s", url, context.path)
        return mdast.Text(value="")
    _, anchor = extract_path_and_anchor(url)
    return mdast.Link(
        url=join_url(context.output, vault_file.slug, anchor),
        children=[mdast.Text(value=text or vault_file.stem)],
    )
