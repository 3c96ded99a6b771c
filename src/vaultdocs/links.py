"""Resolve link and asset targets to site URLs.

Three link formats are supported, mirroring how the vault editor writes
new links:

* ``relative`` -- targets are relative to the linking note's folder.
* ``absolute`` -- targets are full vault paths.
* ``shortest`` -- targets are bare file names unless ambiguous, in which
  case the editor writes the full vault path.
"""

from __future__ import annotations

import logging
import posixpath
from urllib.parse import unquote

from vaultdocs.config import LinkFormat
from vaultdocs.context import TransformContext
from vaultdocs.files import VaultFile
from vaultdocs.paths import extract_path_and_anchor, join_url, slugify_path

logger = logging.getLogger(__name__)


def find_by_name(files: tuple[VaultFile, ...], name: str) -> VaultFile | None:
    """First entry whose stem or file name is *name*."""
    for vault_file in files:
        if vault_file.stem == name or vault_file.file_name == name:
            return vault_file
    return None


def find_by_file_name(files: tuple[VaultFile, ...], file_name: str) -> VaultFile | None:
    for vault_file in files:
        if vault_file.file_name == file_name:
            return vault_file
    return None


def relative_file_path(context: TransformContext, relative_path: str) -> str:
    """Join *relative_path* to the current document's vault folder (the root when unknown)."""
    directory = context.relative_dir() if context.path is not None else "/"
    return posixpath.normpath(posixpath.join(directory, relative_path))


def vault_file_path(vault_file: VaultFile, url: str) -> str:
    """Path to slug for a matched file: its own slug, or the authored path when its name is shared."""
    return vault_file.slug if vault_file.unique_file_name else slugify_path(url)


def resolve_wikilink(context: TransformContext, url_path: str, anchor: str | None) -> str:
    """URL of a ``[[url_path#anchor]]`` target under the active link format."""
    link_format = context.vault.options.link_format
    if link_format is LinkFormat.RELATIVE:
        return join_url(context.output, relative_file_path(context, url_path), anchor)
    if link_format is LinkFormat.ABSOLUTE:
        return join_url(context.output, url_path, anchor)

    matching_file = find_by_name(context.files, url_path)
    if matching_file is None:
        logger.debug("No vault file named %r, linking to the path as written", url_path)
        return join_url(context.output, url_path, anchor)
    return join_url(context.output, vault_file_path(matching_file, url_path), anchor)


def resolve_link_url(context: TransformContext, url: str) -> str | None:
    """URL of a markdown link target, or ``None`` when no vault file has that name."""
    path, anchor = extract_path_and_anchor(unquote(url))
    matching_file = find_by_file_name(context.files, posixpath.basename(path))
    if matching_file is None:
        return None

    if context.vault.options.link_format is LinkFormat.RELATIVE:
        return join_url(context.output, relative_file_path(context, path), anchor)
    return join_url(context.output, vault_file_path(matching_file, path), anchor)


def resolve_image_url(context: TransformContext, url: str) -> str:
    """URL of a markdown image target; unchanged when a shortest-format name is unknown."""
    path, _ = extract_path_and_anchor(unquote(url))
    link_format = context.vault.options.link_format
    if link_format is LinkFormat.RELATIVE:
        return join_url(context.output, relative_file_path(context, path))
    if link_format is LinkFormat.ABSOLUTE:
        return join_url(context.output, path)

    matching_file = find_by_file_name(context.files, posixpath.basename(path))
    if matching_file is None:
        return url
    return join_url(context.output, vault_file_path(matching_file, path))
