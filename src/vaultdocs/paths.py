"""String helpers for vault paths, anchors and slugs."""

from __future__ import annotations

import posixpath
import re
from urllib.parse import unquote

from pymdownx.slugs import slugify as heading_slugify
from slugify import slugify as slugify_text

# Scheme-prefixed URLs (``https:``, ``mailto:``); Windows drive letters excluded
_ABSOLUTE_URL_RE = re.compile(r"^[a-zA-Z][a-zA-Z\d+\-.]*?:")
_WINDOWS_PATH_RE = re.compile(r"^[a-zA-Z]:\\")

# Heading ids as Markdown toc extensions derive them: lowercased, spaces to hyphens
_anchor_slugify = heading_slugify(case="lower")

NOTE_EXTENSION = ".md"

ASSET_EXTENSIONS: dict[str, frozenset[str]] = {
    "audio": frozenset({".flac", ".m4a", ".mp3", ".ogg", ".wav", ".3gp"}),
    "image": frozenset({".avif", ".bmp", ".gif", ".jpeg", ".jpg", ".png", ".svg", ".webp"}),
    "video": frozenset({".mkv", ".mov", ".mp4", ".ogv", ".webm"}),
    "other": frozenset({".pdf"}),
}


def get_extension(path: str) -> str:
    """Return the lowercased extension of the last path segment (``""`` when none)."""
    return posixpath.splitext(posixpath.basename(path))[1].lower()


def is_anchor(url: str) -> bool:
    return url.startswith("#")


def is_block_anchor(anchor: str) -> bool:
    """``#^block-id`` references a block rather than a heading."""
    return anchor.startswith("#^")


def is_absolute_url(url: str) -> bool:
    if _WINDOWS_PATH_RE.match(url):
        return False
    return bool(_ABSOLUTE_URL_RE.match(url))


def is_asset(path: str, kind: str | None = None) -> bool:
    """Return ``True`` if *path* has a known asset extension (of *kind*, when given)."""
    ext = get_extension(path)
    if kind is not None:
        return ext in ASSET_EXTENSIONS[kind]
    return any(ext in extensions for extensions in ASSET_EXTENSIONS.values())


def extract_path_and_anchor(url: str) -> tuple[str, str | None]:
    """Split ``note#Heading`` into ``("note", "#Heading")``."""
    path, sep, anchor = url.partition("#")
    return path, f"#{anchor}" if sep else None


def slugify(segment: str) -> str:
    """Lowercase *segment*, collapse non-alphanumeric runs to ``-`` and trim hyphens."""
    return slugify_text(segment, allow_unicode=True)


def slugify_path(path: str) -> str:
    """Slugify every segment of a vault path.

    The ``.md`` extension of a note is dropped; any other extension is kept
    (lowercased) so asset URLs still point at the asset::

        >>> slugify_path("/Folder One/My Note.md")
        'folder-one/my-note'
        >>> slugify_path("assets/My Pic.PNG")
        'assets/my-pic.png'
    """
    segments = [segment for segment in path.split("/") if segment and segment != "."]
    if not segments:
        return ""
    *directories, name = segments
    stem, ext = posixpath.splitext(name)
    if ext.lower() == NOTE_EXTENSION:
        last = slugify(stem)
    elif ext and stem:
        last = f"{slugify(stem)}{ext.lower()}"
    else:
        last = slugify(name)
    return "/".join([slugify(directory) for directory in directories] + [last])


def slugify_anchor(anchor: str | None) -> str:
    """Normalise ``#Some Heading`` to ``#some-heading`` and ``#^block`` to ``#block``."""
    if not anchor:
        return ""
    text = unquote(anchor)
    text = text[2:] if is_block_anchor(text) else text.lstrip("#")
    return "#" + _anchor_slugify(text.strip(), "-")


def join_url(output: str, file_path: str, anchor: str | None = None) -> str:
    """Build the site URL of *file_path* below the *output* prefix."""
    return f"{posixpath.join('/', output, slugify_path(file_path))}{slugify_anchor(anchor)}"
