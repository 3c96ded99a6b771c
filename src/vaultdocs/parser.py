"""Dialect patterns and author front-matter parsing."""

from __future__ import annotations

import logging
import re
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# ==highlighted text==
HIGHLIGHT_RE = re.compile(r"==(?P<highlight>(?:(?!==).)+)==")
# %%comment%%, may span lines
COMMENT_RE = re.compile(r"%%(?P<comment>(?:(?!%%).)+)%%", re.DOTALL)
# [[Target]], [[Target|Alias]], ![[Embed]]
WIKILINK_RE = re.compile(r"!?\[\[(?P<url>[^\[\]|\n]+)(?:\|(?P<text>[^\[\]|\n]+))?\]\]")
# Inline #tags, preceded by whitespace or at the start of the text
TAG_RE = re.compile(r"(?:^|\s)#(?P<tag>[\w/-]+)")
# Digits only: not a valid tag
NUMERIC_TAG_RE = re.compile(r"^\d+$")
# First line of a callout: [!type]+ Optional title
CALLOUT_RE = re.compile(r"^\[!(?P<type>\w+)\][+-]? ?(?P<title>.*)$")


def parse_frontmatter(value: str) -> dict[str, Any]:
    """Parse the YAML of a metadata header into a dict.

    Malformed YAML, or YAML that is not a mapping, yields ``{}``.
    """
    try:
        meta = yaml.safe_load(value) or {}
    except yaml.YAMLError as exc:
        logger.warning("Ignoring malformed front-matter: %s", exc)
        return {}
    if not isinstance(meta, dict):
        logger.warning("Ignoring front-matter that is not a mapping")
        return {}
    return meta


def parse_tags(value: Any) -> list[str]:
    """Normalise a front-matter ``tags`` value to a de-duplicated list.

    Accepts a list or a comma/space separated string; a leading ``#`` is
    dropped.
    """
    if value is None:
        return []
    if isinstance(value, str):
        raw = re.split(r"[,\s]+", value)
    elif isinstance(value, (list, tuple)):
        raw = [str(item) for item in value if item is not None]
    else:
        raw = [str(value)]
    tags = [tag.strip().lstrip("#") for tag in raw]
    return list(dict.fromkeys(tag for tag in tags if tag))
