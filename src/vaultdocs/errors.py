"""Exception hierarchy raised by vaultdocs."""

from __future__ import annotations

from pathlib import Path


class VaultDocsError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(VaultDocsError):
    """Invalid vault root or malformed options; raised before any document is processed."""


class TransformContextError(VaultDocsError):
    """A document was transformed with an incomplete :class:`~vaultdocs.context.TransformContext`."""


class CyclicEmbedError(VaultDocsError):
    """A note embeds itself, directly or through other notes."""

    def __init__(self, chain: list[str]) -> None:
        self.chain = chain
        super().__init__(f"Cyclic embed detected: {' -> '.join(chain)}")


class DiagramRenderError(VaultDocsError):
    """The diagram renderer failed for a code block of *document*."""

    def __init__(self, document: Path | None, reason: str) -> None:
        self.document = document
        where = str(document) if document is not None else "<unknown document>"
        super().__init__(f"Failed to render diagram in {where}: {reason}")
