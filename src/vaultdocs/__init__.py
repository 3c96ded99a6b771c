"""Convert a personal-knowledge-base vault into documentation-site markdown."""

from vaultdocs.config import Config, LinkFormat, LinkSyntax, VaultOptions, load_config
from vaultdocs.context import TransformContext
from vaultdocs.errors import (
    ConfigurationError,
    CyclicEmbedError,
    DiagramRenderError,
    TransformContextError,
    VaultDocsError,
)
from vaultdocs.files import Vault, VaultFile
from vaultdocs.index import index_vault
from vaultdocs.markdown import parse_markdown, to_markdown
from vaultdocs.transform import transform, transform_file, transform_markdown, transform_vault

__all__ = [
    "Config",
    "ConfigurationError",
    "CyclicEmbedError",
    "DiagramRenderError",
    "LinkFormat",
    "LinkSyntax",
    "TransformContext",
    "TransformContextError",
    "Vault",
    "VaultDocsError",
    "VaultFile",
    "VaultOptions",
    "index_vault",
    "load_config",
    "parse_markdown",
    "to_markdown",
    "transform",
    "transform_file",
    "transform_markdown",
    "transform_vault",
]
