"""Per-document transform context."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Awaitable, Callable

from vaultdocs.errors import TransformContextError
from vaultdocs.files import Vault, VaultFile

#: Turns the HTML of a diagram code block into inline markup (e.g. an SVG)
Renderer = Callable[[str], Awaitable[str]]


@dataclass(frozen=True)
class TransformContext:
    """Everything a document transform needs besides the tree itself.

    ``path`` is the source file of the document; without it the document
    has no directory context and relative links are left untouched.
    ``embed_chain`` lists the vault paths of the notes currently being
    embedded, outermost first.
    """

    files: tuple[VaultFile, ...] | None
    vault: Vault | None
    output: str | None
    path: Path | None = None
    renderer: Renderer | None = None
    embed_chain: tuple[str, ...] = ()

    @classmethod
    def for_file(
        cls,
        vault: Vault,
        vault_file: VaultFile,
        output: str,
        renderer: Renderer | None = None,
    ) -> "TransformContext":
        return cls(
            files=vault.files,
            vault=vault,
            output=output,
            path=vault_file.fs_path,
            renderer=renderer,
            embed_chain=(vault_file.path,),
        )

    def ensure(self) -> None:
        """Raise :class:`TransformContextError` unless files, vault and output are all set."""
        missing = [
            name
            for name, value in (("files", self.files), ("vault", self.vault), ("output", self.output))
            if value is None
        ]
        if missing:
            where = self.path or "<unnamed document>"
            raise TransformContextError(f"Invalid transform context for {where}: missing {', '.join(missing)}.")

    @property
    def dirname(self) -> Path | None:
        return self.path.parent if self.path is not None else None

    @property
    def stem(self) -> str | None:
        return self.path.stem if self.path is not None else None

    def relative_dir(self) -> str:
        """Vault-rooted directory of the current document."""
        if self.vault is None or self.dirname is None:
            raise TransformContextError("The document has no directory context.")
        try:
            return self.vault.relative_dir(self.dirname)
        except ValueError:
            raise TransformContextError(f"The document {self.path} is outside the vault {self.vault.path}.") from None

    def for_embed(self, vault_file: VaultFile) -> "TransformContext":
        """Context for transforming *vault_file* embedded into the current document."""
        return replace(self, path=vault_file.fs_path, embed_chain=self.embed_chain + (vault_file.path,))
