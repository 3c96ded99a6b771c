"""Vault entries and the vault aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from vaultdocs.config import VaultOptions
from vaultdocs.paths import NOTE_EXTENSION


@dataclass(frozen=True)
class VaultFile:
    """A single note or asset discovered in the vault."""

    fs_path: Path
    #: Vault-rooted, forward-slash path, e.g. ``/folder/note.md``
    path: str
    stem: str
    file_name: str
    slug: str
    #: No other entry shares ``file_name`` (case-insensitive)
    unique_file_name: bool = True

    @property
    def is_note(self) -> bool:
        return self.file_name.lower().endswith(NOTE_EXTENSION)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "stem": self.stem,
            "file_name": self.file_name,
            "slug": self.slug,
            "unique_file_name": self.unique_file_name,
        }


@dataclass(frozen=True)
class Vault:
    """Indexed vault: its root, link options and every entry, ordered by path."""

    path: Path
    options: VaultOptions = field(default_factory=VaultOptions)
    files: tuple[VaultFile, ...] = ()

    @property
    def notes(self) -> list[VaultFile]:
        return [f for f in self.files if f.is_note]

    def relative_dir(self, directory: Path) -> str:
        """Return *directory* as a vault-rooted path (``/`` for the root itself)."""
        relative = Path(directory).resolve().relative_to(self.path.resolve()).as_posix()
        return "/" if relative == "." else f"/{relative}"

    def find_by_path(self, path: str) -> VaultFile | None:
        for vault_file in self.files:
            if vault_file.path == path:
                return vault_file
        return None
