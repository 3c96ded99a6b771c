"""Shared vault fixtures for vaultdocs tests."""

from __future__ import annotations

import asyncio
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from vaultdocs.config import VaultOptions
from vaultdocs.context import Renderer
from vaultdocs.files import Vault
from vaultdocs.index import index_vault
from vaultdocs.transform import transform_file


@pytest.fixture()
def write_vault(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Factory writing ``{relative_path: content}`` into a fresh vault directory."""
    vault_dir = tmp_path / "vault"
    vault_dir.mkdir()

    def _write(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            path = vault_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content), encoding="utf-8")
        return vault_dir

    return _write


@pytest.fixture()
def build_vault(write_vault) -> Callable[..., Vault]:
    """Factory writing files and returning the indexed :class:`Vault`."""

    def _build(files: dict[str, str], **options: str) -> Vault:
        vault_dir = write_vault(files)
        return index_vault(vault_dir, VaultOptions(**options))

    return _build


@pytest.fixture()
def run_transform() -> Callable[..., str]:
    """Transform one note of a vault and return the resulting markdown."""

    def _run(vault: Vault, vault_path: str, output: str = "notes", renderer: Renderer | None = None) -> str:
        vault_file = vault.find_by_path(vault_path)
        assert vault_file is not None, f"{vault_path} is not in the vault"
        return asyncio.run(transform_file(vault, vault_file, output, renderer))

    return _run


# ---------------------------------------------------------------------------
# Example vault: unique names, nested folders and a name shared by three notes
# ---------------------------------------------------------------------------

EXAMPLE_NOTES = {
    "root 2.md": "Second root note.\n",
    "folder/file-in-folder-1.md": "A note in a folder.\n",
    "folder/nested-folder/file-in-nested-folder-1.md": "A note in a nested folder.\n",
    "duplicate-file-name.md": "Root duplicate.\n",
    "folder/duplicate-file-name.md": "Folder duplicate.\n",
    "folder/nested-folder/duplicate-file-name.md": "Nested duplicate.\n",
}


@pytest.fixture()
def example_files() -> dict[str, str]:
    return dict(EXAMPLE_NOTES)
