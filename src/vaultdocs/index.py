"""Vault indexing: discover notes and assets and assign their slugs."""

from __future__ import annotations

import logging
import os
from collections import Counter
from pathlib import Path

from vaultdocs.config import DEFAULT_CONFIG_FOLDER, VaultOptions
from vaultdocs.errors import ConfigurationError
from vaultdocs.files import Vault, VaultFile
from vaultdocs.paths import NOTE_EXTENSION, get_extension, is_asset, slugify_path

logger = logging.getLogger(__name__)


def index_vault(
    vault_dir: Path,
    options: VaultOptions | None = None,
    config_folder: str = DEFAULT_CONFIG_FOLDER,
) -> Vault:
    """Scan *vault_dir* and return the read-only :class:`Vault` index.

    When *options* is omitted the link options are read from the vault's
    ``app.json``.  Raises :class:`ConfigurationError` if the vault root is
    missing or unreadable.
    """
    vault_dir = Path(vault_dir).expanduser()
    if not vault_dir.is_dir():
        raise ConfigurationError(f"The vault path {vault_dir} is not a directory.")
    if not os.access(vault_dir, os.R_OK | os.X_OK):
        raise ConfigurationError(f"The vault path {vault_dir} is not readable.")

    if options is None:
        options = VaultOptions.from_app_config(vault_dir, config_folder)

    files = build_vault_files(vault_dir, scan_vault_paths(vault_dir, config_folder))
    logger.info("Indexed %d files in vault %s", len(files), vault_dir)
    return Vault(path=vault_dir.resolve(), options=options, files=tuple(files))


def scan_vault_paths(vault_dir: Path, config_folder: str = DEFAULT_CONFIG_FOLDER) -> list[Path]:
    """Return every note and asset below *vault_dir*, skipping the config folder."""
    result: list[Path] = []
    for path in sorted(Path(vault_dir).glob("**/*")):
        if not path.is_file():
            continue
        relative = path.relative_to(vault_dir)
        if relative.parts[0] == config_folder:
            continue
        if get_extension(path.name) == NOTE_EXTENSION or is_asset(path.name):
            result.append(path)
    return result


def build_vault_files(vault_dir: Path, paths: list[Path]) -> list[VaultFile]:
    """Build :class:`VaultFile` entries, flagging file names shared across folders."""
    vault_dir = Path(vault_dir)
    name_counts = Counter(path.name.lower() for path in paths)

    files: list[VaultFile] = []
    for path in paths:
        vault_path = "/" + path.relative_to(vault_dir).as_posix()
        files.append(
            VaultFile(
                fs_path=path.resolve(),
                path=vault_path,
                stem=path.stem,
                file_name=path.name,
                slug=slugify_path(vault_path),
                unique_file_name=name_counts[path.name.lower()] == 1,
            )
        )
    files.sort(key=lambda f: f.path)
    return files
