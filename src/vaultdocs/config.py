"""Vault link options and the project configuration file.

A configuration file is plain TOML::

    [vaultdocs]
    vault         = "~/Documents/My Vault"
    output        = "notes"           # URL prefix of generated pages
    config_folder = ".obsidian"       # skipped while indexing
    link_format   = "shortest"        # optional, read from app.json otherwise
    link_syntax   = "wikilink"        # optional, read from app.json otherwise
"""

from __future__ import annotations

import json
import logging
import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from vaultdocs.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "notes"
DEFAULT_CONFIG_FOLDER = ".obsidian"


class LinkFormat(str, Enum):
    """How the author writes link targets."""

    RELATIVE = "relative"
    ABSOLUTE = "absolute"
    SHORTEST = "shortest"


class LinkSyntax(str, Enum):
    WIKILINK = "wikilink"
    MARKDOWN = "markdown"


def _coerce(enum: type[Enum], value: Any, option: str) -> Any:
    try:
        return enum(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum)
        raise ConfigurationError(f"Invalid value {value!r} for option '{option}' (expected one of: {allowed}).") from None


# ---------------------------------------------------------------------------
# Link options
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VaultOptions:
    link_format: LinkFormat = LinkFormat.SHORTEST
    link_syntax: LinkSyntax = LinkSyntax.WIKILINK

    def __post_init__(self) -> None:
        object.__setattr__(self, "link_format", _coerce(LinkFormat, self.link_format, "link_format"))
        object.__setattr__(self, "link_syntax", _coerce(LinkSyntax, self.link_syntax, "link_syntax"))

    @classmethod
    def from_app_config(cls, vault_dir: Path, config_folder: str = DEFAULT_CONFIG_FOLDER) -> "VaultOptions":
        """Read the link options the vault's editor writes to ``app.json``.

        A missing file yields the defaults; an unreadable one is logged and
        also yields the defaults.
        """
        app_config = Path(vault_dir) / config_folder / "app.json"
        if not app_config.exists():
            return cls()
        try:
            data = json.loads(app_config.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable %s: %s", app_config, exc)
            return cls()
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a JSON object", app_config)
            return cls()
        return cls(
            link_format=data.get("newLinkFormat") or LinkFormat.SHORTEST,
            link_syntax=LinkSyntax.MARKDOWN if data.get("useMarkdownLinks") is True else LinkSyntax.WIKILINK,
        )


# ---------------------------------------------------------------------------
# Project configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Config:
    vault: Path
    output: str = DEFAULT_OUTPUT
    config_folder: str = DEFAULT_CONFIG_FOLDER
    options: VaultOptions | None = None  # None: read from the vault's app.json

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        section = data.get("vaultdocs", data)
        if not isinstance(section, dict):
            raise ConfigurationError("The [vaultdocs] configuration must be a table.")
        if not section.get("vault"):
            raise ConfigurationError("Missing required option 'vault'.")

        output = section.get("output", DEFAULT_OUTPUT)
        if not isinstance(output, str):
            raise ConfigurationError(f"Invalid value {output!r} for option 'output' (expected a string).")

        config_folder = section.get("config_folder", DEFAULT_CONFIG_FOLDER)
        if not isinstance(config_folder, str) or not config_folder.startswith("."):
            raise ConfigurationError(
                f"Invalid value {config_folder!r} for option 'config_folder' (must start with '.')."
            )

        options = None
        if "link_format" in section or "link_syntax" in section:
            options = VaultOptions(
                link_format=section.get("link_format", LinkFormat.SHORTEST),
                link_syntax=section.get("link_syntax", LinkSyntax.WIKILINK),
            )

        return cls(
            vault=Path(section["vault"]).expanduser(),
            output=output,
            config_folder=config_folder,
            options=options,
        )


def load_config(path: Path) -> Config:
    """Load a :class:`Config` from a TOML file; relative vault paths resolve against the file."""
    path = Path(path)
    try:
        with open(path, "rb") as fh:
            data = tomllib.load(fh)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read configuration file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Malformed configuration file {path}: {exc}") from exc

    config = Config.from_dict(data)
    if not config.vault.is_absolute():
        config = Config(
            vault=path.parent / config.vault,
            output=config.output,
            config_folder=config.config_folder,
            options=config.options,
        )
    return config
