"""Unit tests for vaultdocs.config."""

import textwrap
from pathlib import Path

import pytest

from vaultdocs.config import Config, LinkFormat, LinkSyntax, VaultOptions, load_config
from vaultdocs.errors import ConfigurationError


class TestVaultOptions:
    def test_defaults(self):
        options = VaultOptions()
        assert options.link_format is LinkFormat.SHORTEST
        assert options.link_syntax is LinkSyntax.WIKILINK

    def test_strings_coerced(self):
        options = VaultOptions(link_format="absolute", link_syntax="markdown")
        assert options.link_format is LinkFormat.ABSOLUTE
        assert options.link_syntax is LinkSyntax.MARKDOWN

    def test_invalid_value(self):
        with pytest.raises(ConfigurationError, match="link_syntax"):
            VaultOptions(link_syntax="html")

    def test_frozen(self):
        options = VaultOptions()
        with pytest.raises(AttributeError):
            options.link_format = LinkFormat.RELATIVE


class TestConfigFromDict:
    def test_table(self):
        config = Config.from_dict({"vaultdocs": {"vault": "/tmp/vault", "output": "docs"}})
        assert config.vault == Path("/tmp/vault")
        assert config.output == "docs"
        assert config.config_folder == ".obsidian"
        assert config.options is None

    def test_flat_dict(self):
        config = Config.from_dict({"vault": "/tmp/vault"})
        assert config.output == "notes"

    def test_link_options(self):
        config = Config.from_dict({"vault": "/tmp/vault", "link_format": "relative"})
        assert config.options == VaultOptions(link_format=LinkFormat.RELATIVE)

    def test_missing_vault(self):
        with pytest.raises(ConfigurationError, match="vault"):
            Config.from_dict({"output": "notes"})

    def test_config_folder_must_be_hidden(self):
        with pytest.raises(ConfigurationError, match="config_folder"):
            Config.from_dict({"vault": "/tmp/vault", "config_folder": "obsidian"})

    def test_output_must_be_string(self):
        with pytest.raises(ConfigurationError, match="output"):
            Config.from_dict({"vault": "/tmp/vault", "output": 3})


class TestLoadConfig:
    def test_relative_vault_resolved_against_file(self, tmp_path: Path):
        path = tmp_path / "vaultdocs.toml"
        path.write_text(
            textwrap.dedent("""\
                [vaultdocs]
                vault       = "my vault"
                output      = "kb"
                link_syntax = "markdown"
            """),
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.vault == tmp_path / "my vault"
        assert config.output == "kb"
        assert config.options.link_syntax is LinkSyntax.MARKDOWN

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_config(tmp_path / "missing.toml")

    def test_malformed_file(self, tmp_path: Path):
        path = tmp_path / "broken.toml"
        path.write_text("[vaultdocs\nvault = ", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Malformed"):
            load_config(path)
