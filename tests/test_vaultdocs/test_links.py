"""Unit tests for vaultdocs.links."""

import pytest

from vaultdocs.context import TransformContext
from vaultdocs.links import (
    find_by_file_name,
    find_by_name,
    relative_file_path,
    resolve_image_url,
    resolve_link_url,
    resolve_wikilink,
    vault_file_path,
)


def _context(vault, document: str) -> TransformContext:
    return TransformContext.for_file(vault, vault.find_by_path(document), "notes")


class TestLookups:
    @pytest.fixture()
    def vault(self, build_vault, example_files):
        return build_vault(example_files)

    def test_find_by_name_matches_stem_or_file_name(self, vault):
        assert find_by_name(vault.files, "root 2").path == "/root 2.md"
        assert find_by_name(vault.files, "root 2.md").path == "/root 2.md"
        assert find_by_name(vault.files, "unknown") is None

    def test_find_by_name_returns_first_by_path(self, vault):
        assert find_by_name(vault.files, "duplicate-file-name").path == "/duplicate-file-name.md"

    def test_find_by_file_name_needs_extension(self, vault):
        assert find_by_file_name(vault.files, "root 2") is None
        assert find_by_file_name(vault.files, "root 2.md").path == "/root 2.md"

    def test_vault_file_path(self, vault):
        unique = vault.find_by_path("/folder/file-in-folder-1.md")
        shared = vault.find_by_path("/folder/duplicate-file-name.md")
        assert vault_file_path(unique, "file-in-folder-1") == "folder/file-in-folder-1"
        assert vault_file_path(shared, "folder/duplicate-file-name") == "folder/duplicate-file-name"

    def test_relative_file_path(self, vault):
        context = _context(vault, "/folder/nested-folder/file-in-nested-folder-1.md")
        assert relative_file_path(context, "../../root 2") == "/root 2"
        assert relative_file_path(context, "./duplicate-file-name") == "/folder/nested-folder/duplicate-file-name"

    def test_relative_file_path_without_document(self, vault):
        context = TransformContext(files=vault.files, vault=vault, output="notes")
        assert relative_file_path(context, "folder/file-in-folder-1") == "/folder/file-in-folder-1"


class TestResolveWikilink:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("root 2", "/notes/root-2"),
            ("file-in-folder-1", "/notes/folder/file-in-folder-1"),
            ("file-in-nested-folder-1", "/notes/folder/nested-folder/file-in-nested-folder-1"),
            ("duplicate-file-name", "/notes/duplicate-file-name"),
            ("folder/duplicate-file-name", "/notes/folder/duplicate-file-name"),
            ("folder/nested-folder/duplicate-file-name", "/notes/folder/nested-folder/duplicate-file-name"),
            ("Not Yet Written", "/notes/not-yet-written"),
        ],
    )
    def test_shortest(self, build_vault, example_files, url, expected):
        vault = build_vault(example_files)
        assert resolve_wikilink(_context(vault, "/root 2.md"), url, None) == expected

    def test_shortest_anchor(self, build_vault, example_files):
        vault = build_vault(example_files)
        assert resolve_wikilink(_context(vault, "/root 2.md"), "root 2", "#A Heading") == "/notes/root-2#a-heading"

    def test_relative(self, build_vault, example_files):
        vault = build_vault(example_files, link_format="relative")
        context = _context(vault, "/folder/file-in-folder-1.md")
        assert resolve_wikilink(context, "../root 2", None) == "/notes/root-2"
        assert resolve_wikilink(context, "nested-folder/duplicate-file-name", None) == (
            "/notes/folder/nested-folder/duplicate-file-name"
        )

    def test_absolute(self, build_vault, example_files):
        vault = build_vault(example_files, link_format="absolute")
        context = _context(vault, "/folder/file-in-folder-1.md")
        assert resolve_wikilink(context, "folder/nested-folder/file-in-nested-folder-1", "#^block") == (
            "/notes/folder/nested-folder/file-in-nested-folder-1#block"
        )

    def test_output_prefix(self, build_vault, example_files):
        vault = build_vault(example_files)
        context = TransformContext.for_file(vault, vault.find_by_path("/root 2.md"), "docs/vault")
        assert resolve_wikilink(context, "root 2", None) == "/docs/vault/root-2"


class TestResolveMarkdownUrls:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("root%202.md", "/notes/root-2"),
            ("file-in-folder-1.md", "/notes/folder/file-in-folder-1"),
            ("file-in-nested-folder-1.md", "/notes/folder/nested-folder/file-in-nested-folder-1"),
            ("duplicate-file-name.md", "/notes/duplicate-file-name"),
            ("folder/duplicate-file-name.md", "/notes/folder/duplicate-file-name"),
            ("folder/nested-folder/duplicate-file-name.md", "/notes/folder/nested-folder/duplicate-file-name"),
        ],
    )
    def test_shortest(self, build_vault, example_files, url, expected):
        vault = build_vault(example_files, link_syntax="markdown")
        assert resolve_link_url(_context(vault, "/root 2.md"), url) == expected

    def test_unknown_link(self, build_vault, example_files):
        vault = build_vault(example_files, link_syntax="markdown")
        assert resolve_link_url(_context(vault, "/root 2.md"), "nope.md") is None

    def test_image_shortest_unknown_unchanged(self, build_vault):
        vault = build_vault({"note.md": "", "img/a b.png": ""}, link_syntax="markdown")
        context = _context(vault, "/note.md")
        assert resolve_image_url(context, "a%20b.png") == "/notes/img/a-b.png"
        assert resolve_image_url(context, "c.png") == "c.png"

    def test_image_relative(self, build_vault):
        vault = build_vault({"sub/note.md": "", "img/a.png": ""}, link_format="relative", link_syntax="markdown")
        assert resolve_image_url(_context(vault, "/sub/note.md"), "../img/a.png") == "/notes/img/a.png"


class TestUniqueNames:
    FILES = {
        "alpha.md": "",
        "folder/beta.md": "",
        "folder/nested/Gamma Note.md": "",
    }

    @pytest.mark.parametrize("vault_path", ["/alpha.md", "/folder/beta.md", "/folder/nested/Gamma Note.md"])
    def test_shortest_matches_absolute(self, build_vault, vault_path):
        shortest = build_vault(self.FILES)
        target = shortest.find_by_path(vault_path)
        shortest_url = resolve_wikilink(_context(shortest, "/alpha.md"), target.stem, None)

        absolute = build_vault(self.FILES, link_format="absolute")
        absolute_url = resolve_wikilink(_context(absolute, "/alpha.md"), vault_path[1:-3], None)

        assert shortest_url == absolute_url == f"/notes/{target.slug}"
