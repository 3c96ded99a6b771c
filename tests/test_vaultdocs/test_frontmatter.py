"""Unit tests for vaultdocs.frontmatter and front-matter parsing."""

import logging
import textwrap

import yaml

from vaultdocs.context import TransformContext
from vaultdocs.frontmatter import (
    KATEX_STYLESHEET,
    build_frontmatter,
    dump_frontmatter,
    katex_head_entry,
    synthesize_frontmatter,
)
from vaultdocs.markdown import parse_markdown, to_markdown
from vaultdocs.parser import parse_frontmatter, parse_tags


class TestParseFrontmatter:
    def test_mapping(self):
        assert parse_frontmatter("title: Hello\ndraft: true") == {"title": "Hello", "draft": True}

    def test_empty(self):
        assert parse_frontmatter("") == {}

    def test_malformed(self, caplog):
        with caplog.at_level(logging.WARNING, logger="vaultdocs.parser"):
            assert parse_frontmatter("title: [unclosed") == {}
        assert "malformed front-matter" in caplog.text

    def test_not_a_mapping(self):
        assert parse_frontmatter("- a\n- b") == {}


class TestParseTags:
    def test_list(self):
        assert parse_tags(["a", "#b", "a"]) == ["a", "b"]

    def test_string(self):
        assert parse_tags("one, #two three") == ["one", "two", "three"]

    def test_none(self):
        assert parse_tags(None) == []

    def test_scalar(self):
        assert parse_tags(2024) == ["2024"]


class TestBuildFrontmatter:
    def test_title_only(self):
        assert build_frontmatter("note") == {"title": "note"}

    def test_title_overrides_author(self):
        author = {"title": "Old", "draft": True, "tags": "a, #b a"}
        assert build_frontmatter("note", author=author) == {"title": "note", "draft": True, "tags": ["a", "b"]}

    def test_author_title_kept_without_computed(self):
        assert build_frontmatter(None, author={"title": "Old"}) == {"title": "Old"}

    def test_empty_tags_dropped(self):
        assert build_frontmatter("note", author={"tags": []}) == {"title": "note"}

    def test_katex_head(self):
        assert build_frontmatter("note", include_katex_styles=True) == {
            "title": "note",
            "head": [{"tag": "link", "attrs": {"rel": "stylesheet", "href": KATEX_STYLESHEET}}],
        }

    def test_katex_appended_to_author_head(self):
        script = {"tag": "script", "attrs": {"src": "/x.js"}}
        frontmatter = build_frontmatter("note", True, {"head": [script]})
        assert frontmatter["head"] == [script, katex_head_entry()]

    def test_katex_not_duplicated(self):
        frontmatter = build_frontmatter("note", True, {"head": [katex_head_entry()]})
        assert frontmatter["head"] == [katex_head_entry()]

    def test_author_unchanged(self):
        author = {"title": "Old", "head": []}
        build_frontmatter("note", True, author)
        assert author == {"title": "Old", "head": []}


class TestSynthesizeFrontmatter:
    def _context(self, build_vault, name="my note.md"):
        vault = build_vault({name: ""})
        return TransformContext.for_file(vault, vault.find_by_path(f"/{name}"), "notes")

    def test_inserted_when_absent(self, build_vault):
        tree = parse_markdown("Body\n")
        synthesize_frontmatter(tree, self._context(build_vault))
        assert to_markdown(tree) == "---\ntitle: my note\n---\n\nBody\n"

    def test_merged_into_existing(self, build_vault):
        tree = parse_markdown(
            textwrap.dedent(
                """\
                ---
                title: Ignored
                tags: [guide, '#howto']
                order: 3
                ---
                Body
                """
            )
        )
        synthesize_frontmatter(tree, self._context(build_vault))
        assert len(tree.children) == 2
        assert yaml.safe_load(tree.children[0].value) == {
            "title": "my note",
            "order": 3,
            "tags": ["guide", "howto"],
        }

    def test_katex(self, build_vault):
        tree = parse_markdown("$x$\n")
        synthesize_frontmatter(tree, self._context(build_vault), include_katex_styles=True)
        meta = yaml.safe_load(tree.children[0].value)
        assert meta["head"][0]["attrs"]["href"] == KATEX_STYLESHEET

    def test_malformed_header_replaced(self, build_vault):
        tree = parse_markdown("---\ntitle: [unclosed\n---\nBody\n")
        synthesize_frontmatter(tree, self._context(build_vault))
        assert tree.children[0].value == "title: my note"

    def test_dump_keeps_order_and_unicode(self):
        assert dump_frontmatter({"title": "Café", "author": "Zoë"}) == "title: Café\nauthor: Zoë"
