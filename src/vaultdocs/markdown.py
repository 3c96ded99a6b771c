"""Parse markdown into :mod:`vaultdocs.mdast` trees and serialize them back.

Parsing is delegated to ``markdown-it-py`` (CommonMark with raw HTML,
tables and strikethrough) plus the ``mdit_py_plugins`` front-matter and
dollar-math plugins.  The flat token stream is folded into a tree; runs of
text and soft line breaks collapse into a single :class:`~vaultdocs.mdast.Text`.
"""

from __future__ import annotations

import html
import re

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.front_matter import front_matter_plugin

from vaultdocs import mdast

_md = (
    MarkdownIt("commonmark", {"html": True})
    .enable(["table", "strikethrough"])
    .use(front_matter_plugin)
    .use(dollarmath_plugin, allow_space=False, allow_digits=False, double_inline=True)
)

# Backslash before ASCII punctuation, emphasis/code markers, word-boundary
# underscores, and ``<`` that would open an HTML tag
_ESCAPE_RE = re.compile(r"\\(?=[!-/:-@\[-`{-~])|[*`]|(?<!\w)_|_(?!\w)|<(?=[A-Za-z/!?])")
# Line openers that would start a heading, list, quote, fence or setext underline
_BLOCK_START_RE = re.compile(r"^(?:#{1,6}(?=[ \t]|$)|[-+>=~]|\d{1,9}[.)](?=[ \t]|$))", re.MULTILINE)
_UNSAFE_DESTINATION_RE = re.compile(r"[\s<>()]")
_ALIGN_RE = re.compile(r"text-align:\s*(left|right|center)")

# Block tokens that only group rows and have no node of their own
_TRANSPARENT = {"thead_open", "thead_close", "tbody_open", "tbody_close"}


def parse_markdown(text: str) -> mdast.Root:
    """Parse *text* into a :class:`~vaultdocs.mdast.Root`."""
    return _build_tree(_md.parse(text))


# ---------------------------------------------------------------------------
# Tokens -> tree
# ---------------------------------------------------------------------------


def _open_block(token: Token) -> mdast.Node:
    kind = token.type
    if kind == "paragraph_open":
        return mdast.Paragraph()
    if kind == "heading_open":
        return mdast.Heading(depth=int(token.tag[1:]))
    if kind == "blockquote_open":
        return mdast.Blockquote()
    if kind == "bullet_list_open":
        return mdast.List(ordered=False)
    if kind == "ordered_list_open":
        start = token.attrGet("start")
        return mdast.List(ordered=True, start=int(start) if start is not None else 1)
    if kind == "list_item_open":
        return mdast.ListItem()
    if kind == "table_open":
        return mdast.Table()
    if kind == "tr_open":
        return mdast.TableRow()
    if kind in ("th_open", "td_open"):
        return mdast.TableCell()
    raise ValueError(f"Unsupported block token: {kind}")


def _leaf_block(token: Token) -> mdast.Node | None:
    kind = token.type
    if kind == "front_matter":
        return mdast.Yaml(value=token.content.strip("\n"))
    if kind == "fence":
        info = token.info.strip()
        lang, _, meta = info.partition(" ")
        return mdast.Code(value=_strip_final_newline(token.content), lang=lang or None, meta=meta.strip() or None)
    if kind == "code_block":
        return mdast.Code(value=_strip_final_newline(token.content))
    if kind.startswith("math_block"):
        return mdast.Math(value=token.content.strip("\n"))
    if kind == "html_block":
        return mdast.Html(value=token.content.rstrip("\n"))
    if kind == "hr":
        return mdast.ThematicBreak()
    return None


def _build_tree(tokens: list[Token]) -> mdast.Root:
    root = mdast.Root()
    stack: list = [root]
    for token in tokens:
        if token.type in _TRANSPARENT:
            continue
        parent = stack[-1]
        if token.type == "inline":
            _extend_inline(parent.children, _build_inline(token.children or []))
        elif token.nesting == 1:
            node = _open_block(token)
            if token.type == "th_open":
                _record_alignment(stack[-2], token)
            if token.type == "paragraph_open" and not token.hidden and isinstance(parent, mdast.ListItem):
                stack[-2].spread = True
            parent.children.append(node)
            stack.append(node)
        elif token.nesting == -1:
            stack.pop()
        else:
            node = _leaf_block(token)
            if node is not None:
                parent.children.append(node)
    return root


def _record_alignment(table: mdast.Table, token: Token) -> None:
    match = _ALIGN_RE.search(str(token.attrGet("style") or ""))
    table.align.append(match.group(1) if match else None)


def _open_inline(token: Token) -> mdast.Node:
    kind = token.type
    if kind == "em_open":
        return mdast.Emphasis()
    if kind == "strong_open":
        return mdast.Strong()
    if kind == "s_open":
        return mdast.Delete()
    if kind == "link_open":
        title = token.attrGet("title")
        return mdast.Link(url=str(token.attrGet("href") or ""), title=str(title) if title else None)
    raise ValueError(f"Unsupported inline token: {kind}")


def _leaf_inline(token: Token) -> mdast.Node:
    kind = token.type
    if kind == "softbreak":
        return mdast.Text(value="\n")
    if kind == "hardbreak":
        return mdast.Break()
    if kind == "code_inline":
        return mdast.InlineCode(value=token.content)
    if kind == "html_inline":
        return mdast.Html(value=token.content)
    if kind.startswith("math_inline"):
        return mdast.InlineMath(value=token.content)
    if kind == "image":
        title = token.attrGet("title")
        return mdast.Image(url=str(token.attrGet("src") or ""), alt=token.content, title=str(title) if title else None)
    return mdast.Text(value=token.content)


def _build_inline(tokens: list[Token]) -> list[mdast.Node]:
    holder = mdast.Paragraph()
    stack: list = [holder]
    for token in tokens:
        if token.nesting == 1:
            node = _open_inline(token)
            _extend_inline(stack[-1].children, [node])
            stack.append(node)
        elif token.nesting == -1:
            stack.pop()
        elif token.type != "text" or token.content:
            _extend_inline(stack[-1].children, [_leaf_inline(token)])
    return holder.children


def _extend_inline(children: list[mdast.Node], nodes: list[mdast.Node]) -> None:
    for node in nodes:
        if isinstance(node, mdast.Text) and children and isinstance(children[-1], mdast.Text):
            children[-1].value += node.value
        else:
            children.append(node)


def _strip_final_newline(value: str) -> str:
    return value[:-1] if value.endswith("\n") else value


# ---------------------------------------------------------------------------
# Tree -> markdown
# ---------------------------------------------------------------------------


def to_markdown(root: mdast.Root) -> str:
    """Serialize *root* back to markdown text."""
    text = _blocks(root.children)
    return f"{text}\n" if text else ""


def to_html(node: mdast.Code) -> str:
    """Render a code block the way a markdown-to-HTML step would."""
    language = f' class="language-{html.escape(node.lang)}"' if node.lang else ""
    return f"<pre><code{language}>{html.escape(node.value + chr(10), quote=False)}</code></pre>"


def _blocks(nodes: list[mdast.Node], separator: str = "\n\n") -> str:
    return separator.join(_block(node) for node in nodes)


def _block(node: mdast.Node) -> str:
    if isinstance(node, mdast.Yaml):
        return f"---\n{node.value}\n---"
    if isinstance(node, mdast.Paragraph):
        return _inlines(node.children, line_start=True)
    if isinstance(node, mdast.Heading):
        return f"{'#' * node.depth} {_inlines(node.children)}"
    if isinstance(node, mdast.ThematicBreak):
        return "***"
    if isinstance(node, mdast.Code):
        return _code(node)
    if isinstance(node, mdast.Math):
        return f"$$\n{node.value}\n$$"
    if isinstance(node, mdast.Html):
        return node.value
    if isinstance(node, mdast.Blockquote):
        return _prefix_lines(_blocks(node.children), "> ", ">")
    if isinstance(node, mdast.List):
        return _list(node)
    if isinstance(node, mdast.Table):
        return _table(node)
    return _inline(node)


def _code(node: mdast.Code) -> str:
    fence = "```"
    while fence in node.value:
        fence += "`"
    info = node.lang or ""
    if node.meta:
        info = f"{info} {node.meta}"
    body = f"{node.value}\n" if node.value else ""
    return f"{fence}{info}\n{body}{fence}"


def _list(node: mdast.List) -> str:
    separator = "\n\n" if node.spread else "\n"
    start = node.start if node.start is not None else 1
    items = []
    for offset, item in enumerate(node.children):
        marker = f"{start + offset}." if node.ordered else "-"
        content = _blocks(item.children, separator) if isinstance(item, mdast.ListItem) else _block(item)
        first, *rest = content.split("\n")
        padding = " " * (len(marker) + 1)
        lines = [f"{marker} {first}" if first else marker]
        lines.extend(f"{padding}{line}" if line else "" for line in rest)
        items.append("\n".join(lines))
    return separator.join(items)


def _table(node: mdast.Table) -> str:
    rows = [
        [_inlines(cell.children).replace("|", "\\|") for cell in row.children]
        for row in node.children
    ]
    if not rows:
        return ""
    columns = max(len(row) for row in rows)
    align = list(node.align) + [None] * (columns - len(node.align))
    delimiter = [{"left": ":--", "right": "--:", "center": ":-:"}.get(a or "", "---") for a in align]
    lines = [rows[0] + [""] * (columns - len(rows[0])), delimiter]
    lines.extend(row + [""] * (columns - len(row)) for row in rows[1:])
    return "\n".join(f"| {' | '.join(cells)} |" for cells in lines)


def _prefix_lines(text: str, prefix: str, empty: str) -> str:
    return "\n".join(f"{prefix}{line}" if line else empty for line in text.split("\n"))


def _inlines(nodes: list[mdast.Node], line_start: bool = False) -> str:
    """Serialize phrasing *nodes*; *line_start* tells whether the first one opens a line."""
    parts: list[str] = []
    for node in nodes:
        text = _inline(node)
        if isinstance(node, mdast.Text):
            text = _escape_block_starts(text, line_start)
        if text:
            line_start = text.endswith("\n")
        parts.append(text)
    return "".join(parts)


def _inline(node: mdast.Node) -> str:
    if isinstance(node, mdast.Text):
        return _escape(node.value)
    if isinstance(node, mdast.Emphasis):
        return f"*{_inlines(node.children)}*"
    if isinstance(node, mdast.Strong):
        return f"**{_inlines(node.children)}**"
    if isinstance(node, mdast.Delete):
        return f"~~{_inlines(node.children)}~~"
    if isinstance(node, mdast.InlineCode):
        return _inline_code(node.value)
    if isinstance(node, mdast.InlineMath):
        return f"${node.value}$"
    if isinstance(node, mdast.Html):
        return node.value
    if isinstance(node, mdast.Break):
        return "\\\n"
    if isinstance(node, mdast.Link):
        return f"[{_inlines(node.children)}]({_destination(node.url)}{_title(node.title)})"
    if isinstance(node, mdast.Image):
        return f"![{_escape(node.alt)}]({_destination(node.url)}{_title(node.title)})"
    # Block content left inside a phrasing parent
    return _block(node)


def _inline_code(value: str) -> str:
    longest = max((len(run) for run in re.findall(r"`+", value)), default=0)
    ticks = "`" * (longest + 1)
    padding = " " if value.startswith("`") or value.endswith("`") else ""
    return f"{ticks}{padding}{value}{padding}{ticks}"


def _destination(url: str) -> str:
    if not url:
        return "<>"
    if _UNSAFE_DESTINATION_RE.search(url):
        return "<{}>".format(url.replace("<", "\\<").replace(">", "\\>"))
    return url


def _title(title: str | None) -> str:
    if not title:
        return ""
    escaped = title.replace('"', '\\"')
    return f' "{escaped}"'


def _escape(value: str) -> str:
    return _ESCAPE_RE.sub(lambda m: "\\" + m.group(0), value)


def _escape_block_starts(text: str, line_start: bool) -> str:
    def replace(match: "re.Match[str]") -> str:
        marker = match.group(0)
        if match.start() == 0 and not line_start:
            return marker
        if marker[0].isdigit():
            return f"{marker[:-1]}\\{marker[-1]}"
        return f"\\{marker}"

    return _BLOCK_START_RE.sub(replace, text)
