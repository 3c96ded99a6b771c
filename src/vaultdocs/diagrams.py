"""Render diagram code blocks to inline markup.

All diagram blocks of a document are collected first, rendered
concurrently, and only replaced once every render has finished.
"""

from __future__ import annotations

import asyncio
import html
import logging
import re
import tempfile
from pathlib import Path

from vaultdocs import mdast
from vaultdocs.context import Renderer, TransformContext
from vaultdocs.errors import DiagramRenderError
from vaultdocs.markdown import to_html

logger = logging.getLogger(__name__)

DIAGRAM_LANGUAGES = frozenset({"mermaid"})

_CODE_RE = re.compile(r"<code[^>]*>(?P<source>.*?)</code>", re.DOTALL)


def collect_diagrams(tree: mdast.Parent) -> list[tuple[mdast.Code, mdast.Parent, int]]:
    """Return ``(node, parent, index)`` for every diagram code block in *tree*."""
    found: list[tuple[mdast.Code, mdast.Parent, int]] = []
    for index, child in enumerate(tree.children):
        if isinstance(child, mdast.Code):
            if child.lang in DIAGRAM_LANGUAGES:
                found.append((child, tree, index))
        elif mdast.is_parent(child):
            found.extend(collect_diagrams(child))
    return found


async def inline_diagrams(tree: mdast.Root, context: TransformContext) -> int:
    """Replace every diagram block of *tree* with its rendered markup; return how many."""
    diagrams = collect_diagrams(tree)
    if not diagrams:
        return 0

    renderer: Renderer = context.renderer or MermaidCliRenderer()

    async def render(node: mdast.Code) -> str:
        try:
            return await renderer(to_html(node))
        except Exception as exc:
            raise DiagramRenderError(context.path, str(exc) or type(exc).__name__) from exc

    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(render(node)) for node, _, _ in diagrams]
    except ExceptionGroup as errors:
        # The other renders were cancelled
        raise errors.exceptions[0]

    for (_, parent, index), task in zip(diagrams, tasks):
        parent.children[index] = mdast.Html(value=task.result())

    logger.debug("Rendered %d diagram(s) in %s", len(diagrams), context.path)
    return len(diagrams)


# ---------------------------------------------------------------------------
# Default renderer
# ---------------------------------------------------------------------------


def extract_diagram_source(markup: str) -> str:
    """Return the diagram source from ``<pre><code ...>source</code></pre>``."""
    match = _CODE_RE.search(markup)
    return html.unescape(match.group("source") if match else markup)


class MermaidCliRenderer:
    """Render mermaid diagrams to inline SVG with the mermaid CLI (``mmdc``)."""

    def __init__(self, executable: str = "mmdc", extra_args: tuple[str, ...] = ()) -> None:
        self.executable = executable
        self.extra_args = extra_args

    async def __call__(self, markup: str) -> str:
        source = extract_diagram_source(markup)
        with tempfile.TemporaryDirectory(prefix="vaultdocs-") as tmp:
            input_path = Path(tmp) / "diagram.mmd"
            output_path = Path(tmp) / "diagram.svg"
            input_path.write_text(source, encoding="utf-8")

            process = await asyncio.create_subprocess_exec(
                self.executable,
                "-i",
                str(input_path),
                "-o",
                str(output_path),
                *self.extra_args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await process.communicate()
            if process.returncode != 0:
                details = stderr.decode("utf-8", errors="replace").strip()
                raise RuntimeError(f"{self.executable} exited with status {process.returncode}: {details}")

            svg = output_path.read_text(encoding="utf-8")

        # Blank lines would end the surrounding HTML block
        lines = [line for line in svg.splitlines() if line.strip()]
        return '<div class="vaultdocs-diagram">' + "\n".join(lines) + "</div>"
