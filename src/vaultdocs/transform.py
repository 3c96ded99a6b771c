"""Document pipeline: inline rewrites, structural pass, diagrams, front-matter."""

from __future__ import annotations

import asyncio
import logging

from vaultdocs import mdast
from vaultdocs.context import Renderer, TransformContext
from vaultdocs.diagrams import inline_diagrams
from vaultdocs.files import Vault, VaultFile
from vaultdocs.frontmatter import synthesize_frontmatter
from vaultdocs.inline import rewrite_inline
from vaultdocs.markdown import parse_markdown, to_markdown
from vaultdocs.visitor import visit_tree

logger = logging.getLogger(__name__)


async def transform(tree: mdast.Root, context: TransformContext) -> mdast.Root:
    """Transform *tree* in place and return it.

    The passes run strictly in order; only diagram rendering is concurrent.
    """
    context.ensure()
    rewrite_inline(tree, context)
    result = visit_tree(tree, context)
    await inline_diagrams(tree, context)
    synthesize_frontmatter(tree, context, include_katex_styles=result.include_katex_styles)
    return tree


async def transform_markdown(content: str, context: TransformContext) -> str:
    """Parse, transform and serialize a markdown document."""
    return to_markdown(await transform(parse_markdown(content), context))


async def transform_file(
    vault: Vault,
    vault_file: VaultFile,
    output: str,
    renderer: Renderer | None = None,
) -> str:
    context = TransformContext.for_file(vault, vault_file, output, renderer)
    content = vault_file.fs_path.read_text(encoding="utf-8")
    return await transform_markdown(content, context)


async def transform_vault(vault: Vault, output: str, renderer: Renderer | None = None) -> dict[str, str]:
    """Transform every note of *vault* concurrently; keys are vault paths."""
    notes = vault.notes
    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(transform_file(vault, note, output, renderer)) for note in notes]
    except ExceptionGroup as errors:
        raise errors.exceptions[0]
    logger.info("Transformed %d notes from %s", len(notes), vault.path)
    return {note.path: task.result() for note, task in zip(notes, tasks)}
