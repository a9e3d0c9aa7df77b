"""
Markdown Converter — Markdown text to hierarchical tree index

Entry points of the indexing pipeline:
    Markdown → headings → flat sections → (thinning) → tree → (summaries)

    md_to_tree       convert Markdown text already in memory
    md_file_to_tree  read a .md file, name the document after its stem
    pages_to_tree    convert a DocumentInput of page texts

Design decisions:
    - Options are validated before any parsing, so a missing LLM fails fast
    - The LLM is an injected async function; no retries or timeouts here
    - LLM failures are logged and re-raised; no partial result is returned
    - File reading runs in a thread to keep the event loop free
"""

from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import Any, Optional, Union

from .models import DocumentInput, DocumentResult
from .parser import extract_node_text_content, extract_nodes_from_markdown
from .summarizer import generate_doc_description, generate_summaries_for_structure
from .thinning import tree_thinning_for_index, update_node_list_with_text_token_count
from .tree_builder import build_tree_from_nodes
from .tree_utils import remove_structure_text, structure_to_list, write_node_id
from ..core.config import MarkdownOptions, load_markdown_config
from ..observability.logging import get_logger

logger = get_logger(__name__)


async def md_to_tree(
    content: str,
    doc_name: str,
    options: Optional[MarkdownOptions] = None,
    **overrides: Any,
) -> DocumentResult:
    """
    Convert Markdown content into a tree index.

    Args:
        content: Markdown text.
        doc_name: Name recorded on the result.
        options: Conversion options (defaults when omitted).
        **overrides: Individual MarkdownOptions fields, e.g. ``if_thinning=True``.

    Returns:
        DocumentResult with the nested structure.

    Raises:
        ConfigurationError: If summaries are requested without an llm.
        Exception: Whatever the llm raises, unchanged.
    """
    config = load_markdown_config(options, **overrides)
    start_time = time.time()

    logger.info(
        "md_converter.start",
        doc_name=doc_name,
        chars=len(content),
        if_thinning=config.if_thinning,
        if_add_node_summary=config.if_add_node_summary,
    )

    node_list, lines = extract_nodes_from_markdown(content)
    sections = extract_node_text_content(node_list, lines)

    if config.if_thinning:
        before = len(sections)
        sections = update_node_list_with_text_token_count(sections)
        sections = tree_thinning_for_index(sections, config.thinning_threshold)
        logger.info(
            "md_converter.thinning.complete",
            doc_name=doc_name,
            sections_before=before,
            sections_after=len(sections),
            threshold=config.thinning_threshold,
        )

    structure = build_tree_from_nodes(sections)

    if config.if_add_node_id:
        write_node_id(structure)

    result = DocumentResult(doc_name=doc_name, structure=structure)

    try:
        if config.if_add_node_summary:
            await generate_summaries_for_structure(
                structure,
                config.summary_token_threshold,
                config.llm,
            )
            if config.if_add_doc_description:
                result.doc_description = await generate_doc_description(
                    structure, config.llm
                )
    except Exception as exc:
        logger.error(
            "md_converter.summaries.failed",
            doc_name=doc_name,
            error=str(exc),
            elapsed_ms=round((time.time() - start_time) * 1000, 1),
        )
        raise

    if not config.if_add_node_text:
        remove_structure_text(structure)

    logger.info(
        "md_converter.complete",
        doc_name=doc_name,
        sections=len(sections),
        root_nodes=len(structure),
        node_count=len(structure_to_list(structure)),
        elapsed_ms=round((time.time() - start_time) * 1000, 1),
    )
    return result


async def md_file_to_tree(
    md_path: Union[str, Path],
    options: Optional[MarkdownOptions] = None,
    **overrides: Any,
) -> DocumentResult:
    """
    Read a Markdown file and convert it into a tree index.

    The document name is the file name without its extension.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(md_path)
    if not path.is_file():
        raise FileNotFoundError(f"Markdown file not found: {path}")

    content = await asyncio.to_thread(path.read_text, encoding="utf-8")
    return await md_to_tree(content, path.stem, options, **overrides)


async def pages_to_tree(
    document: DocumentInput,
    options: Optional[MarkdownOptions] = None,
    **overrides: Any,
) -> DocumentResult:
    """Convert a document given as page texts, joined one newline apart."""
    return await md_to_tree(document.content, document.name, options, **overrides)
