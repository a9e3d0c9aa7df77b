"""
Node Summarizer — LLM summaries over an assembled tree

Every node gets a summary of its own text (the text under its heading,
excluding sub-sections). Short texts are used verbatim; longer ones are
sent to the injected LLM function. All requests for one tree run
concurrently and are written back only after every one has returned:
    leaf node      → summary
    internal node  → prefix_summary

Failures are not caught here. If any request raises, the exception
propagates and no summaries are written for that tree.
"""

from __future__ import annotations

import asyncio
import json
import time

from .models import TreeNode
from .parser import estimate_tokens
from .tree_utils import structure_to_list
from ..core.config import LLMFunction
from ..observability.logging import get_logger

logger = get_logger(__name__)


# ──────────────────────────────────────────────────────────────
# Prompts
# ──────────────────────────────────────────────────────────────

_NODE_SUMMARY_PROMPT = """You are given one part of a larger document.
Write a single descriptive paragraph covering the main points of this part.

Partial Document Text:
{text}

Return only the paragraph, with no preamble or extra commentary."""

_DOC_DESCRIPTION_PROMPT = """You are an expert at describing documents.
Below is the section structure of a document as a JSON array. Write a
one-sentence description of the document that distinguishes it from
other documents.

Document Structure: {structure}

Return only the sentence, with no preamble or extra commentary."""


async def get_node_summary(
    node: TreeNode,
    summary_token_threshold: int,
    llm: LLMFunction,
) -> str:
    """
    Summary for a single node.

    Args:
        node: Node whose own text is summarized.
        summary_token_threshold: Below this many tokens the text is returned as is.
        llm: Async prompt → text function.

    Returns:
        The summary text.
    """
    node_text = node.text or ""
    if estimate_tokens(node_text) < summary_token_threshold:
        return node_text
    return await llm(_NODE_SUMMARY_PROMPT.format(text=node_text))


async def generate_summaries_for_structure(
    structure: list[TreeNode],
    summary_token_threshold: int,
    llm: LLMFunction,
) -> list[TreeNode]:
    """
    Summarize every node of a tree concurrently.

    Args:
        structure: Root nodes. Mutated in place once all summaries resolve.
        summary_token_threshold: Threshold passed to get_node_summary.
        llm: Async prompt → text function.

    Returns:
        The flattened node list in pre-order.
    """
    nodes = structure_to_list(structure)
    # Leaf/internal status is decided before any request goes out
    is_leaf = [node.is_leaf for node in nodes]
    llm_calls = sum(
        1 for node in nodes
        if estimate_tokens(node.text or "") >= summary_token_threshold
    )

    logger.info(
        "summarizer.generating_summaries",
        node_count=len(nodes),
        llm_calls=llm_calls,
    )
    start_time = time.time()

    summaries = await asyncio.gather(
        *(get_node_summary(node, summary_token_threshold, llm) for node in nodes)
    )

    for node, leaf, summary in zip(nodes, is_leaf, summaries):
        if leaf:
            node.summary = summary
        else:
            node.prefix_summary = summary

    logger.info(
        "summarizer.summaries_complete",
        node_count=len(nodes),
        elapsed_ms=round((time.time() - start_time) * 1000, 1),
    )
    return nodes


def _clean_node(node: TreeNode) -> dict:
    data = {
        "title": node.title,
        "node_id": node.node_id,
        "summary": node.summary,
        "prefix_summary": node.prefix_summary,
    }
    return {key: value for key, value in data.items() if value is not None}


async def generate_doc_description(
    structure: list[TreeNode],
    llm: LLMFunction,
) -> str:
    """
    One-sentence description of the whole document.

    The prompt embeds the title/id/summary projection of every node as a
    JSON array, so summaries should be generated first.

    Args:
        structure: Summarized root nodes.
        llm: Async prompt → text function.

    Returns:
        The description returned by the LLM.
    """
    clean_structure = [_clean_node(node) for node in structure_to_list(structure)]
    prompt = _DOC_DESCRIPTION_PROMPT.format(
        structure=json.dumps(clean_structure, ensure_ascii=False)
    )
    return await llm(prompt)
