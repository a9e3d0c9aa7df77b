"""
Tree Thinning — token accounting and small-subtree collapse

Operates on the flat, level-tagged section list before nesting:

    update_node_list_with_text_token_count
        Every section gets the estimated token size of its own text plus
        all of its descendants' text.

    tree_thinning_for_index
        Back-to-front, any section whose cumulative size is below the
        threshold absorbs its descendants: their text is appended to it in
        document order and they are removed from the list. Text is never
        dropped, only moved up to the nearest absorbing ancestor.

A section's descendants are the contiguous run of following sections
with a strictly deeper level.
"""

from __future__ import annotations

from .models import MarkdownSection
from .parser import estimate_tokens
from ..observability.logging import get_logger

logger = get_logger(__name__)


def find_all_children(
    parent_index: int,
    parent_level: int,
    sections: list[MarkdownSection],
) -> list[int]:
    """
    Indices of all descendants of the section at parent_index.

    Args:
        parent_index: Index of the parent section.
        parent_level: Heading level of the parent section.
        sections: Current flat section list.

    Returns:
        Ascending indices up to (excluding) the next section at the
        parent's level or shallower.
    """
    children: list[int] = []
    for idx in range(parent_index + 1, len(sections)):
        if sections[idx].level <= parent_level:
            break
        children.append(idx)
    return children


def update_node_list_with_text_token_count(
    sections: list[MarkdownSection],
) -> list[MarkdownSection]:
    """
    Set ``token_count`` on every section to its cumulative subtree size.

    Sections are visited from the end so that descendants, which always
    sit at higher indices, are settled before their ancestors.

    Args:
        sections: Flat sections with text populated. Mutated in place.

    Returns:
        The same list, for chaining.
    """
    for idx in range(len(sections) - 1, -1, -1):
        section = sections[idx]
        total_text = section.text or ""
        for child_idx in find_all_children(idx, section.level, sections):
            child_text = sections[child_idx].text
            if child_text:
                total_text += "\n" + child_text
        section.token_count = estimate_tokens(total_text)
    return sections


def tree_thinning_for_index(
    sections: list[MarkdownSection],
    min_node_token: int,
) -> list[MarkdownSection]:
    """
    Merge every subtree smaller than min_node_token into its root section.

    Requires token_count to be set (see update_node_list_with_text_token_count).
    Descendants already absorbed by a deeper merge are skipped, their text
    having been carried up with the section that absorbed them.

    Args:
        sections: Flat sections. Absorbing sections are mutated in place.
        min_node_token: Subtrees with fewer estimated tokens are collapsed.

    Returns:
        New list with absorbed sections removed, order preserved.
    """
    absorbed: set[int] = set()

    for idx in range(len(sections) - 1, -1, -1):
        if idx in absorbed:
            continue

        section = sections[idx]
        if (section.token_count or 0) >= min_node_token:
            continue

        children_texts: list[str] = []
        for child_idx in find_all_children(idx, section.level, sections):
            if child_idx in absorbed:
                continue
            child_text = sections[child_idx].text
            if child_text and child_text.strip():
                children_texts.append(child_text)
            absorbed.add(child_idx)

        if not children_texts:
            continue

        merged_text = section.text or ""
        for child_text in children_texts:
            if merged_text and not merged_text.endswith("\n"):
                merged_text += "\n\n"
            merged_text += child_text

        section.text = merged_text
        section.token_count = estimate_tokens(merged_text)

    logger.debug(
        "thinning.complete",
        before=len(sections),
        absorbed=len(absorbed),
        threshold=min_node_token,
    )

    return [section for idx, section in enumerate(sections) if idx not in absorbed]
