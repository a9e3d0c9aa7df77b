"""
Markdown Parser — heading scan and section materialization

First two stages of the Markdown indexing pipeline:
    raw text → (title, line) headings → flat MarkdownSection records

Headings inside fenced code blocks are ignored. Every line after the
first heading is owned by exactly one section; text before the first
heading (the preamble) is not attributed to any section.
"""

from __future__ import annotations

import math
import re

from .models import MarkdownSection

_HEADER_PATTERN = re.compile(r"^(#{1,6})\s+(.+)$")
_HEADER_MARKER_PATTERN = re.compile(r"^(#{1,6})")
_CODE_FENCE = "```"


def estimate_tokens(text: str) -> int:
    """Approximate token count at four characters per token."""
    return math.ceil(len(text) / 4)


def extract_nodes_from_markdown(content: str) -> tuple[list[dict], list[str]]:
    """
    Scan Markdown line by line for headings.

    Args:
        content: Raw Markdown text.

    Returns:
        Tuple of (headings, lines). Each heading is a dict with
        ``node_title`` and 1-indexed ``line_num``, in document order.
    """
    node_list: list[dict] = []
    lines = content.split("\n")
    in_code_block = False

    for line_num, line in enumerate(lines, start=1):
        stripped = line.strip()

        if stripped.startswith(_CODE_FENCE):
            in_code_block = not in_code_block
            continue

        if not stripped or in_code_block:
            continue

        match = _HEADER_PATTERN.match(stripped)
        if match:
            node_list.append({
                "node_title": match.group(2).strip(),
                "line_num": line_num,
            })

    return node_list, lines


def extract_node_text_content(
    node_list: list[dict],
    markdown_lines: list[str],
) -> list[MarkdownSection]:
    """
    Materialize the text span owned by each heading.

    A section owns its heading line and every following line up to the
    next heading of any level, or the end of the document.

    Args:
        node_list: Headings from extract_nodes_from_markdown.
        markdown_lines: Document lines from extract_nodes_from_markdown.

    Returns:
        Flat sections in document order with level and text set.
    """
    sections: list[MarkdownSection] = []

    for node in node_list:
        line_content = markdown_lines[node["line_num"] - 1]
        # Level comes from the raw line; indented headings are not sections
        header_match = _HEADER_MARKER_PATTERN.match(line_content)
        if not header_match:
            continue
        sections.append(
            MarkdownSection(
                title=node["node_title"],
                level=len(header_match.group(1)),
                line_num=node["line_num"],
            )
        )

    for idx, section in enumerate(sections):
        start = section.line_num - 1
        if idx + 1 < len(sections):
            end = sections[idx + 1].line_num - 1
        else:
            end = len(markdown_lines)
        section.text = "\n".join(markdown_lines[start:end]).strip()

    return sections
