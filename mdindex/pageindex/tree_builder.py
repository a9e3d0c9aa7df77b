"""
Tree Builder — nest flat sections by heading level

Uses an explicit stack of (node, level) pairs: a section becomes the last
child of the most recent open section with a strictly lower level, or a
root when there is none. Skipped levels nest directly (an H3 right after
an H1 is the H1's child), with no synthetic intermediate nodes.
"""

from __future__ import annotations

from .models import MarkdownSection, TreeNode


def build_tree_from_nodes(sections: list[MarkdownSection]) -> list[TreeNode]:
    """
    Build the nested tree from flat, level-tagged sections.

    Args:
        sections: Flat sections in document order.

    Returns:
        Root-level TreeNodes. Node ids are left unset.
    """
    stack: list[tuple[TreeNode, int]] = []
    root_nodes: list[TreeNode] = []

    for section in sections:
        node = TreeNode(
            title=section.title,
            text=section.text,
            start_index=section.line_num,
        )

        while stack and stack[-1][1] >= section.level:
            stack.pop()

        if stack:
            stack[-1][0].children.append(node)
        else:
            root_nodes.append(node)

        stack.append((node, section.level))

    return root_nodes
