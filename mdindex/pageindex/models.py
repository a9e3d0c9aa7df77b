"""
Data structures for Markdown tree indexing.

Two representations are used along the pipeline:
    MarkdownSection: flat, level-tagged heading records produced by the
        parser and mutated in place by token accounting and thinning.
    TreeNode: the nested, owned tree handed back to callers inside a
        DocumentResult.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


# Canonical field order for emitted nodes
NODE_KEY_ORDER: tuple[str, ...] = (
    "title",
    "node_id",
    "summary",
    "prefix_summary",
    "text",
    "start_index",
    "children",
)


@dataclass
class MarkdownSection:
    """
    A single heading plus the text it owns, before nesting is applied.

    Attributes:
        title: Heading text without the leading ``#`` markers.
        level: Heading depth (1-6).
        line_num: 1-indexed line of the heading in the source document.
        text: Owned text span, heading line included.
        token_count: Estimated tokens of the section and its descendants.
    """

    title: str
    level: int
    line_num: int
    text: Optional[str] = None
    token_count: Optional[int] = None


@dataclass
class TreeNode:
    """
    A single node in the document tree.

    Attributes:
        title: Section title.
        node_id: Zero-padded sequential identifier (pre-order).
        start_index: 1-indexed source line of the section heading.
        end_index: Reserved; not populated for Markdown input.
        text: Full owned text of the section.
        summary: Summary of a leaf node.
        prefix_summary: Summary of an internal node's own text.
        children: Child nodes (sub-sections).
    """

    title: str
    node_id: Optional[str] = None
    start_index: Optional[int] = None
    end_index: Optional[int] = None
    text: Optional[str] = None
    summary: Optional[str] = None
    prefix_summary: Optional[str] = None
    children: list[TreeNode] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def to_dict(self) -> dict:
        """
        Convert tree node to dictionary for JSON serialization.

        Fields follow NODE_KEY_ORDER; None values and an empty children
        list are omitted. ``end_index`` is appended last when set.

        Returns:
            Dictionary representation including recursively serialized children.
        """
        data: dict = {}
        for key in NODE_KEY_ORDER:
            if key == "children":
                if self.children:
                    data["children"] = [child.to_dict() for child in self.children]
                continue
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.end_index is not None:
            data["end_index"] = self.end_index
        return data

    @classmethod
    def from_dict(cls, data: dict) -> TreeNode:
        """
        Create a TreeNode from a dictionary.

        Args:
            data: Dictionary with tree node fields.

        Returns:
            Reconstructed TreeNode with all children.

        Raises:
            KeyError: If the title is missing.
        """
        children = [
            cls.from_dict(child_data)
            for child_data in data.get("children", [])
        ]
        return cls(
            title=data["title"],
            node_id=data.get("node_id"),
            start_index=data.get("start_index"),
            end_index=data.get("end_index"),
            text=data.get("text"),
            summary=data.get("summary"),
            prefix_summary=data.get("prefix_summary"),
            children=children,
        )


@dataclass
class DocumentResult:
    """
    Tree index for a single converted document.

    Attributes:
        doc_name: Document name (file stem for file input).
        structure: Root-level tree nodes.
        doc_description: One-sentence description of the whole document.
    """

    doc_name: str
    structure: list[TreeNode] = field(default_factory=list)
    doc_description: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert the result to a JSON-serializable dictionary."""
        data: dict = {"doc_name": self.doc_name}
        if self.doc_description is not None:
            data["doc_description"] = self.doc_description
        data["structure"] = [node.to_dict() for node in self.structure]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> DocumentResult:
        """
        Create a DocumentResult from a dictionary.

        Raises:
            KeyError: If ``doc_name`` is missing.
        """
        return cls(
            doc_name=data["doc_name"],
            structure=[TreeNode.from_dict(n) for n in data.get("structure", [])],
            doc_description=data.get("doc_description"),
        )


@dataclass(frozen=True)
class DocumentInput:
    """
    A document supplied as already-extracted page texts.

    Attributes:
        name: Document name used for the result.
        pages: Page texts in reading order.
    """

    name: str
    pages: list[str] = field(default_factory=list)

    @property
    def content(self) -> str:
        """The pages joined into one text, one newline between pages."""
        return "\n".join(self.pages)
