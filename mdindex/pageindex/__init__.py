"""
PageIndex Module - Markdown to hierarchical tree index

Turns a flat Markdown document into a tree of sections, each optionally
carrying an LLM-written summary, so that a model can navigate a large
document section by section instead of reading it whole.

The LLM is supplied by the caller as an ``async (prompt) -> str`` function.
"""

from .converter import md_file_to_tree, md_to_tree, pages_to_tree
from .json_utils import extract_json, get_json_content
from .models import (
    NODE_KEY_ORDER,
    DocumentInput,
    DocumentResult,
    MarkdownSection,
    TreeNode,
)
from .parser import estimate_tokens
from .tree_utils import (
    find_node,
    format_structure,
    format_toc,
    get_leaf_nodes,
    get_nodes,
    is_leaf_node,
    list_to_tree,
    remove_fields,
    remove_structure_text,
    structure_to_list,
    write_node_id,
)

__all__ = [
    "md_to_tree",
    "md_file_to_tree",
    "pages_to_tree",
    "extract_json",
    "get_json_content",
    "NODE_KEY_ORDER",
    "DocumentInput",
    "DocumentResult",
    "MarkdownSection",
    "TreeNode",
    "estimate_tokens",
    "find_node",
    "format_structure",
    "format_toc",
    "get_leaf_nodes",
    "get_nodes",
    "is_leaf_node",
    "list_to_tree",
    "remove_fields",
    "remove_structure_text",
    "structure_to_list",
    "write_node_id",
]
