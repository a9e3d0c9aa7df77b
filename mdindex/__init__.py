"""
mdindex - Vectorless, reasoning-friendly Markdown tree index

Converts Markdown into a hierarchical section tree with optional
per-node summaries. See mdindex.pageindex for the pipeline.
"""

from .core.config import MarkdownOptions
from .core.exceptions import ConfigurationError, MdIndexError
from .pageindex import (
    DocumentInput,
    DocumentResult,
    TreeNode,
    md_file_to_tree,
    md_to_tree,
    pages_to_tree,
)

__version__ = "0.1.0"

__all__ = [
    "MarkdownOptions",
    "ConfigurationError",
    "MdIndexError",
    "DocumentInput",
    "DocumentResult",
    "TreeNode",
    "md_file_to_tree",
    "md_to_tree",
    "pages_to_tree",
]
