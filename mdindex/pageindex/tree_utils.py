"""
Tree utilities — traversal and formatting helpers for TreeNode structures

Functions accept either a single node or a list of roots, mirroring how
trees are passed around the pipeline (``DocumentResult.structure`` is a
list). ``format_structure`` and ``remove_fields`` work on the dict form
produced by ``TreeNode.to_dict``.
"""

from __future__ import annotations

from typing import Iterable, Optional, Union

from .models import TreeNode

# Node ids are always four digits: "0000", "0001", ...
NODE_ID_WIDTH = 4

NodeOrList = Union[TreeNode, list[TreeNode]]
DictOrList = Union[dict, list[dict]]


def write_node_id(
    data: NodeOrList,
    node_id: int = 0,
    width: int = NODE_ID_WIDTH,
) -> int:
    """
    Assign zero-padded sequential ids in pre-order.

    Args:
        data: Node or list of root nodes. Mutated in place.
        node_id: First id to assign.
        width: Padding width.

    Returns:
        The next unassigned id.
    """
    if isinstance(data, list):
        for item in data:
            node_id = write_node_id(item, node_id, width)
        return node_id

    data.node_id = str(node_id).zfill(width)
    node_id += 1
    if data.children:
        node_id = write_node_id(data.children, node_id, width)
    return node_id


def structure_to_list(structure: NodeOrList) -> list[TreeNode]:
    """Flatten a tree into its nodes in pre-order (same node objects)."""
    if isinstance(structure, list):
        nodes: list[TreeNode] = []
        for item in structure:
            nodes.extend(structure_to_list(item))
        return nodes
    return [structure] + structure_to_list(structure.children)


def get_nodes(structure: NodeOrList) -> list[dict]:
    """Flatten a tree into pre-order dicts without their ``children`` key."""
    nodes = []
    for node in structure_to_list(structure):
        data = node.to_dict()
        data.pop("children", None)
        nodes.append(data)
    return nodes


def get_leaf_nodes(structure: NodeOrList) -> list[TreeNode]:
    """Leaf nodes in pre-order (left to right)."""
    return [node for node in structure_to_list(structure) if node.is_leaf]


def find_node(structure: NodeOrList, node_id: str) -> Optional[TreeNode]:
    """First node in pre-order with the given id, or None."""
    for node in structure_to_list(structure):
        if node.node_id == node_id:
            return node
    return None


def is_leaf_node(structure: NodeOrList, node_id: str) -> bool:
    """Whether the node with node_id exists and has no children."""
    node = find_node(structure, node_id)
    return node is not None and node.is_leaf


def _parent_structure(code: Optional[str]) -> Optional[str]:
    if not code:
        return None
    parts = code.split(".")
    return ".".join(parts[:-1]) if len(parts) > 1 else None


def list_to_tree(items: Iterable[dict]) -> list[TreeNode]:
    """
    Build a tree from flat items carrying dotted structure codes.

    Each item needs ``title`` and may carry ``structure`` (e.g. ``"1.2.3"``)
    and ``start_index``. An item whose parent code has not been seen yet
    becomes a root.

    Args:
        items: Flat items in document order.

    Returns:
        Root-level TreeNodes.
    """
    by_code: dict[str, TreeNode] = {}
    root_nodes: list[TreeNode] = []

    for item in items:
        code = item.get("structure") or ""
        node = TreeNode(title=item["title"], start_index=item.get("start_index"))
        by_code[code] = node

        parent_code = _parent_structure(code)
        if parent_code and parent_code in by_code:
            by_code[parent_code].children.append(node)
        else:
            root_nodes.append(node)

    return root_nodes


def remove_structure_text(data: NodeOrList) -> None:
    """Drop the ``text`` of every node in place."""
    for node in structure_to_list(data):
        node.text = None


def _reorder_dict(data: dict, key_order: Iterable[str]) -> dict:
    return {key: data[key] for key in key_order if key in data}


def format_structure(structure: DictOrList, order: Optional[Iterable[str]] = None) -> DictOrList:
    """
    Reorder node dict keys recursively, keeping only keys named in order.

    Empty ``children`` lists are dropped. Returns new dicts; the input is
    not modified.
    """
    if order is None:
        return structure
    order = list(order)

    if isinstance(structure, list):
        return [format_structure(item, order) for item in structure]

    formatted = dict(structure)
    if formatted.get("children"):
        formatted["children"] = format_structure(formatted["children"], order)
    else:
        formatted.pop("children", None)
    return _reorder_dict(formatted, order)


def remove_fields(data: DictOrList, fields: Iterable[str] = ("text",)) -> DictOrList:
    """Copy of the dict tree without the named fields."""
    fields = set(fields)
    if isinstance(data, list):
        return [remove_fields(item, fields) for item in data]

    result = {}
    for key, value in data.items():
        if key in fields:
            continue
        if key == "children" and isinstance(value, list):
            result[key] = remove_fields(value, fields)
        else:
            result[key] = value
    return result


def format_toc(tree: list[TreeNode], indent: int = 0) -> str:
    """Render node titles as an indented table of contents."""
    lines = []
    for node in tree:
        lines.append("  " * indent + node.title)
        if node.children:
            lines.append(format_toc(node.children, indent + 1))
    return "\n".join(lines)
