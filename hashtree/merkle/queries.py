"""
Module 03 - Merkle Tree Queries
Read-only traversals over a node tree. Output order is always left to
right, which is insertion order for engine-built trees.
"""
from __future__ import annotations

from typing import Any, Iterator, TypeVar

from .nodes import Branch, Leaf, Node

V = TypeVar("V")


def iter_leaves(node: Node[V]) -> Iterator[Leaf[V]]:
    """Yield occupied leaves left to right."""
    if isinstance(node, Leaf):
        yield node
    elif isinstance(node, Branch):
        yield from iter_leaves(node.left)
        yield from iter_leaves(node.right)


def contains_value(node: Node[Any], value: Any) -> bool:
    """True if any occupied leaf equals ``value``; stops at the first match (left first)."""
    if isinstance(node, Leaf):
        return node.value == value
    if isinstance(node, Branch):
        return contains_value(node.left, value) or contains_value(node.right, value)
    return False


def find_entries(node: Node[V], value: Any) -> list[tuple[V, str]]:
    """All ``(value, hash)`` pairs whose value equals ``value``, in order."""
    return [(leaf.value, leaf.hash) for leaf in iter_leaves(node) if leaf.value == value]


def flatten_entries(node: Node[V]) -> list[tuple[V, str]]:
    return [(leaf.value, leaf.hash) for leaf in iter_leaves(node)]


def tree_depth(node: Node[Any]) -> int:
    """
    Branch depth of a subtree.

    Leaves and empty slots contribute 0; a branch is one more than its
    deepest child.
    """
    if isinstance(node, Branch):
        return 1 + max(tree_depth(node.left), tree_depth(node.right))
    return 0


__all__ = [
    "iter_leaves",
    "contains_value",
    "find_entries",
    "flatten_entries",
    "tree_depth",
]
