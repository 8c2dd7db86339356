"""
Module 03 - Merkle Tree Insertion
Logarithmic append that keeps the tree balanced and its shape deterministic.

Algorithm:
    m = ceiling_power_of_two(root.count); descend from the root with target
    index i = m // 2 (the capacity of the current node's left child).

    EmptyLeaf            -> the new leaf takes the slot
    Leaf                 -> promoted to Branch(old, new)
    Branch, count == m   -> full at capacity: new Branch(node, spine of depth log2(count))
    Branch otherwise:
        left weight < i      -> descend left with i // 2
        count == i (> 1)     -> left is full, right is empty: graft a spine there
        else                 -> descend right with i // 2
    then rehash the rebuilt node (count + 1, duplication rule).

The path depends only on counts, never on values, so two trees built from
the same number of insertions have the same shape.
"""
from __future__ import annotations

from typing import Iterable, TypeVar

from hashtree.crypto.hashing import DigestChain
from hashtree.schemas.codec import ValueCodec
from hashtree.schemas.errors import InvariantViolationException

from .nodes import (
    Branch,
    EmptyLeaf,
    Leaf,
    Node,
    build_spine,
    ceiling_power_of_two,
    make_branch,
    make_leaf,
    slot_weight,
)

V = TypeVar("V")


def _log2(n: int) -> int:
    return n.bit_length() - 1


def _descend(
    node: Node[V],
    leaf: Leaf[V],
    index: int,
    capacity: int,
    chain: DigestChain,
) -> Node[V]:
    if isinstance(node, EmptyLeaf):
        return leaf

    if isinstance(node, Leaf):
        return make_branch(node, leaf, chain)

    count = node.count
    if count > 1 and count == capacity:
        # Tree is full: double capacity by pairing it with a fresh spine
        return make_branch(node, build_spine(leaf, _log2(count), chain), chain)

    if slot_weight(node.left) < index:
        left = _descend(node.left, leaf, index // 2, capacity, chain)
        right = node.right
    elif count > 1 and count == index:
        if not isinstance(node.right, EmptyLeaf):
            raise InvariantViolationException(
                "Sibling graft target is occupied",
                details={"count": count, "index": index},
            )
        left = node.left
        right = build_spine(leaf, _log2(count), chain)
    else:
        left = node.left
        right = _descend(node.right, leaf, index // 2, capacity, chain)

    rebuilt = make_branch(left, right, chain)
    if rebuilt.count != count + 1:
        raise InvariantViolationException(
            "Insertion changed subtree count by more than one",
            details={"before": count, "after": rebuilt.count},
        )
    return rebuilt


def insert_node(
    root: Node[V],
    value: V,
    chain: DigestChain,
    codec: ValueCodec[V],
) -> Node[V]:
    """
    Return a new root with ``value`` appended; ``root`` is left untouched.

    Args:
        root: Current root node
        value: Value to append
        chain: Digest chain of the owning tree
        codec: Value codec of the owning tree

    Returns:
        New root sharing all unchanged subtrees with ``root``

    Raises:
        InvariantViolationException: If ``root`` was not built by this algorithm
            and the descent reaches an impossible state
    """
    leaf = make_leaf(value, chain, codec)
    if isinstance(root, Branch):
        capacity = ceiling_power_of_two(root.count)
    else:
        capacity = 1 if isinstance(root, EmptyLeaf) else 2
    return _descend(root, leaf, capacity // 2, capacity, chain)


def insert_many(
    root: Node[V],
    values: Iterable[V],
    chain: DigestChain,
    codec: ValueCodec[V],
) -> Node[V]:
    """Fold ``insert_node`` over ``values`` in order."""
    for value in values:
        root = insert_node(root, value, chain, codec)
    return root


__all__ = [
    "insert_node",
    "insert_many",
]
