"""
Module 03 - Merkle Tree Nodes
Recursive node representation for the persistent hash tree.

Node := EmptyLeaf | Leaf(value, hash) | Branch(count, hash, left, right)

Hashing Rules (Hard Contracts):
1. Leaf hash: chain.combine(dumps_canonical(codec.serialize(value)))
2. Branch hash: chain.combine(left.hash + right.hash)
3. Duplication rule: if right is EmptyLeaf, chain.combine(left.hash + left.hash)
4. A branch whose left child is EmptyLeaf has no defined hash

Nodes are frozen; insertion builds a new path to the root and shares every
untouched subtree with the previous version.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from hashtree.crypto.hashing import DigestChain
from hashtree.schemas.canonical import dumps_canonical
from hashtree.schemas.codec import ValueCodec
from hashtree.schemas.errors import InvariantViolationException

V = TypeVar("V")


@dataclass(frozen=True)
class EmptyLeaf:
    """Leaf slot with no value; the missing sibling of an unbalanced subtree."""

    def __repr__(self) -> str:
        return "EmptyLeaf()"


@dataclass(frozen=True)
class Leaf(Generic[V]):
    """
    Occupied leaf.

    Attributes:
        value: The stored value
        hash: Digest-chain output over the canonical serialized value
    """
    value: V
    hash: str


@dataclass(frozen=True)
class Branch(Generic[V]):
    """
    Internal node.

    Attributes:
        count: Number of occupied leaves beneath this node
        hash: Digest-chain output over the children's hashes
        left: Left child (never EmptyLeaf in engine-built trees)
        right: Right child
    """
    count: int
    hash: str
    left: "Node[V]"
    right: "Node[V]"


Node = Union[EmptyLeaf, Leaf[V], Branch[V]]

EMPTY = EmptyLeaf()


def occupied_count(node: Node[Any]) -> int:
    """Occupied leaves in a subtree: EmptyLeaf 0, Leaf 1, Branch its count."""
    if isinstance(node, Branch):
        return node.count
    if isinstance(node, Leaf):
        return 1
    return 0


def slot_weight(node: Node[Any]) -> int:
    """
    Left-child weight used to steer insertion.

    Any leaf slot (empty or not) weighs 1; a branch reports its count.
    """
    if isinstance(node, Branch):
        return node.count
    return 1


def ceiling_power_of_two(n: int) -> int:
    """Smallest power of two >= n (1 for n <= 1)."""
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def serialized_text(value: Any, codec: ValueCodec[Any]) -> str:
    """Canonical JSON text of a value's serialized form; the leaf hash input."""
    return dumps_canonical(codec.serialize(value))


def leaf_hash(value: Any, chain: DigestChain, codec: ValueCodec[Any]) -> str:
    return chain.combine(serialized_text(value, codec))


def pair_hash(left_hash: str, right_hash: str | None, chain: DigestChain) -> str:
    """Parent hash from child hashes; ``right_hash=None`` applies the duplication rule."""
    if right_hash is None:
        return chain.combine(left_hash + left_hash)
    return chain.combine(left_hash + right_hash)


def branch_hash(left: Node[Any], right: Node[Any], chain: DigestChain) -> str:
    """
    Hash for a branch over ``left`` and ``right``.

    Raises:
        InvariantViolationException: If the left child is EmptyLeaf
    """
    if isinstance(left, EmptyLeaf):
        raise InvariantViolationException(
            "Cannot hash a branch whose left child is empty",
            details={"right": type(right).__name__},
        )
    if isinstance(right, EmptyLeaf):
        return pair_hash(left.hash, None, chain)
    return pair_hash(left.hash, right.hash, chain)


def make_leaf(value: V, chain: DigestChain, codec: ValueCodec[V]) -> Leaf[V]:
    return Leaf(value=value, hash=leaf_hash(value, chain, codec))


def make_branch(left: Node[V], right: Node[V], chain: DigestChain) -> Branch[V]:
    """Build a branch with its count and hash derived from the children."""
    return Branch(
        count=occupied_count(left) + occupied_count(right),
        hash=branch_hash(left, right, chain),
        left=left,
        right=right,
    )


def build_spine(leaf: Leaf[V], depth: int, chain: DigestChain) -> Node[V]:
    """
    Wrap ``leaf`` in ``depth`` single-child branches.

    Each level pairs the subtree below with an EmptyLeaf sibling, so every
    branch on the spine has count 1 and a duplicated child hash. Depth 0
    returns the leaf itself.
    """
    if depth < 0:
        raise ValueError(f"Spine depth must be non-negative, got {depth}")
    node: Node[V] = leaf
    for _ in range(depth):
        node = make_branch(node, EMPTY, chain)
    return node


__all__ = [
    "EmptyLeaf",
    "Leaf",
    "Branch",
    "Node",
    "EMPTY",
    "occupied_count",
    "slot_weight",
    "ceiling_power_of_two",
    "serialized_text",
    "leaf_hash",
    "pair_hash",
    "branch_hash",
    "make_leaf",
    "make_branch",
    "build_spine",
]
