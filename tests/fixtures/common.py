"""
Common test fixtures shared by all test modules.

Provides factory functions for hash tree test data:
- Integer trees of a given size
- Tampered trees (leaf value swapped, hash kept)
- Structural shape extraction (hashes and data stripped)
- A level-by-level reference root ("duplicate last node" padding)
"""

from dataclasses import replace
from typing import Any, Iterable, Optional, Sequence

from hashtree.crypto.hashing import DigestChain, sha256_hex
from hashtree.merkle.nodes import Branch, EmptyLeaf, Leaf, Node
from hashtree.merkle.tree import MerkleTree
from hashtree.schemas.codec import INT_CODEC


def make_int_tree(
    n: int = 3,
    start: int = 0,
    chain: Optional[DigestChain] = None,
) -> MerkleTree[int]:
    """Tree holding start, start+1, ..., start+n-1 inserted in order."""
    return MerkleTree.from_sequence(range(start, start + n), INT_CODEC, chain)


def make_tampered_tree(tree: MerkleTree[Any], new_value: Any) -> MerkleTree[Any]:
    """
    Swap the value of the left-most leaf while keeping its stored hash.

    Every other node is left untouched, so only the tampered leaf
    disagrees with a recomputation.
    """
    def _swap(node: Node[Any]) -> Node[Any]:
        if isinstance(node, Leaf):
            return replace(node, value=new_value)
        if isinstance(node, Branch):
            return replace(node, left=_swap(node.left))
        raise AssertionError("tree has no occupied leaf")

    return MerkleTree(root=_swap(tree.root), chain=tree.chain, codec=tree.codec)


def node_shape(node: Node[Any]) -> Any:
    """Shape of a node tree: counts and null slots only."""
    if isinstance(node, EmptyLeaf):
        return None
    if isinstance(node, Leaf):
        return "leaf"
    return {
        "count": node.count,
        "left": node_shape(node.left),
        "right": node_shape(node.right),
    }


def strip_hashes(data: Any) -> Any:
    """Remove "hash" keys from parsed document data, recursively."""
    if isinstance(data, dict):
        return {k: strip_hashes(v) for k, v in data.items() if k != "hash"}
    return data


def reference_root(leaves: Sequence[str], digest=sha256_hex) -> Optional[str]:
    """
    Root of a flat leaf-hash list built level by level.

    Odd levels duplicate their last node before pairing.
    """
    if not leaves:
        return None
    level = list(leaves)
    while len(level) > 1:
        if len(level) % 2 == 1:
            level.append(level[-1])
        level = [digest(level[i] + level[i + 1]) for i in range(0, len(level), 2)]
    return level[0]


def int_leaf_hashes(values: Iterable[int], digest=sha256_hex) -> list[str]:
    return [digest(str(v)) for v in values]
