"""
Module 03 - Merkle Tree Validation
Bottom-up recomputation of every stored hash.

A tree is valid iff, at every node, the stored hash equals the hash
recomputed from scratch with the given digest chain. Validation never
raises for a mismatch and never repairs anything.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from hashtree.crypto.hashing import DigestChain
from hashtree.schemas.codec import ValueCodec
from hashtree.schemas.errors import HashTreeException

from .nodes import Branch, EmptyLeaf, Leaf, Node, leaf_hash, pair_hash

logger = logging.getLogger(__name__)


def _recompute(
    node: Node[Any],
    chain: DigestChain,
    codec: ValueCodec[Any],
    path: str,
) -> Optional[str]:
    """Recomputed hash of ``node``, or None if anything beneath it mismatches."""
    if isinstance(node, Leaf):
        try:
            expected = leaf_hash(node.value, chain, codec)
        except HashTreeException as e:
            logger.debug(f"Leaf at {path} cannot be rehashed: {e.message}")
            return None
        if expected != node.hash:
            logger.debug(f"Leaf hash mismatch at {path}")
            return None
        return expected

    if isinstance(node, Branch):
        if isinstance(node.left, EmptyLeaf):
            logger.debug(f"Branch at {path} has an empty left child")
            return None
        left = _recompute(node.left, chain, codec, f"{path}.left")
        if left is None:
            return None
        if isinstance(node.right, EmptyLeaf):
            expected = pair_hash(left, None, chain)
        else:
            right = _recompute(node.right, chain, codec, f"{path}.right")
            if right is None:
                return None
            expected = pair_hash(left, right, chain)
        if expected != node.hash:
            logger.debug(f"Branch hash mismatch at {path}")
            return None
        return expected

    # A bare EmptyLeaf only occurs as the root of an empty tree
    return ""


def validate_node(node: Node[Any], chain: DigestChain, codec: ValueCodec[Any]) -> bool:
    """
    Check every stored hash under ``node`` against a fresh recomputation.

    Args:
        node: Root of the subtree to check
        chain: Digest chain to recompute with
        codec: Codec used to serialize leaf values

    Returns:
        True if every node matches, False otherwise
    """
    return _recompute(node, chain, codec, "root") is not None


__all__ = [
    "validate_node",
]
