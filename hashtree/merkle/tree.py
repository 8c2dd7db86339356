"""
Module 03 - Merkle Tree Engine
Persistent, append-only, balanced hash tree bound to a value codec and a
digest chain.

This module provides:
- MerkleTree: immutable engine owning a root node, a DigestChain and a ValueCodec

Every operation that "changes" the tree returns a new MerkleTree; the
receiver is never modified and keeps sharing its subtrees with the result.

Usage:
    from hashtree import MerkleTree, INT_CODEC

    tree = MerkleTree.from_sequence([40, 41, 42], INT_CODEC)
    tree = tree.insert(43)
    assert 42 in tree
    assert tree.is_valid()

    text = tree.to_document(indent=2)
    restored = MerkleTree.from_document(text, INT_CODEC)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, Iterable, Iterator, Optional, TypeVar, Union

from hashtree.crypto.hashing import ChainLike, DigestChain, resolve_chain
from hashtree.schemas.codec import ValueCodec

from .insertion import insert_many, insert_node
from .nodes import EMPTY, EmptyLeaf, Node, build_spine, make_leaf, occupied_count
from .queries import contains_value, find_entries, flatten_entries, iter_leaves, tree_depth
from .serialization import dump_document, load_document
from .validation import validate_node

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass(frozen=True)
class MerkleTree(Generic[V]):
    """
    Immutable Merkle tree engine.

    Construct with one of the classmethods rather than directly.

    Attributes:
        root: Root node
        chain: Digest chain every hash in the tree was computed with
        codec: Codec for leaf values
    """
    root: Node[V]
    chain: DigestChain
    codec: ValueCodec[V]

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def initialize(cls, codec: ValueCodec[V], chain: ChainLike = None) -> "MerkleTree[V]":
        """Empty tree. A missing or empty chain means SHA-256."""
        return cls(root=EMPTY, chain=resolve_chain(chain), codec=codec)

    @classmethod
    def singleton(
        cls,
        value: V,
        codec: ValueCodec[V],
        chain: ChainLike = None,
        depth_hint: int = 1,
    ) -> "MerkleTree[V]":
        """
        Tree holding exactly one value.

        The leaf sits at the bottom of ``depth_hint`` single-child branches,
        each with an empty right sibling.

        Raises:
            ValueError: If depth_hint is negative
        """
        resolved = resolve_chain(chain)
        root = build_spine(make_leaf(value, resolved, codec), depth_hint, resolved)
        return cls(root=root, chain=resolved, codec=codec)

    @classmethod
    def from_sequence(
        cls,
        values: Iterable[V],
        codec: ValueCodec[V],
        chain: ChainLike = None,
    ) -> "MerkleTree[V]":
        """Insert ``values`` one by one into an empty tree, preserving order."""
        return cls.initialize(codec, chain).insert_all(values)

    @classmethod
    def from_document(
        cls,
        document: Union[str, bytes],
        codec: ValueCodec[V],
        chain: ChainLike = None,
    ) -> "MerkleTree[V]":
        """
        Rebuild a tree from JSON produced by ``to_document``.

        Stored hashes are trusted as-is; call ``is_valid`` to check them.

        Raises:
            DocumentDecodeException: On malformed or schema-violating input
            ValueDecodeException: If the codec rejects a leaf's data
        """
        root = load_document(document, codec)
        tree = cls(root=root, chain=resolve_chain(chain), codec=codec)
        logger.debug(f"Loaded tree with {len(tree)} leaves from document")
        return tree

    # -------------------------------------------------------------------------
    # Insertion
    # -------------------------------------------------------------------------

    def insert(self, value: V) -> "MerkleTree[V]":
        """Return a new tree with ``value`` appended."""
        return self._with_root(insert_node(self.root, value, self.chain, self.codec))

    def insert_all(self, values: Iterable[V]) -> "MerkleTree[V]":
        """Return a new tree with ``values`` appended in order."""
        return self._with_root(insert_many(self.root, values, self.chain, self.codec))

    def _with_root(self, root: Node[V]) -> "MerkleTree[V]":
        return MerkleTree(root=root, chain=self.chain, codec=self.codec)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def contains(self, value: Any) -> bool:
        return contains_value(self.root, value)

    def get(self, value: Any) -> list[tuple[V, str]]:
        """All ``(value, hash)`` leaves equal to ``value``, in insertion order."""
        return find_entries(self.root, value)

    def flatten(self) -> list[tuple[V, str]]:
        """Every ``(value, hash)`` leaf in insertion order."""
        return flatten_entries(self.root)

    def depth(self) -> int:
        """0 for an empty or single-leaf tree, else the number of branch levels."""
        return tree_depth(self.root)

    @property
    def count(self) -> int:
        """Number of occupied leaves."""
        return occupied_count(self.root)

    @property
    def root_hash(self) -> Optional[str]:
        """Hash of the root node; None for an empty tree."""
        if isinstance(self.root, EmptyLeaf):
            return None
        return self.root.hash

    @property
    def is_empty(self) -> bool:
        return isinstance(self.root, EmptyLeaf)

    def values(self) -> list[V]:
        return [leaf.value for leaf in iter_leaves(self.root)]

    def __len__(self) -> int:
        return self.count

    def __contains__(self, value: object) -> bool:
        return self.contains(value)

    def __iter__(self) -> Iterator[V]:
        return (leaf.value for leaf in iter_leaves(self.root))

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def is_valid(self, chain: ChainLike = None) -> bool:
        """
        Recompute every hash and compare with the stored one.

        Args:
            chain: Digest chain to check against; defaults to the tree's own

        Returns:
            True iff every node's stored hash matches its recomputation
        """
        check_chain = self.chain if chain is None else resolve_chain(chain)
        valid = validate_node(self.root, check_chain, self.codec)
        if not valid:
            logger.debug(f"Tree with root hash {self.root_hash} failed validation")
        return valid

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_document(self, indent: int = 0, hash_mask: int = 0) -> str:
        """
        Render the tree as JSON text.

        Args:
            indent: Pretty-print width; 0 gives a single line
            hash_mask: Truncate hashes to this many characters (0 = full).
                Lossy: a masked document will not pass ``is_valid``.
        """
        return dump_document(self.root, self.codec, indent=indent, hash_mask=hash_mask)

    def __repr__(self) -> str:
        root_hash = self.root_hash
        shown = f"{root_hash[:12]}..." if root_hash else None
        return f"MerkleTree(count={self.count}, depth={self.depth()}, root_hash={shown!r})"


__all__ = [
    "MerkleTree",
]
