"""
hashtree - persistent balanced Merkle trees.

An immutable, append-only binary hash tree bound to a value codec and a
chain of digest functions, with membership queries, full-tree validation
and JSON documents.

Usage:
    from hashtree import MerkleTree, INT_CODEC

    tree = MerkleTree.from_sequence([40, 41, 42], INT_CODEC)
    print(tree.to_document(indent=2, hash_mask=7))
"""

__version__ = "1.0.0"

from hashtree.crypto import DigestChain, sha256_hex
from hashtree.merkle import MerkleTree
from hashtree.schemas import (
    BYTES_CODEC,
    INT_CODEC,
    JSON_CODEC,
    STR_CODEC,
    DocumentDecodeException,
    HashTreeException,
    InvariantViolationException,
    TreeError,
    ValueCodec,
    ValueDecodeException,
    pydantic_codec,
)

__all__ = [
    "__version__",
    "MerkleTree",
    "DigestChain",
    "sha256_hex",
    "ValueCodec",
    "INT_CODEC",
    "STR_CODEC",
    "BYTES_CODEC",
    "JSON_CODEC",
    "pydantic_codec",
    "TreeError",
    "HashTreeException",
    "DocumentDecodeException",
    "ValueDecodeException",
    "InvariantViolationException",
]
