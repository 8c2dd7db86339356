"""
Module 03 - Merkle Tree
Persistent balanced hash tree with deterministic shape.

Hashing Rules:
1. Leaf: chain.combine(dumps_canonical(codec.serialize(value)))
2. Branch: chain.combine(left.hash + right.hash)
3. Padding: an empty right child duplicates the left hash
4. Shape depends only on insertion count; depth after n inserts is ceil(log2(n))

Usage:
    from hashtree.merkle import MerkleTree
    from hashtree.schemas import INT_CODEC

    tree = MerkleTree.from_sequence(range(43), INT_CODEC)
    assert tree.contains(42) and not tree.contains(43)
"""
from .nodes import (
    EMPTY,
    Branch,
    EmptyLeaf,
    Leaf,
    Node,
    build_spine,
    ceiling_power_of_two,
    make_branch,
    make_leaf,
)
from .insertion import insert_many, insert_node
from .queries import contains_value, find_entries, flatten_entries, tree_depth
from .serialization import dump_document, load_document, node_to_data
from .validation import validate_node
from .tree import MerkleTree


__all__ = [
    # Engine
    "MerkleTree",
    # Nodes
    "Node",
    "EmptyLeaf",
    "Leaf",
    "Branch",
    "EMPTY",
    "make_leaf",
    "make_branch",
    "build_spine",
    "ceiling_power_of_two",
    # Algorithms
    "insert_node",
    "insert_many",
    "contains_value",
    "find_entries",
    "flatten_entries",
    "tree_depth",
    "validate_node",
    # Documents
    "node_to_data",
    "dump_document",
    "load_document",
]
