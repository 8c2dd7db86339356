"""
Test fixtures package for hash tree tests.

Usage:
    from fixtures import make_int_tree, make_tampered_tree

    def test_something():
        tree = make_int_tree(5)
        assert not make_tampered_tree(tree, 99).is_valid()
"""

from .common import (
    int_leaf_hashes,
    make_int_tree,
    make_tampered_tree,
    node_shape,
    reference_root,
    strip_hashes,
)

__all__ = [
    "make_int_tree",
    "make_tampered_tree",
    "node_shape",
    "strip_hashes",
    "reference_root",
    "int_leaf_hashes",
]
