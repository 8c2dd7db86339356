"""
Module 03 - Merkle Tree Unit Tests
Tests for hashtree/merkle/tree.py and hashtree/merkle/insertion.py

Covers:
1. Construction - empty, singleton (with depth hints), from a sequence
2. Balance - depth == ceil(log2(n)) and count == n after n inserts
3. Shape determinism - shape depends only on the number of inserts
4. Padding - root matches the level-by-level "duplicate last node" rule
5. Persistence - inserts never modify earlier trees and share subtrees
6. Invariant violations fail loudly
"""
import pytest

from fixtures import int_leaf_hashes, make_int_tree, node_shape, reference_root

from hashtree.crypto.hashing import DigestChain, blake2b_hex, sha256_hex
from hashtree.merkle.insertion import insert_node
from hashtree.merkle.nodes import (
    EMPTY,
    Branch,
    EmptyLeaf,
    Leaf,
    branch_hash,
    build_spine,
    ceiling_power_of_two,
    make_leaf,
)
from hashtree.merkle.tree import MerkleTree
from hashtree.schemas.codec import INT_CODEC, STR_CODEC
from hashtree.schemas.errors import InvariantViolationException


class TestConstruction:
    """Tests for the MerkleTree constructors."""

    def test_initialize_is_empty(self):
        """initialize() produces an EmptyLeaf root with no leaves."""
        tree = MerkleTree.initialize(INT_CODEC)

        assert isinstance(tree.root, EmptyLeaf)
        assert tree.count == 0
        assert len(tree) == 0
        assert tree.is_empty
        assert tree.root_hash is None
        assert tree.depth() == 0

    def test_missing_or_empty_chain_defaults_to_sha256(self):
        """No chain and an empty chain both fall back to SHA-256."""
        assert MerkleTree.initialize(INT_CODEC).chain == DigestChain.default()
        assert MerkleTree.initialize(INT_CODEC, []).chain == DigestChain.default()

    def test_first_insert_is_a_bare_leaf(self):
        """Inserting into an empty tree places the value at the root."""
        tree = MerkleTree.initialize(INT_CODEC).insert(7)

        assert isinstance(tree.root, Leaf)
        assert tree.root.value == 7
        assert tree.root.hash == sha256_hex("7")
        assert tree.depth() == 0

    def test_singleton_default_depth(self):
        """singleton() wraps the leaf in one branch with an empty sibling."""
        tree = MerkleTree.singleton(5, INT_CODEC)
        leaf_h = sha256_hex("5")

        assert isinstance(tree.root, Branch)
        assert tree.root.count == 1
        assert tree.root.hash == sha256_hex(leaf_h + leaf_h)
        assert tree.root.left == Leaf(value=5, hash=leaf_h)
        assert tree.root.right == EMPTY
        assert tree.depth() == 1
        assert tree.is_valid()

    def test_singleton_depth_hint(self):
        """depth_hint controls the length of the single-child spine."""
        tree = MerkleTree.singleton("x", STR_CODEC, depth_hint=3)

        assert tree.depth() == 3
        assert tree.count == 1
        assert tree.flatten() == [("x", sha256_hex('"x"'))]
        assert tree.is_valid()

    def test_singleton_zero_depth_is_leaf(self):
        """depth_hint=0 gives a bare leaf."""
        tree = MerkleTree.singleton(1, INT_CODEC, depth_hint=0)

        assert isinstance(tree.root, Leaf)

    def test_singleton_negative_depth_raises(self):
        """Negative depth hints are rejected."""
        with pytest.raises(ValueError, match="non-negative"):
            MerkleTree.singleton(1, INT_CODEC, depth_hint=-1)

    def test_insert_after_singleton(self):
        """A singleton tree keeps growing and stays valid."""
        tree = MerkleTree.singleton(0, INT_CODEC).insert_all([1, 2, 3, 4])

        assert tree.values() == [0, 1, 2, 3, 4]
        assert tree.count == 5
        assert tree.is_valid()

    def test_from_sequence_equals_insert_fold(self):
        """from_sequence is the same as inserting one value at a time."""
        folded = MerkleTree.initialize(INT_CODEC)
        for v in range(10):
            folded = folded.insert(v)

        assert MerkleTree.from_sequence(range(10), INT_CODEC) == folded

    def test_insert_all_continues_sequence(self):
        """insert_all on an existing tree matches one longer from_sequence."""
        partial = MerkleTree.from_sequence(range(6), INT_CODEC)

        assert partial.insert_all(range(6, 19)) == MerkleTree.from_sequence(range(19), INT_CODEC)

    def test_insert_all_accepts_generators(self):
        """insert_all consumes any iterable once."""
        tree = MerkleTree.initialize(INT_CODEC).insert_all(v * 2 for v in range(4))

        assert tree.values() == [0, 2, 4, 6]


class TestBalance:
    """Tests for depth and count after n insertions."""

    @pytest.mark.parametrize("n", list(range(1, 70)) + [127, 128, 129, 256, 257])
    def test_depth_is_ceil_log2(self, n):
        """After n inserts, depth == ceil(log2(n)) and count == n."""
        tree = make_int_tree(n)

        assert tree.depth() == (n - 1).bit_length()
        assert tree.count == n
        if n == 1:
            assert isinstance(tree.root, Leaf)
        else:
            assert tree.root.count == n

    def test_ceiling_power_of_two(self):
        """ceiling_power_of_two rounds up to the next power of two."""
        assert [ceiling_power_of_two(n) for n in range(0, 10)] == [1, 1, 2, 4, 4, 8, 8, 8, 8, 16]


class TestShape:
    """Tests for deterministic tree shape."""

    def test_three_values_shape(self, three_tree):
        """[40, 41, 42] produces a full left pair and a padded right spine."""
        root = three_tree.root

        assert root.count == 3
        assert root.left.count == 2
        assert root.left.left.value == 40
        assert root.left.right.value == 41
        assert root.right.count == 1
        assert root.right.left.value == 42
        assert root.right.right == EMPTY

    def test_five_values_graft_spine(self):
        """The fifth insert grafts a depth-2 spine next to the full left subtree."""
        root = make_int_tree(5).root

        assert node_shape(root.right) == {
            "count": 1,
            "left": {"count": 1, "left": "leaf", "right": None},
            "right": None,
        }

    def test_seven_values_fill_right_spine(self):
        """Seven inserts fill the right subtree as {2, 1} under the full left four."""
        root = make_int_tree(7).root

        assert root.left.count == 4
        assert node_shape(root.right) == {
            "count": 3,
            "left": {"count": 2, "left": "leaf", "right": "leaf"},
            "right": {"count": 1, "left": "leaf", "right": None},
        }

    @pytest.mark.parametrize("n", [1, 2, 3, 6, 11, 16, 33])
    def test_shape_independent_of_values(self, n):
        """Different values inserted the same number of times give the same shape."""
        ints = make_int_tree(n)
        strs = MerkleTree.from_sequence([f"v{i}" for i in range(n)], STR_CODEC)

        assert node_shape(ints.root) == node_shape(strs.root)

    def test_same_sequence_same_tree(self):
        """Same ordered insertions with the same chain give equal trees."""
        assert make_int_tree(21) == make_int_tree(21)

    def test_order_matters_for_hash(self):
        """Reordering values changes the root hash but not the shape."""
        a = MerkleTree.from_sequence([1, 2, 3], INT_CODEC)
        b = MerkleTree.from_sequence([3, 2, 1], INT_CODEC)

        assert a.root_hash != b.root_hash
        assert node_shape(a.root) == node_shape(b.root)


class TestPadding:
    """Tests for the duplication rule on hashes."""

    def test_three_leaf_root(self, three_tree):
        """Root of [40, 41, 42] is H(H(a+b) + H(c+c))."""
        a, b, c = int_leaf_hashes([40, 41, 42])
        expected = sha256_hex(sha256_hex(a + b) + sha256_hex(c + c))

        assert three_tree.root_hash == expected

    @pytest.mark.parametrize("n", range(1, 41))
    def test_matches_level_by_level_reference(self, n):
        """Root hash equals the flat "duplicate last node" construction."""
        tree = make_int_tree(n)

        assert tree.root_hash == reference_root(int_leaf_hashes(range(n)))

    def test_multi_digest_chain_hashes(self):
        """With two digests every hash is the concatenation of both outputs."""
        chain = DigestChain.of([sha256_hex, blake2b_hex])
        tree = MerkleTree.from_sequence([1, 2], INT_CODEC, chain)
        h1 = sha256_hex("1") + blake2b_hex("1")
        h2 = sha256_hex("2") + blake2b_hex("2")

        assert tree.root.left.hash == h1
        assert tree.root_hash == sha256_hex(h1 + h2) + blake2b_hex(h1 + h2)
        assert len(tree.root_hash) == 64 + 128


class TestPersistence:
    """Tests for immutability and structural sharing."""

    def test_insert_does_not_modify_original(self):
        """The receiver of insert() is unchanged."""
        before = make_int_tree(4)
        snapshot = before.flatten()
        root_hash = before.root_hash

        after = before.insert(99)

        assert before.flatten() == snapshot
        assert before.root_hash == root_hash
        assert after.count == 5

    def test_untouched_subtrees_are_shared(self):
        """Inserting into the right subtree reuses the left subtree object."""
        before = make_int_tree(3)
        after = before.insert(3)

        assert after.root.left is before.root.left

    def test_capacity_graft_keeps_old_root(self):
        """When the tree is full the old root becomes the new left child."""
        before = make_int_tree(4)
        after = before.insert(4)

        assert after.root.left is before.root

    def test_branching_histories(self):
        """Two inserts on the same base give independent trees."""
        base = make_int_tree(5)
        left = base.insert(100)
        right = base.insert(200)

        assert left.values()[-1] == 100
        assert right.values()[-1] == 200
        assert base.count == 5

    def test_tree_is_frozen(self):
        """MerkleTree attributes cannot be reassigned."""
        tree = make_int_tree(2)

        with pytest.raises(AttributeError):
            tree.root = EMPTY


class TestInvariantViolations:
    """Impossible states raise instead of producing a wrong tree."""

    def test_branch_hash_with_empty_left_raises(self):
        """A branch cannot be hashed over an empty left child."""
        with pytest.raises(InvariantViolationException):
            branch_hash(EMPTY, EMPTY, DigestChain.default())

    def test_sibling_graft_over_occupied_slot_raises(self):
        """A right subtree whose count says "left full, right empty" must have an empty right slot."""
        chain = DigestChain.default()
        a, b, c = (make_leaf(v, chain, INT_CODEC) for v in (1, 2, 3))
        pair = Branch(count=2, hash="x", left=a, right=b)
        lying = Branch(count=2, hash="y", left=pair, right=c)
        bogus = Branch(count=6, hash="z", left=make_int_tree(4).root, right=lying)

        with pytest.raises(InvariantViolationException, match="occupied"):
            insert_node(bogus, 4, chain, INT_CODEC)

    def test_inconsistent_counts_raise(self):
        """A hand-built root whose count disagrees with its children is rejected."""
        chain = DigestChain.default()
        a, b, c = (make_leaf(v, chain, INT_CODEC) for v in (1, 2, 3))
        pair = Branch(count=2, hash="x", left=a, right=b)
        bogus = Branch(count=6, hash="y", left=pair, right=c)

        with pytest.raises(InvariantViolationException):
            insert_node(bogus, 4, chain, INT_CODEC)

    def test_build_spine_negative_depth(self):
        """Spines cannot have negative depth."""
        leaf = make_leaf(1, DigestChain.default(), INT_CODEC)

        with pytest.raises(ValueError):
            build_spine(leaf, -2, DigestChain.default())
