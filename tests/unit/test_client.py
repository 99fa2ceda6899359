"""
Unit tests for client helpers: notes, the off-chain tree and circuit inputs.
"""

import pytest

from shieldpool.client import MerkleTree, Note, build_circuit_input, compute_root, random_field_element
from shieldpool.config import DEFAULT_ZERO_VALUE
from shieldpool.core.field import FIELD_SIZE, hash_left_right, sha256_field_hash


class TestNote:
    """Tests for Note."""

    def test_generate_in_field(self) -> None:
        """Test that generated secrets are field elements."""
        note = Note.generate()
        assert 0 <= note.secret < FIELD_SIZE
        assert 0 <= note.nullifier < FIELD_SIZE
        assert note != Note.generate()

    def test_random_field_element_width(self) -> None:
        """Test 31-byte randomness."""
        assert all(random_field_element() < 2**248 for _ in range(20))

    def test_commitment_and_nullifier_hash(self) -> None:
        """Test derived values."""
        note = Note(secret=3, nullifier=4)
        assert note.commitment == hash_left_right(3, 4)
        assert note.nullifier_hash == sha256_field_hash(4)

    def test_public_view_hides_secrets(self) -> None:
        """Test that only commitment and nullifier hash are shared."""
        view = Note(secret=3, nullifier=4).public_view()
        assert set(view) == {"commitment", "nullifier_hash"}

    def test_rejects_out_of_field(self) -> None:
        """Test construction checks."""
        with pytest.raises(ValueError):
            Note(secret=FIELD_SIZE, nullifier=1)


class TestMerkleTree:
    """Tests for the off-chain MerkleTree."""

    @pytest.fixture
    def tree(self) -> MerkleTree:
        tree = MerkleTree(levels=3, zero_value=DEFAULT_ZERO_VALUE)
        for leaf in (10, 20, 30):
            tree.insert(leaf)
        return tree

    def test_index_of(self, tree: MerkleTree) -> None:
        """Test leaf lookup."""
        assert tree.index_of(20) == 1
        assert tree.index_of(99) == -1
        assert len(tree) == 3
        assert tree.leaves() == [10, 20, 30]

    def test_paths_reach_root(self, tree: MerkleTree) -> None:
        """Test every path folds into the current root."""
        for index, leaf in enumerate(tree.leaves()):
            path = tree.path(index)
            assert len(path.siblings) == tree.levels
            assert compute_root(leaf, path) == tree.root

    def test_path_direction_bits(self, tree: MerkleTree) -> None:
        """Test is_left bits for an odd index."""
        path = tree.path(1)
        assert path.is_left[0] is False
        assert path.siblings[0] == 10

    def test_path_invalid_index(self, tree: MerkleTree) -> None:
        """Test bounds check."""
        with pytest.raises(IndexError):
            tree.path(3)

    def test_full_tree(self) -> None:
        """Test capacity enforcement."""
        tree = MerkleTree(levels=1, zero_value=DEFAULT_ZERO_VALUE)
        tree.insert(1)
        tree.insert(2)
        with pytest.raises(ValueError):
            tree.insert(3)

    def test_serialize(self, tree: MerkleTree) -> None:
        """Test JSON-friendly dump."""
        data = tree.serialize()
        assert data["levels"] == 3
        assert len(data["zeros"]) == 4
        assert data["layers"][0] == [hex(10), hex(20), hex(30)]
        assert data["layers"][3] == [hex(tree.root)]


class TestCircuitInput:
    """Tests for build_circuit_input."""

    def test_fields(self, alice: str, relayer: str) -> None:
        """Test snarkjs input names and encodings."""
        note = Note(secret=3, nullifier=4)
        tree = MerkleTree(levels=2, zero_value=DEFAULT_ZERO_VALUE)
        tree.insert(note.commitment)

        data = build_circuit_input(note, tree.path(0), tree.root, alice, relayer, fee=5)

        assert data["root"] == str(tree.root)
        assert data["receiver"] == str(int(alice, 16))
        assert data["relayer"] == str(int(relayer, 16))
        assert data["nullifierHash"] == str(note.nullifier_hash)
        assert data["commitment"] == str(note.commitment)
        assert data["secretKey"] == "3"
        assert data["nullifier"] == "4"
        assert data["isLeft"] == [1, 1]
        assert len(data["siblings"]) == 2
        assert data["fee"] == "5"
        assert data["refund"] == "0"
