"""
Membership History
==================

Incremental Merkle accumulator with a bounded window of historical roots.

Only the right frontier (``filled_subtrees``) is stored; an insertion
recombines the new leaf with that frontier and the precomputed empty
subtree roots, touching ``levels`` nodes. Roots go into a ring buffer of
``root_history_size`` slots, the oldest being overwritten.

The first slot holds the empty-tree root at construction, so a fresh tree
knows exactly one root.

Version: 0.1.0
"""

from shieldpool.core.errors import InvalidFieldElement, StructureFull
from shieldpool.core.field import FIELD_SIZE, Hasher, hash_left_right
from shieldpool.logging import get_logger

logger = get_logger(__name__)

MAX_LEVELS = 32


def empty_subtree_roots(levels: int, zero_value: int, hasher: Hasher) -> list[int]:
    """
    Roots of empty subtrees by height.

    ``zeros[0]`` is the empty leaf, ``zeros[levels]`` the empty-tree root.
    """
    zeros = [zero_value]
    for _ in range(levels):
        zeros.append(hasher(zeros[-1], zeros[-1]))
    return zeros


class MembershipHistory:
    """
    Append-only commitment tree with root history.

    Usage:
        tree = MembershipHistory(levels=20, root_history_size=30)
        index = tree.insert(commitment)
        assert tree.is_known_root(tree.root)
    """

    def __init__(
        self,
        levels: int,
        root_history_size: int,
        zero_value: int,
        hasher: Hasher = hash_left_right,
    ) -> None:
        if not 1 <= levels <= MAX_LEVELS:
            raise ValueError(f"levels must be within [1, {MAX_LEVELS}]")
        if root_history_size < 1:
            raise ValueError("root_history_size must be positive")
        if not 0 <= zero_value < FIELD_SIZE:
            raise ValueError("zero_value must be a field element")

        self.levels = levels
        self.root_history_size = root_history_size
        self.zero_value = zero_value
        self._hasher = hasher

        self._zeros = empty_subtree_roots(levels, zero_value, hasher)
        self._filled_subtrees: list[int] = self._zeros[:levels]
        self._roots: list[int] = [0] * root_history_size
        self._roots[0] = self._zeros[levels]
        self._current_root_index = 0
        self._next_index = 0

    @property
    def capacity(self) -> int:
        return 2**self.levels

    @property
    def next_index(self) -> int:
        """Index the next inserted leaf will receive."""
        return self._next_index

    @property
    def is_full(self) -> bool:
        return self._next_index >= self.capacity

    @property
    def root(self) -> int:
        """Most recent root."""
        return self._roots[self._current_root_index]

    def zeros(self, height: int) -> int:
        """Empty subtree root of the given height."""
        return self._zeros[height]

    def insert(self, leaf: int) -> int:
        """
        Append a leaf and record the new root.

        Args:
            leaf: Field element to insert

        Returns:
            The leaf index assigned to ``leaf``

        Raises:
            StructureFull: All ``2**levels`` leaves are taken
        """
        if not 0 <= leaf < FIELD_SIZE:
            raise InvalidFieldElement("leaf must be a field element")
        index = self._next_index
        if index >= self.capacity:
            raise StructureFull(
                "Merkle tree is full. No more leaves can be added",
                capacity=self.capacity,
            )

        current_index = index
        current_hash = leaf
        for height in range(self.levels):
            if current_index % 2 == 0:
                left, right = current_hash, self._zeros[height]
                self._filled_subtrees[height] = current_hash
            else:
                left, right = self._filled_subtrees[height], current_hash
            current_hash = self._hasher(left, right)
            current_index //= 2

        self._current_root_index = (self._current_root_index + 1) % self.root_history_size
        self._roots[self._current_root_index] = current_hash
        self._next_index = index + 1

        logger.debug("merkle_leaf_inserted", leaf_index=index, root=hex(current_hash))
        return index

    def is_known_root(self, root: int) -> bool:
        """Whether ``root`` is inside the retained history window."""
        if root == 0:
            return False
        i = self._current_root_index
        for _ in range(self.root_history_size):
            if self._roots[i] == root:
                return True
            i = (i - 1) % self.root_history_size
        return False

    def known_roots(self) -> list[int]:
        """Retained roots, newest first."""
        roots = []
        i = self._current_root_index
        for _ in range(self.root_history_size):
            if self._roots[i] != 0:
                roots.append(self._roots[i])
            i = (i - 1) % self.root_history_size
        return roots
