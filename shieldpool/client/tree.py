"""
Off-Chain Merkle Tree
=====================

Full-layer mirror of the pool's membership tree, kept by clients to
produce authentication paths for the withdraw circuit. Must be built
with the same levels, zero value and hasher as the pool, otherwise
its roots diverge from the pool's.
"""

from dataclasses import dataclass

from shieldpool.core.field import Hasher, hash_left_right
from shieldpool.core.merkle import empty_subtree_roots


@dataclass
class MerklePath:
    """Authentication path, leaf level first."""

    siblings: list[int]
    is_left: list[bool]


class MerkleTree:
    """
    Off-chain tree with every layer materialised.

    Example:
        tree = MerkleTree(levels=31, zero_value=DEFAULT_ZERO_VALUE)
        tree.insert(note.commitment)
        path = tree.path(tree.index_of(note.commitment))
    """

    def __init__(self, levels: int, zero_value: int, hasher: Hasher = hash_left_right) -> None:
        self.levels = levels
        self.capacity = 2**levels
        self._hasher = hasher
        self._zeros = empty_subtree_roots(levels, zero_value, hasher)
        self._layers: list[list[int]] = [[] for _ in range(levels + 1)]

    def __len__(self) -> int:
        return len(self._layers[0])

    @property
    def root(self) -> int:
        if not self._layers[0]:
            return self._zeros[self.levels]
        return self._layers[self.levels][0]

    def leaves(self) -> list[int]:
        return list(self._layers[0])

    def insert(self, leaf: int) -> int:
        index = len(self._layers[0])
        if index >= self.capacity:
            raise ValueError("Tree is full")
        self._layers[0].append(leaf)

        for level in range(1, self.levels + 1):
            index >>= 1
            below = self._layers[level - 1]
            right_pos = 2 * index + 1
            right = below[right_pos] if right_pos < len(below) else self._zeros[level - 1]
            node = self._hasher(below[2 * index], right)
            layer = self._layers[level]
            if index < len(layer):
                layer[index] = node
            else:
                layer.append(node)
        return len(self._layers[0]) - 1

    def index_of(self, leaf: int) -> int:
        """Leaf index of ``leaf``, or -1."""
        try:
            return self._layers[0].index(leaf)
        except ValueError:
            return -1

    def path(self, index: int) -> MerklePath:
        if not 0 <= index < len(self._layers[0]):
            raise IndexError("invalid index")

        siblings: list[int] = []
        is_left: list[bool] = []
        for level in range(self.levels):
            layer = self._layers[level]
            if index % 2:
                is_left.append(False)
                siblings.append(layer[index - 1])
            else:
                is_left.append(True)
                siblings.append(layer[index + 1] if index + 1 < len(layer) else self._zeros[level])
            index >>= 1
        return MerklePath(siblings=siblings, is_left=is_left)

    def serialize(self) -> dict:
        """JSON-friendly dump with hex values."""
        return {
            "levels": self.levels,
            "zeros": [hex(z) for z in self._zeros],
            "layers": [[hex(v) for v in layer] for layer in self._layers],
        }


def compute_root(leaf: int, path: MerklePath, hasher: Hasher = hash_left_right) -> int:
    """Fold ``leaf`` up an authentication path."""
    current = leaf
    for sibling, left in zip(path.siblings, path.is_left, strict=True):
        current = hasher(current, sibling) if left else hasher(sibling, current)
    return current
