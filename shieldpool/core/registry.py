"""
Write-Once Registries
=====================

Commitment and nullifier sets. Values are only ever added; a second
insertion of the same value is rejected.
"""

from collections.abc import Iterator

from shieldpool.core.errors import AlreadyPresent, AlreadySpent, DuplicateCommitment


class WriteOnceRegistry:
    """Append-only membership set of field elements."""

    duplicate_error: type[AlreadyPresent] = AlreadyPresent

    def __init__(self) -> None:
        self._members: set[int] = set()

    def __contains__(self, value: object) -> bool:
        return value in self._members

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[int]:
        return iter(self._members)

    def contains(self, value: int) -> bool:
        return value in self._members

    def require_absent(self, value: int) -> None:
        """Raise the registry's duplicate error if ``value`` is present."""
        if value in self._members:
            raise self.duplicate_error(value=hex(value))

    def insert(self, value: int) -> None:
        self.require_absent(value)
        self._members.add(value)


class CommitmentRegistry(WriteOnceRegistry):
    """Commitments accepted by deposit or reserved by unwrap."""

    duplicate_error = DuplicateCommitment


class NullifierRegistry(WriteOnceRegistry):
    """Spent nullifier hashes, shared by wrap and withdraw."""

    duplicate_error = AlreadySpent

    def is_spent(self, nullifier_hash: int) -> bool:
        return nullifier_hash in self._members
