"""
Pending Disclosure Registry
===========================

Holds unwraps between ``begin_unwrap`` and ``finalize_unwrap``. A record
is created once, finalized once, and deleted on finalization. Indices
increase monotonically from 0 and are never reused.

Version: 0.1.0
"""

from pydantic import BaseModel

from shieldpool.core.errors import AlreadyProcessed, NotFound
from shieldpool.ledger.arithmetic import OpaqueAmount


class PendingUnwrap(BaseModel):
    """An unwrap awaiting disclosure of its transferred amount."""

    index: int
    owner: str | None = None
    commitment: int = 0
    amount: OpaqueAmount | None = None

    @property
    def is_empty(self) -> bool:
        """True for the zero record returned for unknown or finalized indices."""
        return self.owner is None

    @classmethod
    def empty(cls, index: int) -> "PendingUnwrap":
        return cls(index=index)


class PendingDisclosureRegistry:
    """Index -> live pending unwrap."""

    def __init__(self) -> None:
        self._records: dict[int, PendingUnwrap] = {}
        self._finalized: set[int] = set()
        self._next_index = 0

    def __len__(self) -> int:
        return len(self._records)

    @property
    def next_index(self) -> int:
        return self._next_index

    def create(self, owner: str, commitment: int, amount: OpaqueAmount) -> PendingUnwrap:
        record = PendingUnwrap(
            index=self._next_index,
            owner=owner,
            commitment=commitment,
            amount=amount,
        )
        self._records[record.index] = record
        self._next_index += 1
        return record

    def get(self, index: int) -> PendingUnwrap:
        """Live record, or the empty record."""
        return self._records.get(index) or PendingUnwrap.empty(index)

    def require_live(self, index: int) -> PendingUnwrap:
        """
        Return the live record at ``index``.

        Raises:
            AlreadyProcessed: The record was finalized earlier
            NotFound: No record was ever created under ``index``
        """
        record = self._records.get(index)
        if record is not None:
            return record
        if index in self._finalized:
            raise AlreadyProcessed(f"Unwrap {index} has already been finalized", index=index)
        raise NotFound(f"No pending unwrap with index {index}", index=index)

    def complete(self, index: int) -> PendingUnwrap:
        """Delete a live record. Terminal for both outcomes."""
        record = self.require_live(index)
        del self._records[index]
        self._finalized.add(index)
        return record
