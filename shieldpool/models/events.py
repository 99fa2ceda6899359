"""
Pool Events
===========

Observable effects of pool operations, for external indexers.

Each operation returns its effects in an ``OperationReceipt``; the
engine also appends them to an ``EventLog``. Wrap and withdraw emit
distinct events.

Version: 0.1.0
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field


class PoolEventType(str, Enum):
    """Types of pool events."""

    DEPOSITED = "deposited"
    WRAPPED = "wrapped"
    WITHDRAWN = "withdrawn"
    PENDING_UNWRAP = "pending_unwrap"
    UNWRAP_FINALIZED = "unwrap_finalized"
    UNWRAP_FAILED = "unwrap_failed"


class BaseEvent(BaseModel):
    """Fields common to all events."""

    sequence: int = Field(default=-1, description="Position in the event log")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Deposited(BaseEvent):
    type: Literal[PoolEventType.DEPOSITED] = PoolEventType.DEPOSITED
    commitment: int
    leaf_index: int


class Wrapped(BaseEvent):
    type: Literal[PoolEventType.WRAPPED] = PoolEventType.WRAPPED
    recipient: str
    nullifier_hash: int
    relayer: str
    fee: int


class Withdrawn(BaseEvent):
    type: Literal[PoolEventType.WITHDRAWN] = PoolEventType.WITHDRAWN
    recipient: str
    nullifier_hash: int
    relayer: str
    fee: int


class PendingUnwrapCreated(BaseEvent):
    type: Literal[PoolEventType.PENDING_UNWRAP] = PoolEventType.PENDING_UNWRAP
    owner: str
    commitment: int
    amount_handle: str
    index: int


class UnwrapFinalized(BaseEvent):
    type: Literal[PoolEventType.UNWRAP_FINALIZED] = PoolEventType.UNWRAP_FINALIZED
    index: int
    owner: str
    commitment: int
    leaf_index: int


class UnwrapFailed(BaseEvent):
    type: Literal[PoolEventType.UNWRAP_FAILED] = PoolEventType.UNWRAP_FAILED
    index: int
    owner: str
    commitment: int


PoolEvent = Annotated[
    Deposited | Wrapped | Withdrawn | PendingUnwrapCreated | UnwrapFinalized | UnwrapFailed,
    Field(discriminator="type"),
]


class OperationReceipt(BaseModel):
    """Result of one committed pool operation."""

    operation: str
    effects: list[PoolEvent] = Field(default_factory=list)
    leaf_index: int | None = None
    unwrap_index: int | None = None
    root: int | None = None


class EventLog:
    """Append-only, ordered event store."""

    def __init__(self) -> None:
        self._events: list[BaseEvent] = []

    def __len__(self) -> int:
        return len(self._events)

    def append(self, event: BaseEvent) -> BaseEvent:
        event.sequence = len(self._events)
        self._events.append(event)
        return event

    def since(self, sequence: int = 0, limit: int | None = None) -> list[BaseEvent]:
        """Events with ``sequence >= sequence``, oldest first."""
        events = self._events[max(sequence, 0):]
        return events[:limit] if limit is not None else events
