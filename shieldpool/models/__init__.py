"""
Pool Models
===========

Pydantic models for pool events, receipts and service responses.
"""

from shieldpool.models.common import ErrorResponse, HealthResponse
from shieldpool.models.events import (
    BaseEvent,
    Deposited,
    EventLog,
    OperationReceipt,
    PendingUnwrapCreated,
    PoolEvent,
    PoolEventType,
    UnwrapFailed,
    UnwrapFinalized,
    Withdrawn,
    Wrapped,
)

__all__ = [
    # Common
    "HealthResponse",
    "ErrorResponse",
    # Events
    "PoolEventType",
    "PoolEvent",
    "BaseEvent",
    "Deposited",
    "Wrapped",
    "Withdrawn",
    "PendingUnwrapCreated",
    "UnwrapFinalized",
    "UnwrapFailed",
    "OperationReceipt",
    "EventLog",
]
