"""
Pool State Routes
=================

Read-only endpoints over pool state and the event log.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from services.pool_api.dependencies import get_engine
from shieldpool.core.field import as_field_element, normalize_address, to_hex32
from shieldpool.engine import ShieldedPoolEngine


router = APIRouter()


# ============================================================================
# Response Models
# ============================================================================


class PoolStateResponse(BaseModel):
    """Current pool state."""

    address: str
    denomination: str
    current_root: str
    next_leaf_index: int
    stats: dict[str, int]


class RootStatusResponse(BaseModel):
    root: str
    known: bool


class NullifierStatusResponse(BaseModel):
    nullifier_hash: str
    spent: bool


class PendingUnwrapResponse(BaseModel):
    """Pending unwrap record; ``owner`` is null once finalized or if never issued."""

    index: int
    owner: str | None
    commitment: str
    amount_handle: str | None


class BalanceResponse(BaseModel):
    account: str
    handle: str | None


class EventsResponse(BaseModel):
    events: list[dict[str, Any]]
    next_sequence: int


# ============================================================================
# State Endpoints
# ============================================================================


@router.get("/state", response_model=PoolStateResponse)
async def get_state(engine: ShieldedPoolEngine = Depends(get_engine)) -> PoolStateResponse:
    """Current root, next leaf index and counters."""
    return PoolStateResponse(
        address=engine.address,
        denomination=str(engine.denomination),
        current_root=to_hex32(engine.current_root),
        next_leaf_index=engine.next_leaf_index,
        stats=engine.get_stats(),
    )


@router.get("/roots/{root}", response_model=RootStatusResponse)
async def get_root_status(
    root: str,
    engine: ShieldedPoolEngine = Depends(get_engine),
) -> RootStatusResponse:
    """Whether ``root`` is inside the root history window."""
    value = as_field_element(root, "root")
    return RootStatusResponse(root=to_hex32(value), known=engine.is_known_root(value))


@router.get("/nullifiers/{nullifier_hash}", response_model=NullifierStatusResponse)
async def get_nullifier_status(
    nullifier_hash: str,
    engine: ShieldedPoolEngine = Depends(get_engine),
) -> NullifierStatusResponse:
    value = as_field_element(nullifier_hash, "nullifier_hash")
    return NullifierStatusResponse(
        nullifier_hash=to_hex32(value),
        spent=engine.is_spent(value),
    )


@router.get("/unwraps/{index}", response_model=PendingUnwrapResponse)
async def get_pending_unwrap(
    index: int,
    engine: ShieldedPoolEngine = Depends(get_engine),
) -> PendingUnwrapResponse:
    record = engine.get_pending_unwrap(index)
    return PendingUnwrapResponse(
        index=record.index,
        owner=record.owner,
        commitment=to_hex32(record.commitment),
        amount_handle=record.amount.handle if record.amount is not None else None,
    )


@router.get("/balances/{account}", response_model=BalanceResponse)
async def get_confidential_balance(
    account: str,
    engine: ShieldedPoolEngine = Depends(get_engine),
) -> BalanceResponse:
    """Opaque balance handle of ``account``; null if it never held one."""
    account = normalize_address(account)
    balance = engine.confidential_balance_of(account)
    return BalanceResponse(account=account, handle=balance.handle if balance else None)


@router.get("/events", response_model=EventsResponse)
async def get_events(
    since: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    engine: ShieldedPoolEngine = Depends(get_engine),
) -> EventsResponse:
    """Pool events in log order, starting at sequence ``since``."""
    events = engine.events(since=since, limit=limit)
    next_sequence = events[-1].sequence + 1 if events else since
    return EventsResponse(
        events=[event.model_dump(mode="json") for event in events],
        next_sequence=next_sequence,
    )
