"""
Pool Operation Routes
=====================

API endpoints for deposit, withdraw, wrap, unwrap and unwrap finalization.

Field elements are accepted as decimal or ``0x`` hex strings. Pool errors
propagate to the application error handler. Deposit and unwrap act for the
account named by the bearer token; withdraw, wrap and finalization are
authorized by their proofs.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator

from services.pool_api.dependencies import get_current_account, get_engine
from shieldpool.core.errors import AccessDenied
from shieldpool.core.field import normalize_address, to_hex32
from shieldpool.engine import ShieldedPoolEngine
from shieldpool.logging import get_logger
from shieldpool.models.events import OperationReceipt
from shieldpool.zk.models import ZKProof


logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class DepositRequest(BaseModel):
    """Request to deposit one denomination against a note commitment."""

    commitment: str = Field(..., description="Note commitment (field element)")
    depositor: str | None = Field(
        default=None,
        description="Account the asset is pulled from; must be the caller if given",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "commitment": "0x0b5d0a7e2f3a1c0d9e8f7a6b5c4d3e2f1a0b9c8d7e6f5a4b3c2d1e0f9a8b7c6d",
                }
            ]
        }
    }


class ClaimRequest(BaseModel):
    """Request to wrap or withdraw a note with a membership proof."""

    proof: ZKProof
    root: str = Field(..., description="Merkle root the proof was built against")
    recipient: str = Field(..., description="Beneficiary address")
    nullifier_hash: str = Field(..., description="Hash of the note nullifier")
    relayer: str = Field(..., description="Relayer address bound into the proof")
    fee: str = Field(default="0", description="Relayer fee bound into the proof")
    refund: str = Field(default="0", description="Refund bound into the proof")


class UnwrapRequest(BaseModel):
    """Request to convert one denomination of confidential balance into a note."""

    owner: str | None = Field(
        default=None,
        description="Confidential balance holder; must be the caller if given",
    )
    new_commitment: str = Field(..., description="Commitment of the note to create")


class FinalizeUnwrapRequest(BaseModel):
    """Disclosed amount of a pending unwrap and its attestation."""

    clear_amount: str = Field(..., description="32-byte big-endian cleartext, hex")
    disclosure_proof: str = Field(..., description="Oracle attestation, hex")

    @field_validator("clear_amount", "disclosure_proof")
    @classmethod
    def must_be_hex(cls, v: str) -> str:
        body = v.removeprefix("0x")
        bytes.fromhex(body)
        return body

    def clear_bytes(self) -> bytes:
        return bytes.fromhex(self.clear_amount)

    def proof_bytes(self) -> bytes:
        return bytes.fromhex(self.disclosure_proof)


class OperationResponse(BaseModel):
    """Committed operation and its effects."""

    success: bool = True
    operation: str
    leaf_index: int | None = None
    unwrap_index: int | None = None
    root: str | None = None
    effects: list[dict[str, Any]]

    @classmethod
    def from_receipt(cls, receipt: OperationReceipt) -> "OperationResponse":
        return cls(
            operation=receipt.operation,
            leaf_index=receipt.leaf_index,
            unwrap_index=receipt.unwrap_index,
            root=to_hex32(receipt.root) if receipt.root is not None else None,
            effects=[effect.model_dump(mode="json") for effect in receipt.effects],
        )


# ============================================================================
# Note Endpoints
# ============================================================================


def acting_as(account: str, claimed: str | None, role: str) -> str:
    """The authenticated account, refusing requests on behalf of another."""
    if claimed is not None and normalize_address(claimed) != account:
        raise AccessDenied(f"Caller {account} cannot act as {role} {claimed}", account=account)
    return account


@router.post("/deposit", response_model=OperationResponse)
async def deposit(
    request: DepositRequest,
    account: Annotated[str, Depends(get_current_account)],
    engine: ShieldedPoolEngine = Depends(get_engine),
) -> OperationResponse:
    """
    Deposit one denomination of the external asset.

    The commitment becomes the next leaf of the membership tree.
    """
    depositor = acting_as(account, request.depositor, "depositor")
    logger.info("deposit_requested", depositor=depositor)
    receipt = engine.deposit(request.commitment, depositor=depositor)
    return OperationResponse.from_receipt(receipt)


@router.post("/withdraw", response_model=OperationResponse)
async def withdraw(
    request: ClaimRequest,
    engine: ShieldedPoolEngine = Depends(get_engine),
) -> OperationResponse:
    """Spend a note and release the external asset to the recipient."""
    logger.info("withdraw_requested", recipient=request.recipient)
    receipt = engine.withdraw(
        request.proof,
        root=request.root,
        recipient=request.recipient,
        nullifier_hash=request.nullifier_hash,
        relayer=request.relayer,
        fee=request.fee,
        refund=request.refund,
    )
    return OperationResponse.from_receipt(receipt)


@router.post("/wrap", response_model=OperationResponse)
async def wrap(
    request: ClaimRequest,
    engine: ShieldedPoolEngine = Depends(get_engine),
) -> OperationResponse:
    """Spend a note into the recipient's confidential balance."""
    logger.info("wrap_requested", recipient=request.recipient)
    receipt = engine.wrap(
        request.proof,
        root=request.root,
        recipient=request.recipient,
        nullifier_hash=request.nullifier_hash,
        relayer=request.relayer,
        fee=request.fee,
        refund=request.refund,
    )
    return OperationResponse.from_receipt(receipt)


# ============================================================================
# Unwrap Endpoints
# ============================================================================


@router.post("/unwrap", response_model=OperationResponse)
async def unwrap(
    request: UnwrapRequest,
    account: Annotated[str, Depends(get_current_account)],
    engine: ShieldedPoolEngine = Depends(get_engine),
) -> OperationResponse:
    """
    Begin an unwrap.

    Returns the pending index to finalize once the moved amount has been
    disclosed.
    """
    owner = acting_as(account, request.owner, "unwrap owner")
    logger.info("unwrap_requested", owner=owner)
    receipt = engine.unwrap(owner, request.new_commitment)
    return OperationResponse.from_receipt(receipt)


@router.post("/unwrap/{index}/finalize", response_model=OperationResponse)
async def finalize_unwrap(
    index: int,
    request: FinalizeUnwrapRequest,
    engine: ShieldedPoolEngine = Depends(get_engine),
) -> OperationResponse:
    """Settle a pending unwrap from its disclosed amount."""
    logger.info("finalize_unwrap_requested", index=index)
    receipt = engine.finalize_unwrap(
        index,
        clear_amount=request.clear_bytes(),
        disclosure_proof=request.proof_bytes(),
    )
    return OperationResponse.from_receipt(receipt)
