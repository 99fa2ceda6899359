"""
Development Routes
==================

Helpers for local pools backed by in-memory custody and the plaintext
decryption oracle. Not mounted in production.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from services.pool_api.dependencies import get_pool
from shieldpool.auth import create_access_token
from shieldpool.bootstrap import DevelopmentPool
from shieldpool.config import settings
from shieldpool.core.errors import NotFound
from shieldpool.core.field import normalize_address
from shieldpool.logging import get_logger


logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class FaucetRequest(BaseModel):
    """Request to mint external test asset."""

    account: str
    amount: int = Field(..., ge=0)


class FaucetResponse(BaseModel):
    account: str
    balance: str


class TokenRequest(BaseModel):
    account: str


class TokenResponse(BaseModel):
    """Bearer token for an account."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Token lifetime in seconds")


class DisclosureResponse(BaseModel):
    """Oracle answer for a pending unwrap, ready for finalization."""

    index: int
    clear_amount: str
    disclosure_proof: str


# ============================================================================
# Development Endpoints
# ============================================================================


@router.post("/faucet", response_model=FaucetResponse)
async def faucet(
    request: FaucetRequest,
    pool: DevelopmentPool = Depends(get_pool),
) -> FaucetResponse:
    """Credit external asset to an account in the mock custody."""
    account = normalize_address(request.account)
    pool.custody.mint(account, request.amount)
    logger.info("faucet_minted", account=account, amount=request.amount)
    return FaucetResponse(account=account, balance=str(pool.custody.balance_of(account)))


@router.post("/token", response_model=TokenResponse)
async def issue_token(request: TokenRequest) -> TokenResponse:
    """Issue a bearer token for any account, without credentials."""
    account = normalize_address(request.account)
    logger.info("dev_token_issued", account=account)
    return TokenResponse(
        access_token=create_access_token(account),
        expires_in=settings.jwt.access_token_expire_minutes * 60,
    )


@router.get("/unwraps/{index}/disclosure", response_model=DisclosureResponse)
async def disclose_unwrap(
    index: int,
    pool: DevelopmentPool = Depends(get_pool),
) -> DisclosureResponse:
    """Ask the decryption oracle for the amount moved by a pending unwrap."""
    record = pool.engine.get_pending_unwrap(index)
    if record.is_empty or record.amount is None:
        raise NotFound(f"No pending unwrap with index {index}", index=index)

    clear_bytes, proof = pool.oracle.decrypt(record.amount)
    return DisclosureResponse(
        index=index,
        clear_amount="0x" + clear_bytes.hex(),
        disclosure_proof="0x" + proof.hex(),
    )
