"""
Pool API Dependencies
=====================

FastAPI dependencies resolving the pool built during application startup
and the account the caller is authenticated as.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from shieldpool.auth import decode_token
from shieldpool.bootstrap import DevelopmentPool
from shieldpool.engine import ShieldedPoolEngine
from shieldpool.logging import get_logger


logger = get_logger(__name__)

# Bearer token from the Authorization header; issued by the account's wallet
# service, or by the development token route
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/v1/dev/token",
    auto_error=False,
)


def get_pool(request: Request) -> DevelopmentPool:
    """Pool bundle stored on the application state."""
    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Pool not initialized",
        )
    return pool


def get_engine(request: Request) -> ShieldedPoolEngine:
    return get_pool(request).engine


async def get_current_account(
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> str:
    """
    Account address named by the bearer token.

    Raises:
        HTTPException: 401 if the token is missing or invalid
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if token is None:
        logger.warning("auth_token_missing")
        raise credentials_exception

    token_data = decode_token(token)
    if token_data is None:
        logger.warning("auth_token_invalid")
        raise credentials_exception

    logger.debug("account_authenticated", account=token_data.sub)
    return token_data.sub
