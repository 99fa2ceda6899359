"""
Account Tokens
==============

Bearer tokens binding an API caller to a pool account.

The subject of a token is the account address the caller acts as:
depositor for deposits, balance owner for unwraps.

Version: 0.1.0
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from pydantic import BaseModel, Field

from shieldpool.config import settings
from shieldpool.core.errors import InvalidFieldElement
from shieldpool.core.field import normalize_address
from shieldpool.logging import get_logger


logger = get_logger(__name__)


class AccountToken(BaseModel):
    """Decoded account token."""

    sub: str = Field(..., description="Account address")
    exp: datetime = Field(..., description="Expiration time")
    iat: datetime = Field(default_factory=lambda: datetime.now(UTC), description="Issued at")


def create_access_token(account: str, expires_delta: timedelta | None = None) -> str:
    """
    Issue a token for ``account``.

    Args:
        account: 0x-prefixed 20-byte address
        expires_delta: Custom lifetime (default from settings)

    Returns:
        str: Encoded JWT
    """
    account = normalize_address(account)
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt.access_token_expire_minutes))

    encoded = jwt.encode(
        {"sub": account, "exp": expire, "iat": now},
        settings.jwt.secret_key.get_secret_value(),
        algorithm=settings.jwt.algorithm,
    )

    logger.debug("account_token_created", account=account, expires_at=expire.isoformat())
    return encoded


def decode_token(token: str) -> AccountToken | None:
    """
    Decode and validate an account token.

    Returns:
        AccountToken, or None if the token is invalid, expired or names
        something that is not an address
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt.secret_key.get_secret_value(),
            algorithms=[settings.jwt.algorithm],
        )
        return AccountToken(
            sub=normalize_address(payload["sub"]),
            exp=datetime.fromtimestamp(payload["exp"], tz=UTC),
            iat=datetime.fromtimestamp(payload.get("iat", 0), tz=UTC),
        )
    except (JWTError, KeyError, InvalidFieldElement) as e:
        logger.warning("token_decode_failed", error=str(e))
        return None
