"""
Authentication Module
=====================

Bearer tokens naming the pool account a caller acts as.

Usage:
    from shieldpool.auth import create_access_token, decode_token

    token = create_access_token(alice)
    decode_token(token).sub  # alice
"""

from shieldpool.auth.jwt import AccountToken, create_access_token, decode_token

__all__ = [
    "AccountToken",
    "create_access_token",
    "decode_token",
]
