"""
SHIELDPOOL Services
===================

Network services exposing the shielded pool.

Services:
- pool_api: HTTP surface for pool operations, state queries and events
"""

__all__ = [
    "pool_api",
]
