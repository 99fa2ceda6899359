"""
Pool API Routes
===============

API route handlers for the pool service.
"""

from services.pool_api.routes import development, operations, state


__all__ = ["development", "operations", "state"]
