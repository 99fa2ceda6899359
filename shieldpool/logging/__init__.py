"""
Logging Module
==============

Structured logging using structlog with JSON output for production
and colored console output for development.

Usage:
    from shieldpool.logging import get_logger, setup_logging

    # Setup at application start
    setup_logging()

    # Get logger for a module
    logger = get_logger(__name__)

    # Log with context
    logger.info("deposit_accepted", commitment="0x1f...", leaf_index=3)
"""

from shieldpool.logging.logger import get_logger, operation_context, setup_logging


__all__ = [
    "get_logger",
    "setup_logging",
    "operation_context",
]
