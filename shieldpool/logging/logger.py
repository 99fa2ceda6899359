"""
Logger Implementation
=====================

structlog configuration for the pool and its services.

Every entry carries the service name, an ISO timestamp and, inside a pool
operation, the operation name. Note secrets, nullifiers and key material
never reach the output; their hashes do.

Version: 0.1.0
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger


if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


REDACTED = "***REDACTED***"

# Substrings of keys whose values are secret
SENSITIVE_KEYS = frozenset(
    {
        "secret",
        "nullifier",
        "signing_key",
        "private_key",
        "password",
        "token",
        "authorization",
    }
)

# Libraries that log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio", "uvicorn.access")


def _is_sensitive(key: str) -> bool:
    key = key.lower()
    if key.endswith("_hash"):
        return False
    return any(s in key for s in SENSITIVE_KEYS)


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: REDACTED if _is_sensitive(k) else _redact(v) for k, v in value.items()}
    return value


def _censor_secrets(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Replace secret values, including inside nested dicts."""
    return _redact(event_dict)


def _hex_bytes(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Render raw byte payloads (cleartexts, attestations) as hex."""
    for key, value in event_dict.items():
        if isinstance(value, bytes | bytearray):
            event_dict[key] = "0x" + bytes(value).hex()
    return event_dict


def _renderer(json_logs: bool) -> tuple[Processor, Processor]:
    """(exception processor, final renderer) for the output mode."""
    if json_logs:
        return structlog.processors.format_exc_info, structlog.processors.JSONRenderer()
    return structlog.dev.set_exc_info, structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=10),
    )


def setup_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    service_name: str = "shieldpool",
) -> None:
    """
    Configure structlog and route stdlib logging through it.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: JSON lines (production) instead of colored console output
        service_name: Value of the ``service`` key on every entry
    """
    level = getattr(logging, log_level.upper())
    exc_processor, renderer = _renderer(json_logs)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        _hex_bytes,
        _censor_secrets,
        structlog.processors.StackInfoRenderer(),
        exc_processor,
    ]

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name)


def get_logger(name: str | None = None) -> "BoundLogger":
    """Structured logger, typically ``get_logger(__name__)``."""
    return structlog.stdlib.get_logger(name)


@contextmanager
def operation_context(operation: str, **fields: Any) -> Iterator[None]:
    """
    Tag every entry logged inside the block with ``operation`` and ``fields``.

    Example:
        with operation_context("withdraw"):
            logger.info("withdraw_accepted")  # includes operation="withdraw"
    """
    with structlog.contextvars.bound_contextvars(operation=operation, **fields):
        yield
