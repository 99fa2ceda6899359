"""
Common Models
=============

Service response models.

Version: 0.1.0
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from shieldpool.core.errors import ShieldedPoolError


class ErrorResponse(BaseModel):
    """Error body returned for rejected pool operations."""

    success: bool = False
    error: str
    error_code: str | None = None
    status_code: int
    details: dict[str, str] | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_error(cls, exc: ShieldedPoolError, status_code: int) -> "ErrorResponse":
        return cls(
            error=str(exc),
            error_code=exc.code,
            status_code=status_code,
            details={k: str(v) for k, v in exc.details.items()} or None,
        )


class HealthResponse(BaseModel):
    """Service health check response."""

    status: str = "healthy"
    service: str
    version: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Component health
    components: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @classmethod
    def from_components(
        cls,
        service: str,
        version: str,
        components: dict[str, dict[str, Any]],
    ) -> "HealthResponse":
        """Healthy only if every component reports healthy."""
        healthy = all(c.get("status") == "healthy" for c in components.values())
        return cls(
            status="healthy" if healthy else "degraded",
            service=service,
            version=version,
            components=components,
        )
