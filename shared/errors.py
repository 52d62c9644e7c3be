"""
Shared error handling for the Pokedex Access Layer.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class AccessLayerException(Exception):
    """Base exception for Access Layer services."""

    status_code = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class NotFoundError(AccessLayerException):
    """Requested record has no catalog entry and no fallback locator."""

    status_code = 404

    def __init__(self, message: str = "Not found", details: Optional[Dict[str, Any]] = None):
        super().__init__("NOT_FOUND", message, details)


class UpstreamError(AccessLayerException):
    """Errors raised while talking to an upstream service."""

    status_code = 502
    retryable = False

    def __init__(
        self,
        service: str,
        message: str = "Upstream service error",
        *,
        code: str = "UPSTREAM_ERROR",
        status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.service = service
        self.status = status
        details = dict(details or {})
        if status is not None:
            details.setdefault("status_code", status)
        super().__init__(code, f"{service}: {message}", details)


class TransientUpstreamError(UpstreamError):
    """5xx-class or transport failure; safe to retry."""

    status_code = 503
    retryable = True

    def __init__(self, service: str, message: str = "Upstream temporarily unavailable", **kwargs):
        super().__init__(service, message, code="UPSTREAM_UNAVAILABLE", **kwargs)


class PermanentUpstreamError(UpstreamError):
    """4xx-class or malformed response; not retried."""

    status_code = 502

    def __init__(self, service: str, message: str = "Upstream rejected request", **kwargs):
        super().__init__(service, message, code="UPSTREAM_REJECTED", **kwargs)

    @property
    def is_not_found(self) -> bool:
        return self.status == 404
