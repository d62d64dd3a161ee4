"""Error kinds surfaced by the route-matrix proxy."""
from __future__ import annotations

from http import HTTPStatus
from typing import Dict, Optional


class RouteMatrixError(RuntimeError):
    """Base class for failures rendered as ``{"error": message}`` responses."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = int(status_code)

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.message}


class BadRequest(RouteMatrixError):
    """Caller input is missing or exceeds a stated limit."""

    status_code = HTTPStatus.BAD_REQUEST


class Unauthorized(RouteMatrixError):
    """Bearer token missing or rejected by the verifier."""

    status_code = HTTPStatus.UNAUTHORIZED


class RateLimited(RouteMatrixError):
    """Raised when the Routes API reports quota exhaustion."""

    status_code = HTTPStatus.TOO_MANY_REQUESTS


class UpstreamError(RouteMatrixError):
    """Non-success status from the Routes API other than 429."""

    def __init__(self, status_code: int, upstream_message: Optional[str] = None) -> None:
        self.upstream_message = upstream_message or "Unknown"
        super().__init__(f"HTTP Error: {status_code} - {self.upstream_message}", status_code)


class InternalError(RouteMatrixError):
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
