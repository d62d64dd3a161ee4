"""Bearer-token gating for API routes.

Token verification is delegated to the callable stored in
``app.config["AUTH_VERIFIER"]``; it receives the raw token and returns the
decoded claims or ``None``.
"""
from __future__ import annotations

import hmac
import logging
from functools import wraps
from typing import Any, Callable, Dict, Optional

from flask import Request, current_app, request

from .errors import Unauthorized

BEARER_PREFIX = "Bearer "

Claims = Dict[str, Any]
TokenVerifier = Callable[[str], Optional[Claims]]

logger = logging.getLogger(__name__)


def extract_bearer_token(header: Optional[str]) -> Optional[str]:
    if not header or not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):].strip()
    return token or None


def shared_token_verifier(expected: str) -> TokenVerifier:
    """Verifier accepting exactly ``expected``; used when no identity provider is wired."""

    def verify(token: str) -> Optional[Claims]:
        if expected and hmac.compare_digest(token, expected):
            return {"uid": "service", "admin": False}
        return None

    return verify


def verify_auth_token_with_claims(req: Request) -> Optional[Claims]:
    token = extract_bearer_token(req.headers.get("Authorization"))
    if token is None:
        logger.warning("Missing or invalid Authorization header")
        return None

    verifier: Optional[TokenVerifier] = current_app.config.get("AUTH_VERIFIER")
    if verifier is None:
        return None
    try:
        return verifier(token)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Token verification failed")
        return None


def verify_auth_token(req: Request) -> Optional[str]:
    """Return the verified user id, or ``None`` when the token is missing or rejected."""
    claims = verify_auth_token_with_claims(req)
    if not claims:
        return None
    uid = claims.get("uid")
    return str(uid) if uid else None


def is_admin(req: Request) -> bool:
    claims = verify_auth_token_with_claims(req)
    return bool(claims) and claims.get("admin") is True


def require_auth(view):
    """Reject the request with 401 unless ``AUTH_REQUIRED`` is off or the token verifies."""

    @wraps(view)
    def decorated_function(*args, **kwargs):
        if current_app.config.get("AUTH_REQUIRED"):
            if verify_auth_token(request) is None:
                raise Unauthorized("Unauthorized")
        return view(*args, **kwargs)

    return decorated_function
