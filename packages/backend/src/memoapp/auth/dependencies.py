"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to turn the
request's Authorization header into a verified IdentityClaim. FastAPI
evaluates a dependency once per request and passes the result to the
handler as an ordinary argument — no ambient "current user" lookup.

The header must look like "Bearer <token>". Missing header, missing
scheme, and empty token are logged as distinct reasons, but the client
always just sees 401.
"""

from typing import Optional

import structlog
from fastapi import Depends, Header, HTTPException, Request

from memoapp.auth.password import PasswordHasher
from memoapp.auth.token import DecodeError, IdentityClaim, TokenService

logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "


class Unauthorized(Exception):
    """Identity could not be resolved. reason is for logs only."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


def extract_identity(
    authorization: Optional[str], tokens: TokenService
) -> IdentityClaim:
    """Resolve a raw Authorization header value to an IdentityClaim.

    All token logic (signature, expiry) is delegated to TokenService.
    Raises Unauthorized with reason one of: missing_header,
    missing_scheme, empty_token, invalid_token.
    """
    if authorization is None:
        raise Unauthorized("missing_header")
    if not authorization.startswith(BEARER_PREFIX):
        raise Unauthorized("missing_scheme")

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise Unauthorized("empty_token")

    try:
        return tokens.verify(token)
    except DecodeError:
        raise Unauthorized("invalid_token")


def get_token_service(request: Request) -> TokenService:
    """The process-wide TokenService, built at startup."""
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


async def get_current_user(
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> IdentityClaim:
    """Extract current identity (required — 401 if no valid token)."""
    try:
        return extract_identity(authorization, tokens)
    except Unauthorized as e:
        logger.info("auth.unauthorized", reason=e.reason)
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
