"""Auth API — signup, login, current identity.

Learn: Routes for account authentication:
- POST /auth/signup → create a new account
- POST /auth/login → email/password → JWT bearer token
- GET /auth/me → the identity carried by the presented token

Routes only map outcomes to status codes. Validation, hashing and the
uniqueness decision all happen in AuthService.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException

from memoapp.api.deps import get_auth_service
from memoapp.auth.dependencies import get_current_user, get_token_service
from memoapp.auth.password import HashFailureError
from memoapp.auth.token import EncodeError, IdentityClaim, TokenService
from memoapp.repository.base import StoreError
from memoapp.schemas.auth import (
    AccountRead,
    IdentityRead,
    LoginRequest,
    SignupRequest,
    TokenResponse,
)
from memoapp.services.auth_service import (
    AuthService,
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidPasswordError,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/auth")


# ─── Signup ──────────────────────────────────────────────


@router.post("/signup", response_model=AccountRead, status_code=201)
async def signup(body: SignupRequest, svc: AuthService = Depends(get_auth_service)):
    """Create a new account."""
    try:
        account = await svc.signup(body.email, body.password)
    except (InvalidEmailError, InvalidPasswordError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (HashFailureError, StoreError):
        logger.exception("auth.signup_error")
        raise HTTPException(status_code=500, detail="Internal error")

    if account is None:
        raise HTTPException(status_code=409, detail="Email already registered")
    return account


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    svc: AuthService = Depends(get_auth_service),
    tokens: TokenService = Depends(get_token_service),
):
    """Login with email and password → JWT bearer token."""
    try:
        account = await svc.login(body.email, body.password)
        token = tokens.generate(account.id)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except (StoreError, EncodeError):
        logger.exception("auth.login_error")
        raise HTTPException(status_code=500, detail="Internal error")

    return TokenResponse(token=token, expires_in=tokens.ttl_seconds)


# ─── Current identity ───────────────────────────────────


@router.get("/me", response_model=IdentityRead)
async def get_me(identity: IdentityClaim = Depends(get_current_user)):
    """Return the identity the bearer token resolves to."""
    return IdentityRead(
        user_id=identity.sub,
        issued_at=identity.iat,
        expires_at=identity.exp,
    )
