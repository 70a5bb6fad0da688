"""Pydantic schemas for signup, login, and identity.

Learn: Request bodies are NOT validated for email/password shape here.
That policy belongs to the auth core (memoapp.auth.policy) so it applies
no matter which entry point calls AuthService.
"""

from pydantic import BaseModel


class SignupRequest(BaseModel):
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class AccountRead(BaseModel):
    """Public view of an account — never includes the password hash."""
    id: int
    email: str
    created_at: int

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int


class IdentityRead(BaseModel):
    user_id: int
    issued_at: int
    expires_at: int
