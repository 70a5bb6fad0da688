"""Auth service — signup and login orchestration.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the store. The service only
knows the AccountStore interface, never a concrete backend, so tests
run it against the in-memory store and production against SQL.

Ordering in signup matters: the cheap policy checks run first, so a
malformed email never costs an Argon2 hash or a database round trip.
"""

import asyncio
from typing import Optional

import structlog

from memoapp.auth.password import PasswordHasher
from memoapp.auth.policy import (
    is_utf8_encodable,
    validate_email,
    validate_password,
)
from memoapp.domain import Account
from memoapp.repository.base import AccountStore

logger = structlog.get_logger()


class AuthServiceError(Exception):
    """Base class for caller-facing signup/login failures."""


class InvalidEmailError(AuthServiceError):
    """Email failed the syntactic policy. Caller-fixable."""


class InvalidPasswordError(AuthServiceError):
    """Password failed the strength policy. Caller-fixable."""


class InvalidCredentialsError(AuthServiceError):
    """Login failed.

    Raised for an unknown email AND for a wrong password (or a corrupt
    stored hash), always with the same message, so the error alone
    never reveals whether an account exists.
    """

    def __init__(self):
        super().__init__("Invalid credentials")


class AuthService:
    """Business logic for account signup and login.

    Besides the errors above, signup can raise HashFailureError (from
    the hasher) and both methods can raise StoreError (from the store).
    Neither is retried here.
    """

    def __init__(self, store: AccountStore, hasher: PasswordHasher):
        self.store = store
        self.hasher = hasher

    async def signup(self, email: str, password: str) -> Optional[Account]:
        """Create an account.

        Returns the new Account, or None if the email is already taken.
        There is deliberately no "does this email exist?" pre-check:
        check-then-insert races between concurrent signups. The store's
        atomic insert decides.
        """
        if not validate_email(email):
            raise InvalidEmailError("Invalid email format")
        if not validate_password(password):
            raise InvalidPasswordError(
                "Password must be at least 8 characters and contain "
                "a letter and a digit"
            )

        password_hash = await asyncio.to_thread(self.hasher.hash, password)

        account = await self.store.create_account(email, password_hash)
        if account is None:
            logger.info("auth.signup_conflict")
            return None

        logger.info("auth.signup", account_id=account.id)
        return account

    async def login(self, email: str, password: str) -> Account:
        """Check credentials and return the matching account. Read-only.

        An unknown email still costs one Argon2 verify, so response time
        doesn't reveal whether the account exists either.
        """
        # An unencodable email can never have been stored.
        account = None
        if is_utf8_encodable(email):
            account = await self.store.find_account_by_email(email)
        if account is None:
            await asyncio.to_thread(self.hasher.verify_dummy, password)
            logger.info("auth.login_failed", reason="unknown_email")
            raise InvalidCredentialsError()

        ok = await asyncio.to_thread(
            self.hasher.verify, password, account.password_hash
        )
        if not ok:
            logger.info(
                "auth.login_failed", reason="bad_password", account_id=account.id
            )
            raise InvalidCredentialsError()

        logger.info("auth.login", account_id=account.id)
        return account
