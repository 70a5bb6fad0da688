"""Per-request store and service wiring.

Learn: With MEMO_STORE_BACKEND=sql (the default) every request gets
stores wrapped around its own AsyncSession. With the in-memory backend
create_app() puts shared store instances on app.state and those are
handed out instead. Either way the services only see the ABCs.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from memoapp.auth.dependencies import get_password_hasher
from memoapp.auth.password import PasswordHasher
from memoapp.db.engine import get_db
from memoapp.repository.base import AccountStore, NoteStore
from memoapp.repository.sql import SqlAccountStore, SqlNoteStore
from memoapp.services.auth_service import AuthService
from memoapp.services.note_service import NoteService


def get_account_store(
    request: Request, db: AsyncSession = Depends(get_db)
) -> AccountStore:
    store = getattr(request.app.state, "account_store", None)
    return store if store is not None else SqlAccountStore(db)


def get_note_store(
    request: Request, db: AsyncSession = Depends(get_db)
) -> NoteStore:
    store = getattr(request.app.state, "note_store", None)
    return store if store is not None else SqlNoteStore(db)


def get_auth_service(
    store: AccountStore = Depends(get_account_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> AuthService:
    return AuthService(store, hasher)


def get_note_service(store: NoteStore = Depends(get_note_store)) -> NoteService:
    return NoteService(store)
