"""SQLAlchemy implementation of the store contracts.

Learn: One implementation serves both SQLite and PostgreSQL — the
dialect comes from the engine URL. Stores are built per request around
the request's AsyncSession (see memoapp.api.deps), like the services.

Email uniqueness is enforced by the users.email UNIQUE constraint. We
never SELECT-then-INSERT: we insert and translate the IntegrityError.
"""

from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from memoapp.db.models import NoteRow, UserRow
from memoapp.domain import Account, Note, epoch_now
from memoapp.repository.base import AccountStore, NoteStore, StoreError

logger = structlog.get_logger()


def is_unique_violation(exc: IntegrityError) -> bool:
    """True for a UNIQUE violation on SQLite or PostgreSQL.

    SQLite: "UNIQUE constraint failed: users.email"
    PostgreSQL: "duplicate key value violates unique constraint ..."
    """
    message = str(exc.orig).lower()
    return "unique" in message or "duplicate key" in message


class SqlAccountStore(AccountStore):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_account(
        self, email: str, password_hash: str
    ) -> Optional[Account]:
        row = UserRow(email=email, password_hash=password_hash)
        self.db.add(row)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if is_unique_violation(e):
                return None
            raise StoreError("account insert failed") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError("account insert failed") from e
        return row.to_domain()

    async def find_account_by_email(self, email: str) -> Optional[Account]:
        try:
            result = await self.db.execute(
                select(UserRow).where(UserRow.email == email)
            )
        except SQLAlchemyError as e:
            raise StoreError("account lookup failed") from e
        row = result.scalars().first()
        return row.to_domain() if row else None


class SqlNoteStore(NoteStore):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _commit(self, action: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.warning("store.commit_failed", action=action, error=str(e))
            raise StoreError(f"note {action} failed") from e

    async def _owned_row(self, note_id: int, author_id: int) -> Optional[NoteRow]:
        try:
            result = await self.db.execute(
                select(NoteRow).where(
                    NoteRow.id == note_id, NoteRow.user_id == author_id
                )
            )
        except SQLAlchemyError as e:
            raise StoreError("note lookup failed") from e
        return result.scalars().first()

    async def create_note(self, author_id: int, title: str, content: str) -> Note:
        now = epoch_now()
        row = NoteRow(
            user_id=author_id,
            title=title,
            content=content,
            created_at=now,
            updated_at=now,
        )
        self.db.add(row)
        await self._commit("insert")
        return row.to_domain()

    async def find_note(self, note_id: int) -> Optional[Note]:
        try:
            row = await self.db.get(NoteRow, note_id)
        except SQLAlchemyError as e:
            raise StoreError("note lookup failed") from e
        return row.to_domain() if row else None

    async def update_note(
        self,
        note_id: int,
        author_id: int,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Optional[Note]:
        row = await self._owned_row(note_id, author_id)
        if row is None:
            return None
        if title is not None:
            row.title = title
        if content is not None:
            row.content = content
        row.updated_at = epoch_now()
        await self._commit("update")
        return row.to_domain()

    async def delete_note(self, note_id: int, author_id: int) -> bool:
        row = await self._owned_row(note_id, author_id)
        if row is None:
            return False
        await self.db.delete(row)
        await self._commit("delete")
        return True

    async def list_notes(self, author_id: int) -> list[Note]:
        try:
            result = await self.db.execute(
                select(NoteRow)
                .where(NoteRow.user_id == author_id)
                .order_by(NoteRow.created_at.desc(), NoteRow.id.desc())
            )
        except SQLAlchemyError as e:
            raise StoreError("note listing failed") from e
        return [row.to_domain() for row in result.scalars().all()]
