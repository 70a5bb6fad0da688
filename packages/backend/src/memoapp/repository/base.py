"""Store contracts consumed by the service layer.

Learn: These are abstract base classes. Backends are pluggable: a
backend must enforce email uniqueness atomically
(a UNIQUE constraint, or an equivalent single-step check-and-insert)
and report a duplicate as None, never as an exception. Concurrent
signups with the same email rely on that, not on any lock in the
service.
"""

from abc import ABC, abstractmethod
from typing import Optional

from memoapp.domain import Account, Note


class StoreError(Exception):
    """Storage failed for a reason other than a uniqueness conflict.

    The core never interprets the underlying cause; it is kept as
    __cause__ for logging.
    """


class AccountStore(ABC):
    """Durable, uniqueness-enforcing account storage."""

    @abstractmethod
    async def create_account(
        self, email: str, password_hash: str
    ) -> Optional[Account]:
        """Insert an account.

        Returns the created Account, or None if the email is taken.
        Raises StoreError for anything else.
        """

    @abstractmethod
    async def find_account_by_email(self, email: str) -> Optional[Account]:
        """Exact (case-sensitive) lookup. None if absent."""


class NoteStore(ABC):
    """Note storage. Writes are scoped to the owning author."""

    @abstractmethod
    async def create_note(self, author_id: int, title: str, content: str) -> Note:
        ...

    @abstractmethod
    async def find_note(self, note_id: int) -> Optional[Note]:
        ...

    @abstractmethod
    async def update_note(
        self,
        note_id: int,
        author_id: int,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Optional[Note]:
        """Change only the provided fields and bump updated_at.

        Returns None if no note with that id is owned by author_id.
        """

    @abstractmethod
    async def delete_note(self, note_id: int, author_id: int) -> bool:
        """True if an owned note was deleted."""

    @abstractmethod
    async def list_notes(self, author_id: int) -> list[Note]:
        """The author's notes, newest first."""
