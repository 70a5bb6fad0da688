"""In-memory store backends.

Learn: Used for tests and for MEMO_STORE_BACKEND=memory (throwaway dev
servers). Everything lives in dicts on the instance, so data is gone
when the process exits.

Uniqueness: create_account checks and inserts without an await in
between, so on a single event loop no other coroutine can interleave.
That is this backend's equivalent of a UNIQUE constraint.
"""

import itertools
from dataclasses import replace
from typing import Optional

from memoapp.domain import Account, Note, epoch_now
from memoapp.repository.base import AccountStore, NoteStore


class InMemoryAccountStore(AccountStore):
    def __init__(self):
        self._by_email: dict[str, Account] = {}
        self._ids = itertools.count(1)

    async def create_account(
        self, email: str, password_hash: str
    ) -> Optional[Account]:
        if email in self._by_email:
            return None
        account = Account(
            id=next(self._ids),
            email=email,
            password_hash=password_hash,
            created_at=epoch_now(),
        )
        self._by_email[email] = account
        return account

    async def find_account_by_email(self, email: str) -> Optional[Account]:
        return self._by_email.get(email)


class InMemoryNoteStore(NoteStore):
    def __init__(self):
        self._notes: dict[int, Note] = {}
        self._ids = itertools.count(1)

    async def create_note(self, author_id: int, title: str, content: str) -> Note:
        now = epoch_now()
        note = Note(
            id=next(self._ids),
            author_id=author_id,
            title=title,
            content=content,
            created_at=now,
            updated_at=now,
        )
        self._notes[note.id] = note
        return note

    async def find_note(self, note_id: int) -> Optional[Note]:
        return self._notes.get(note_id)

    async def update_note(
        self,
        note_id: int,
        author_id: int,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Optional[Note]:
        note = self._notes.get(note_id)
        if note is None or not note.is_owner(author_id):
            return None
        updated = replace(
            note,
            title=note.title if title is None else title,
            content=note.content if content is None else content,
            updated_at=epoch_now(),
        )
        self._notes[note_id] = updated
        return updated

    async def delete_note(self, note_id: int, author_id: int) -> bool:
        note = self._notes.get(note_id)
        if note is None or not note.is_owner(author_id):
            return False
        del self._notes[note_id]
        return True

    async def list_notes(self, author_id: int) -> list[Note]:
        owned = [n for n in self._notes.values() if n.is_owner(author_id)]
        return sorted(owned, key=lambda n: (n.created_at, n.id), reverse=True)
