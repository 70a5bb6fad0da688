"""Note service — CRUD with ownership checks.

Learn: The acting user always comes from the verified identity claim
(claim.sub), never from the request body. Ownership is the only
authorization rule: you can read and change your own notes.
"""

from typing import Optional

from memoapp.domain import Note
from memoapp.repository.base import NoteStore


class NoteNotFoundError(Exception):
    pass


class NoteForbiddenError(Exception):
    """The note exists but belongs to someone else."""


class NoteService:
    def __init__(self, store: NoteStore):
        self.store = store

    async def create(self, author_id: int, title: str, content: str) -> Note:
        return await self.store.create_note(author_id, title, content)

    async def list_for(self, author_id: int) -> list[Note]:
        return await self.store.list_notes(author_id)

    async def get(self, note_id: int, user_id: int) -> Note:
        note = await self.store.find_note(note_id)
        if note is None:
            raise NoteNotFoundError(note_id)
        if not note.is_owner(user_id):
            raise NoteForbiddenError(note_id)
        return note

    async def update(
        self,
        note_id: int,
        user_id: int,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Note:
        await self.get(note_id, user_id)
        updated = await self.store.update_note(note_id, user_id, title, content)
        if updated is None:
            # deleted between the ownership check and the update
            raise NoteNotFoundError(note_id)
        return updated

    async def delete(self, note_id: int, user_id: int) -> None:
        await self.get(note_id, user_id)
        if not await self.store.delete_note(note_id, user_id):
            raise NoteNotFoundError(note_id)
