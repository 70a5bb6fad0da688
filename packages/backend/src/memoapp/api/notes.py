"""Note API routes.

Learn: Every route takes the caller's IdentityClaim from
get_current_user and uses claim.sub as the acting user. Ownership
failures are 403, unknown ids 404. StoreError is turned into a 500 by
the app-level handler in main.py.
"""

from fastapi import APIRouter, Depends, HTTPException

from memoapp.api.deps import get_note_service
from memoapp.auth.dependencies import get_current_user
from memoapp.auth.token import IdentityClaim
from memoapp.schemas.note import NoteCreate, NoteRead, NoteUpdate
from memoapp.services.note_service import (
    NoteForbiddenError,
    NoteNotFoundError,
    NoteService,
)

router = APIRouter(prefix="/notes")


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Note not found")


def _forbidden() -> HTTPException:
    return HTTPException(status_code=403, detail="Not the owner of this note")


@router.post("", response_model=NoteRead, status_code=201)
async def create_note(
    body: NoteCreate,
    identity: IdentityClaim = Depends(get_current_user),
    svc: NoteService = Depends(get_note_service),
):
    return await svc.create(identity.sub, body.title, body.content)


@router.get("", response_model=list[NoteRead])
async def list_notes(
    identity: IdentityClaim = Depends(get_current_user),
    svc: NoteService = Depends(get_note_service),
):
    """List the caller's notes, newest first."""
    return await svc.list_for(identity.sub)


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(
    note_id: int,
    identity: IdentityClaim = Depends(get_current_user),
    svc: NoteService = Depends(get_note_service),
):
    try:
        return await svc.get(note_id, identity.sub)
    except NoteNotFoundError:
        raise _not_found()
    except NoteForbiddenError:
        raise _forbidden()


@router.put("/{note_id}", response_model=NoteRead)
async def update_note(
    note_id: int,
    body: NoteUpdate,
    identity: IdentityClaim = Depends(get_current_user),
    svc: NoteService = Depends(get_note_service),
):
    """Update title and/or content. Omitted fields stay as they are."""
    try:
        return await svc.update(
            note_id, identity.sub, title=body.title, content=body.content
        )
    except NoteNotFoundError:
        raise _not_found()
    except NoteForbiddenError:
        raise _forbidden()


@router.delete("/{note_id}")
async def delete_note(
    note_id: int,
    identity: IdentityClaim = Depends(get_current_user),
    svc: NoteService = Depends(get_note_service),
):
    try:
        await svc.delete(note_id, identity.sub)
    except NoteNotFoundError:
        raise _not_found()
    except NoteForbiddenError:
        raise _forbidden()
    return {"deleted": True}
