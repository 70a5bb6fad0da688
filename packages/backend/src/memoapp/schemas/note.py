"""Pydantic schemas for notes.

Learn: Separate "Create"/"Update" schemas (input) from "Read" schemas
(output). Update fields are optional: omitted means unchanged.
"""

from typing import Optional

from pydantic import BaseModel, Field


class NoteCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str


class NoteUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = None


class NoteRead(BaseModel):
    id: int
    author_id: int
    title: str
    content: str
    created_at: int
    updated_at: int

    model_config = {"from_attributes": True}
