"""Pydantic schemas for files."""

import uuid
from datetime import datetime

from pydantic import BaseModel


class FileRename(BaseModel):
    # Emptiness is checked by FileService so it answers 400, not 422.
    title: str


class FileContentUpdate(BaseModel):
    content: str


class FileRead(BaseModel):
    id: uuid.UUID
    owner_id: uuid.UUID
    title: str
    content: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
