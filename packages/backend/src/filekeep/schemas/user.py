"""Pydantic schemas for accounts.

Learn: UserRead is the only shape a user ever leaves the API in.
It has no password field, so the hash can't be echoed by accident.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SignUpRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=8)
    name: Optional[str] = Field(None, max_length=100)
    avatar_image: Optional[str] = Field(None, max_length=1024)


class SignInRequest(BaseModel):
    email: str
    password: str


class UserRead(BaseModel):
    id: uuid.UUID
    email: str
    name: Optional[str] = None
    avatar_image: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
