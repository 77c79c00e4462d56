"""File service — ownership-scoped CRUD on files.

Learn: Every operation takes the *guarded* actor id (from the session
cookie), never an id supplied in the request body. Single-file
operations load the file, then check ownership before doing anything:

    missing file          → ResourceNotFoundError (404)
    owner_id != actor_id  → OwnershipError        (403)

Titles are trimmed and must be 1..255 characters (InvalidTitleError → 400).
"""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from filekeep.config import settings
from filekeep.db.models import File

logger = structlog.get_logger()

MAX_TITLE_LENGTH = 255


class ResourceNotFoundError(Exception):
    """Raised when a file id doesn't exist."""
    pass


class OwnershipError(Exception):
    """Raised when the actor doesn't own the target file."""
    pass


class InvalidTitleError(Exception):
    """Raised when a new title is empty or too long."""
    pass


def clean_title(title: str) -> str:
    title = (title or "").strip()
    if not title:
        raise InvalidTitleError("title must not be empty")
    if len(title) > MAX_TITLE_LENGTH:
        raise InvalidTitleError(f"title must be at most {MAX_TITLE_LENGTH} characters")
    return title


class FileService:
    """Business logic for a user's files."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _owned(self, actor_id: uuid.UUID, file_id: uuid.UUID) -> File:
        file = await self.db.get(File, file_id)
        if file is None:
            raise ResourceNotFoundError("File not found")
        if file.owner_id != actor_id:
            logger.warning(
                "files.forbidden", file_id=str(file_id), actor_id=str(actor_id)
            )
            raise OwnershipError("You do not own this file")
        return file

    async def create_for_owner(self, actor_id: uuid.UUID) -> File:
        file = File(owner_id=actor_id, title=settings.default_file_title, content="")
        self.db.add(file)
        await self.db.commit()
        await self.db.refresh(file)
        logger.info("files.created", file_id=str(file.id))
        return file

    async def list_for_owner(self, actor_id: uuid.UUID) -> list[File]:
        result = await self.db.execute(
            select(File)
            .where(File.owner_id == actor_id)
            .order_by(File.created_at, File.id)
        )
        return list(result.scalars().all())

    async def get_for_owner(self, actor_id: uuid.UUID, file_id: uuid.UUID) -> File:
        return await self._owned(actor_id, file_id)

    async def delete_for_owner(self, actor_id: uuid.UUID, file_id: uuid.UUID) -> None:
        file = await self._owned(actor_id, file_id)
        await self.db.delete(file)
        await self.db.commit()
        logger.info("files.deleted", file_id=str(file_id))

    async def rename_for_owner(
        self, actor_id: uuid.UUID, file_id: uuid.UUID, title: str
    ) -> File:
        file = await self._owned(actor_id, file_id)
        file.title = clean_title(title)
        await self.db.commit()
        await self.db.refresh(file)
        return file

    async def update_content_for_owner(
        self, actor_id: uuid.UUID, file_id: uuid.UUID, content: str
    ) -> File:
        file = await self._owned(actor_id, file_id)
        file.content = content
        await self.db.commit()
        await self.db.refresh(file)
        return file
