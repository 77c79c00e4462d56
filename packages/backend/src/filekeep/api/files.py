"""File API routes.

Learn: The whole router is mounted behind get_current_user, and each
handler also takes the CurrentIdentity so it can hand user_id to
FileService. Routes handle HTTP concerns (status codes), the service
handles ownership.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from filekeep.auth.dependencies import CurrentIdentity, get_current_user
from filekeep.db.engine import get_db
from filekeep.schemas.file import FileContentUpdate, FileRead, FileRename
from filekeep.services.file_service import (
    FileService,
    InvalidTitleError,
    OwnershipError,
    ResourceNotFoundError,
)

router = APIRouter(prefix="/files")


def _svc(db: AsyncSession = Depends(get_db)) -> FileService:
    return FileService(db)


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, ResourceNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, OwnershipError):
        return HTTPException(status_code=403, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


@router.post("", response_model=FileRead, status_code=201)
async def create_file(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: FileService = Depends(_svc),
):
    """Create an empty file owned by the caller."""
    return await svc.create_for_owner(identity.user_id)


@router.get("", response_model=list[FileRead])
async def list_files(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: FileService = Depends(_svc),
):
    return await svc.list_for_owner(identity.user_id)


@router.get("/{file_id}", response_model=FileRead)
async def get_file(
    file_id: uuid.UUID,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: FileService = Depends(_svc),
):
    try:
        return await svc.get_for_owner(identity.user_id, file_id)
    except (ResourceNotFoundError, OwnershipError) as e:
        raise _http_error(e)


@router.patch("/{file_id}", response_model=FileRead)
async def rename_file(
    file_id: uuid.UUID,
    body: FileRename,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: FileService = Depends(_svc),
):
    """Change a file's title."""
    try:
        return await svc.rename_for_owner(identity.user_id, file_id, body.title)
    except (ResourceNotFoundError, OwnershipError, InvalidTitleError) as e:
        raise _http_error(e)


@router.put("/{file_id}/content", response_model=FileRead)
async def update_file_content(
    file_id: uuid.UUID,
    body: FileContentUpdate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: FileService = Depends(_svc),
):
    """Replace a file's content."""
    try:
        return await svc.update_content_for_owner(identity.user_id, file_id, body.content)
    except (ResourceNotFoundError, OwnershipError) as e:
        raise _http_error(e)


@router.delete("/{file_id}")
async def delete_file(
    file_id: uuid.UUID,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: FileService = Depends(_svc),
):
    try:
        await svc.delete_for_owner(identity.user_id, file_id)
    except (ResourceNotFoundError, OwnershipError) as e:
        raise _http_error(e)
    return {"message": "File deleted successfully"}
