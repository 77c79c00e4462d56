"""Service-layer tests — UserService and FileService without HTTP.

Learn: Services take an AsyncSession, so they can be exercised
directly. The last test walks the full sign-in → token → files
scenario for two users.
"""

import uuid

import pytest
from sqlalchemy import func, select

from filekeep.auth.jwt import TokenCodec
from filekeep.db.models import File, User
from filekeep.services.file_service import (
    FileService,
    InvalidTitleError,
    OwnershipError,
    ResourceNotFoundError,
)
from filekeep.services.user_service import (
    DuplicateIdentityError,
    InvalidCredentialsError,
    UserService,
)

PASSWORD = "password_123"


@pytest.fixture
def users(db_session):
    return UserService(db_session)


@pytest.fixture
def files(db_session):
    return FileService(db_session)


# ═══════════════════════════════════════════════════════════
# UserService
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_sign_up_normalises_email(users):
    user = await users.sign_up("  Alice@Example.COM ", PASSWORD)
    assert user.email == "alice@example.com"
    assert user.password_hash != PASSWORD
    assert await users.find_by_email("ALICE@example.com") is not None


@pytest.mark.asyncio
async def test_sign_up_duplicate_creates_no_row(users, db_session):
    await users.sign_up("a@x.com", PASSWORD)
    with pytest.raises(DuplicateIdentityError):
        await users.sign_up("a@x.com", "different_password")

    count = await db_session.scalar(select(func.count()).select_from(User))
    assert count == 1


@pytest.mark.asyncio
async def test_sign_in_returns_user(users):
    created = await users.sign_up("a@x.com", PASSWORD)
    user = await users.sign_in("a@x.com", PASSWORD)
    assert user.id == created.id


@pytest.mark.asyncio
async def test_sign_in_wrong_password(users):
    await users.sign_up("a@x.com", PASSWORD)
    with pytest.raises(InvalidCredentialsError):
        await users.sign_in("a@x.com", "nope_nope")


@pytest.mark.asyncio
async def test_sign_in_unknown_email(users):
    with pytest.raises(InvalidCredentialsError):
        await users.sign_in("ghost@x.com", PASSWORD)


@pytest.mark.asyncio
async def test_delete_account_removes_files(users, files, db_session):
    user = await users.sign_up("a@x.com", PASSWORD)
    await files.create_for_owner(user.id)
    await files.create_for_owner(user.id)

    assert await users.delete_account(user.id) is True
    assert await users.get_user(user.id) is None
    remaining = await db_session.scalar(select(func.count()).select_from(File))
    assert remaining == 0


@pytest.mark.asyncio
async def test_delete_unknown_account(users):
    assert await users.delete_account(uuid.uuid4()) is False


# ═══════════════════════════════════════════════════════════
# FileService
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_list_for_owner_in_creation_order(users, files):
    user = await users.sign_up("a@x.com", PASSWORD)
    created = [await files.create_for_owner(user.id) for _ in range(3)]
    listed = await files.list_for_owner(user.id)
    assert {f.id for f in listed} == {f.id for f in created}
    assert [f.created_at for f in listed] == sorted(f.created_at for f in listed)


@pytest.mark.asyncio
async def test_ownership_checks(users, files):
    a = await users.sign_up("a@x.com", PASSWORD)
    b = await users.sign_up("b@x.com", PASSWORD)
    f = await files.create_for_owner(a.id)

    with pytest.raises(OwnershipError):
        await files.get_for_owner(b.id, f.id)
    with pytest.raises(OwnershipError):
        await files.rename_for_owner(b.id, f.id, "stolen")
    with pytest.raises(OwnershipError):
        await files.update_content_for_owner(b.id, f.id, "stolen")
    with pytest.raises(OwnershipError):
        await files.delete_for_owner(b.id, f.id)

    still_there = await files.get_for_owner(a.id, f.id)
    assert still_there.title == "Untitled"
    assert still_there.content == ""


@pytest.mark.asyncio
async def test_not_found(users, files):
    a = await users.sign_up("a@x.com", PASSWORD)
    missing = uuid.uuid4()
    with pytest.raises(ResourceNotFoundError):
        await files.get_for_owner(a.id, missing)
    with pytest.raises(ResourceNotFoundError):
        await files.delete_for_owner(a.id, missing)
    with pytest.raises(ResourceNotFoundError):
        await files.rename_for_owner(a.id, missing, "New")


@pytest.mark.asyncio
async def test_rename_validates_title(users, files):
    a = await users.sign_up("a@x.com", PASSWORD)
    f = await files.create_for_owner(a.id)
    with pytest.raises(InvalidTitleError):
        await files.rename_for_owner(a.id, f.id, "   ")
    renamed = await files.rename_for_owner(a.id, f.id, " Notes ")
    assert renamed.title == "Notes"


# ═══════════════════════════════════════════════════════════
# End to end: u1 signs in, creates a file, u2 can't see it
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_sign_in_token_scopes_files(users, files):
    codec = TokenCodec(secret="scenario-secret-0123456789abcdef0123")
    u1 = await users.sign_up("a@x.com", PASSWORD)
    u2 = await users.sign_up("b@x.com", PASSWORD)

    signed_in = await users.sign_in("a@x.com", PASSWORD)
    decoded = codec.decode(codec.encode(str(signed_in.id)))
    assert decoded.user_id == str(u1.id)

    actor = uuid.UUID(decoded.user_id)
    f = await files.create_for_owner(actor)
    assert f.owner_id == u1.id

    assert f.id in [x.id for x in await files.list_for_owner(u1.id)]
    assert f.id not in [x.id for x in await files.list_for_owner(u2.id)]
