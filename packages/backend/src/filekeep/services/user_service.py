"""User service — sign-up, sign-in, and account deletion.

Learn: Service layer separates business logic from HTTP routing.
Routes translate the exceptions below into status codes:
  DuplicateIdentityError → 409, InvalidCredentialsError → 401.

Sign-in gives the same answer for "no such email" and "wrong
password", and spends a bcrypt check on both paths, so neither the
response nor its timing reveals which emails are registered.
"""

import uuid
from functools import lru_cache
from typing import Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from filekeep.auth.password import hash_password, verify_password
from filekeep.db.models import File, User

logger = structlog.get_logger()


class DuplicateIdentityError(Exception):
    """Raised when signing up with an email that is already registered."""
    pass


class InvalidCredentialsError(Exception):
    """Raised when an email/password pair doesn't match an account."""
    pass


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("filekeep-timing-equaliser")


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Business logic for accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalars().first()

    async def get_user(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def sign_up(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
        avatar_image: Optional[str] = None,
    ) -> User:
        """Create an account. Emails are unique (case-insensitive)."""
        email = normalize_email(email)
        if await self.find_by_email(email):
            raise DuplicateIdentityError("user already exists")

        user = User(
            email=email,
            name=name,
            password_hash=hash_password(password),
            avatar_image=avatar_image,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent sign-up for the same email
            await self.db.rollback()
            raise DuplicateIdentityError("user already exists")

        await self.db.refresh(user)
        logger.info("users.signed_up", user_id=str(user.id))
        return user

    async def sign_in(self, email: str, password: str) -> User:
        """Check credentials and return the matching user."""
        user = await self.find_by_email(email)
        if user is None:
            verify_password(password, _dummy_hash())
            logger.info("users.sign_in_failed", reason="unknown_email")
            raise InvalidCredentialsError("invalid credentials")

        if not verify_password(password, user.password_hash):
            logger.info("users.sign_in_failed", reason="bad_password", user_id=str(user.id))
            raise InvalidCredentialsError("invalid credentials")

        logger.info("users.signed_in", user_id=str(user.id))
        return user

    async def delete_account(self, user_id: uuid.UUID) -> bool:
        """Delete a user and every file they own.

        Learn: Files are removed explicitly rather than relying on the
        FK cascade, because SQLite only enforces foreign keys when asked.
        Outstanding tokens die with the row: the guard rejects tokens
        whose user no longer exists.
        """
        user = await self.db.get(User, user_id)
        if user is None:
            return False

        await self.db.execute(delete(File).where(File.owner_id == user_id))
        await self.db.delete(user)
        await self.db.commit()
        logger.info("users.deleted", user_id=str(user_id))
        return True
