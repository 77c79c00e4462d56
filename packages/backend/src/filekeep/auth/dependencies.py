"""FastAPI auth dependencies — the access guard.

Learn: Every protected route depends on get_current_user. Per request
the guard walks a small state machine:

    NoToken ──read──▶ TokenPresent ──decode──▶ Authenticated(user_id)
       │                    │
       ▼                    ▼
    Rejected(NO_CREDENTIALS)  Rejected(INVALID_TOKEN, failure)

authenticate() is the pure part (cookie value in, outcome out).
get_current_user() adds the I/O: it reads the cookie, and confirms the
user still exists, so deleting an account invalidates its tokens.

All rejections look the same to the caller (401 "Unauthorized request");
the specific reason only goes to the log.
"""

import enum
import uuid
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

import structlog
from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from filekeep.auth.jwt import TokenCodec, TokenFailure
from filekeep.auth.session import SessionCookie
from filekeep.config import settings
from filekeep.db.engine import get_db
from filekeep.db.models import User

logger = structlog.get_logger()

UNAUTHORIZED_DETAIL = "Unauthorized request"


class RejectReason(str, enum.Enum):
    NO_CREDENTIALS = "no_credentials"
    INVALID_TOKEN = "invalid_token"
    UNKNOWN_IDENTITY = "unknown_identity"


@dataclass(frozen=True)
class CurrentIdentity:
    """The authenticated user making the request.

    Learn: Built once by the guard and handed explicitly to route
    handlers, which pass user_id to the service layer. Nothing is
    stashed on the request object.
    """

    user_id: uuid.UUID
    issued_at: int


@dataclass(frozen=True)
class AuthOutcome:
    identity: Optional[CurrentIdentity] = None
    reason: Optional[RejectReason] = None
    token_failure: Optional[TokenFailure] = None

    @property
    def authenticated(self) -> bool:
        return self.identity is not None


# ─── Providers ───────────────────────────────────────────


@lru_cache
def get_token_codec() -> TokenCodec:
    """Shared, immutable codec built from settings."""
    return TokenCodec.from_settings(settings)


@lru_cache
def get_session_cookie() -> SessionCookie:
    return SessionCookie.from_settings(settings)


# ─── Guard ───────────────────────────────────────────────


def authenticate(token: Optional[str], codec: TokenCodec) -> AuthOutcome:
    """Turn a raw cookie value into an AuthOutcome. Pure."""
    if not token:
        return AuthOutcome(reason=RejectReason.NO_CREDENTIALS)

    result = codec.decode(token)
    if not result.ok:
        return AuthOutcome(
            reason=RejectReason.INVALID_TOKEN, token_failure=result.failure
        )

    try:
        user_id = uuid.UUID(result.user_id)
    except ValueError:
        return AuthOutcome(
            reason=RejectReason.INVALID_TOKEN, token_failure=TokenFailure.MALFORMED
        )

    return AuthOutcome(
        identity=CurrentIdentity(user_id=user_id, issued_at=result.issued_at)
    )


def _reject(outcome: AuthOutcome, path: str) -> HTTPException:
    logger.info(
        "auth.rejected",
        reason=outcome.reason.value,
        token_failure=outcome.token_failure.value if outcome.token_failure else None,
        path=path,
    )
    return HTTPException(status_code=401, detail=UNAUTHORIZED_DETAIL)


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
    cookie: SessionCookie = Depends(get_session_cookie),
) -> CurrentIdentity:
    """Extract the current identity from the session cookie (401 if none)."""
    outcome = authenticate(cookie.read(request), codec)
    if not outcome.authenticated:
        raise _reject(outcome, request.url.path)

    if await db.get(User, outcome.identity.user_id) is None:
        raise _reject(
            AuthOutcome(reason=RejectReason.UNKNOWN_IDENTITY), request.url.path
        )

    structlog.contextvars.bind_contextvars(user_id=str(outcome.identity.user_id))
    return outcome.identity
