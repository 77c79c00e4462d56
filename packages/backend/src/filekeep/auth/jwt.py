"""Session token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. The
session token carries only two claims:
- sub: the user id
- iat: issued-at, epoch seconds

PyJWT signs header + payload with HMAC (HS256 by default), so any
changed byte invalidates the signature, and compares signatures in
constant time. Expiry is measured from iat against the codec's
max_age_seconds, using an injectable clock so it can be tested.

decode() never raises. Callers get a TokenResult that either carries
the user id or says *why* the token was refused. The guard collapses
all failures into one 401 but logs the reason.
"""

import enum
import time
from dataclasses import dataclass
from typing import Callable, Optional

import jwt

from filekeep.config import Settings

# Tolerated clock skew for tokens that claim to be issued slightly in the future.
CLOCK_SKEW_SECONDS = 60


class TokenFailure(str, enum.Enum):
    """Why a token was refused."""

    MALFORMED = "malformed"
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"


@dataclass(frozen=True)
class TokenResult:
    """Outcome of TokenCodec.decode: a user id or a failure reason."""

    user_id: Optional[str] = None
    issued_at: Optional[int] = None
    failure: Optional[TokenFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def rejected(cls, failure: TokenFailure) -> "TokenResult":
        return cls(failure=failure)


@dataclass(frozen=True)
class TokenCodec:
    """Encode a user id into a signed token and back.

    Learn: An immutable value. The secret is fixed when the codec is
    built and never rotates at runtime, so one instance can be shared
    by every concurrent request.
    """

    secret: str
    algorithm: str = "HS256"
    max_age_seconds: Optional[int] = None  # None or 0 → tokens never expire
    clock: Callable[[], float] = time.time

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCodec":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            max_age_seconds=settings.session_max_age_seconds or None,
        )

    def encode(self, user_id: str, issued_at: Optional[int] = None) -> str:
        """Create a signed session token for user_id."""
        payload = {
            "sub": str(user_id),
            "iat": int(self.clock()) if issued_at is None else int(issued_at),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: object) -> TokenResult:
        """Verify a token and extract the user id. Never raises."""
        if not isinstance(token, str) or not token:
            return TokenResult.rejected(TokenFailure.MALFORMED)

        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                # iat/expiry are checked below against our own clock
                options={
                    "require": ["sub", "iat"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidSignatureError:
            return TokenResult.rejected(TokenFailure.INVALID_SIGNATURE)
        except jwt.InvalidTokenError:
            return TokenResult.rejected(TokenFailure.MALFORMED)

        user_id = payload.get("sub")
        issued_at = payload.get("iat")
        if not isinstance(user_id, str) or not user_id:
            return TokenResult.rejected(TokenFailure.MALFORMED)
        if not isinstance(issued_at, int) or isinstance(issued_at, bool):
            return TokenResult.rejected(TokenFailure.MALFORMED)

        now = int(self.clock())
        if issued_at > now + CLOCK_SKEW_SECONDS:
            return TokenResult.rejected(TokenFailure.MALFORMED)
        if self.max_age_seconds and now - issued_at > self.max_age_seconds:
            return TokenResult.rejected(TokenFailure.EXPIRED)

        return TokenResult(user_id=user_id, issued_at=issued_at)
