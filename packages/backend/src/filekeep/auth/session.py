"""Session cookie transport.

Learn: The token travels in a cookie so browsers send it automatically
and route handlers never touch raw headers. Three operations:
- attach → Set-Cookie with the token (HttpOnly, Secure in production)
- clear  → same cookie name, empty value, Max-Age=0
- read   → the cookie value from an incoming request, or None

Clearing must repeat the path/flags used when setting, otherwise the
browser treats it as a different cookie and keeps the old one.
"""

from dataclasses import dataclass
from typing import Optional

from starlette.requests import Request
from starlette.responses import Response

from filekeep.config import Settings


@dataclass(frozen=True)
class SessionCookie:
    """Binds the session token to a named HTTP cookie."""

    name: str = "jwt"
    max_age: Optional[int] = None
    secure: bool = False
    samesite: str = "lax"
    path: str = "/"

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionCookie":
        return cls(
            name=settings.cookie_name,
            max_age=settings.session_max_age_seconds or None,
            secure=settings.session_cookie_secure,
            samesite=settings.cookie_samesite,
        )

    def attach(self, response: Response, token: str) -> None:
        response.set_cookie(
            key=self.name,
            value=token,
            max_age=self.max_age,
            path=self.path,
            secure=self.secure,
            httponly=True,
            samesite=self.samesite,
        )

    def clear(self, response: Response) -> None:
        response.delete_cookie(
            key=self.name,
            path=self.path,
            secure=self.secure,
            httponly=True,
            samesite=self.samesite,
        )

    def read(self, request: Request) -> Optional[str]:
        return request.cookies.get(self.name) or None
