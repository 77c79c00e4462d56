"""Session cookie transport and access guard tests (no HTTP client).

Learn: authenticate() is pure, so each arrow of the guard's state
machine can be checked directly. The cookie tests render Set-Cookie
headers on a bare Starlette Response.
"""

import uuid

import pytest
from starlette.requests import Request
from starlette.responses import Response

from filekeep.auth.dependencies import RejectReason, authenticate
from filekeep.auth.jwt import TokenCodec, TokenFailure
from filekeep.auth.session import SessionCookie

SECRET = "guard-secret-0123456789abcdef0123456789"


def _request_with_cookie(header: str | None) -> Request:
    headers = [(b"cookie", header.encode())] if header else []
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


# ═══════════════════════════════════════════════════════════
# SessionCookie
# ═══════════════════════════════════════════════════════════


def test_attach_sets_httponly_cookie():
    response = Response()
    SessionCookie(name="jwt", max_age=600).attach(response, "tok123")
    header = response.headers["set-cookie"]
    assert header.startswith("jwt=tok123;")
    assert "HttpOnly" in header
    assert "Max-Age=600" in header
    assert "SameSite=lax" in header
    assert "Secure" not in header


def test_attach_secure_in_production():
    response = Response()
    SessionCookie(secure=True).attach(response, "tok123")
    assert "Secure" in response.headers["set-cookie"]


def test_clear_expires_same_cookie():
    response = Response()
    SessionCookie(name="jwt").clear(response)
    header = response.headers["set-cookie"]
    assert header.startswith("jwt=")
    assert "Max-Age=0" in header
    assert "Path=/" in header


def test_read_returns_cookie_value():
    cookie = SessionCookie(name="jwt")
    assert cookie.read(_request_with_cookie("jwt=abc; other=1")) == "abc"


def test_read_absent_or_empty_is_none():
    cookie = SessionCookie(name="jwt")
    assert cookie.read(_request_with_cookie(None)) is None
    assert cookie.read(_request_with_cookie("jwt=")) is None
    assert cookie.read(_request_with_cookie("session=abc")) is None


# ═══════════════════════════════════════════════════════════
# authenticate() state machine
# ═══════════════════════════════════════════════════════════


@pytest.fixture
def codec():
    return TokenCodec(secret=SECRET, max_age_seconds=3600)


@pytest.mark.parametrize("token", [None, ""])
def test_no_token_is_no_credentials(codec, token):
    outcome = authenticate(token, codec)
    assert not outcome.authenticated
    assert outcome.reason == RejectReason.NO_CREDENTIALS
    assert outcome.token_failure is None


def test_bad_token_is_invalid_token_with_reason_kept(codec):
    outcome = authenticate("garbage", codec)
    assert outcome.reason == RejectReason.INVALID_TOKEN
    assert outcome.token_failure == TokenFailure.MALFORMED


def test_forged_token_keeps_signature_reason(codec):
    forged = TokenCodec(secret="x" * 40).encode(str(uuid.uuid4()))
    outcome = authenticate(forged, codec)
    assert outcome.reason == RejectReason.INVALID_TOKEN
    assert outcome.token_failure == TokenFailure.INVALID_SIGNATURE


def test_expired_token_keeps_expired_reason():
    codec = TokenCodec(secret=SECRET, max_age_seconds=60, clock=lambda: 10_000)
    token = codec.encode(str(uuid.uuid4()), issued_at=10_000 - 61)
    outcome = authenticate(token, codec)
    assert outcome.reason == RejectReason.INVALID_TOKEN
    assert outcome.token_failure == TokenFailure.EXPIRED


def test_non_uuid_subject_is_invalid_token(codec):
    outcome = authenticate(codec.encode("u1"), codec)
    assert outcome.reason == RejectReason.INVALID_TOKEN
    assert outcome.token_failure == TokenFailure.MALFORMED


def test_valid_token_is_authenticated(codec):
    user_id = uuid.uuid4()
    outcome = authenticate(codec.encode(str(user_id)), codec)
    assert outcome.authenticated
    assert outcome.reason is None
    assert outcome.identity.user_id == user_id
