"""Users API — sign-up, sign-in, sign-out, and the current account.

Learn: Routes for the session lifecycle:
- GET    /users/ping    → liveness probe for clients
- POST   /users/signup  → create an account (no cookie; sign in next)
- POST   /users/signin  → email/password → session cookie + user
- GET    /users/signout → clear the session cookie (POST works too)
- GET    /users/me      → current user
- DELETE /users/me      → delete the account and its files

Sign-out needs no valid session: it only tells the browser to drop
the cookie. The server keeps no session state to revoke.
"""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from filekeep.auth.dependencies import (
    CurrentIdentity,
    get_current_user,
    get_session_cookie,
    get_token_codec,
)
from filekeep.auth.jwt import TokenCodec
from filekeep.auth.session import SessionCookie
from filekeep.db.engine import get_db
from filekeep.schemas.user import SignInRequest, SignUpRequest, UserRead
from filekeep.services.user_service import (
    DuplicateIdentityError,
    InvalidCredentialsError,
    UserService,
)

router = APIRouter(prefix="/users")


def _svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


@router.get("/ping")
async def ping():
    return {"pong": True}


@router.post("/signup", response_model=UserRead, status_code=201)
async def sign_up(body: SignUpRequest, svc: UserService = Depends(_svc)):
    """Create a new user account."""
    try:
        return await svc.sign_up(
            email=body.email,
            password=body.password,
            name=body.name,
            avatar_image=body.avatar_image,
        )
    except DuplicateIdentityError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/signin", response_model=UserRead)
async def sign_in(
    body: SignInRequest,
    response: Response,
    svc: UserService = Depends(_svc),
    codec: TokenCodec = Depends(get_token_codec),
    cookie: SessionCookie = Depends(get_session_cookie),
):
    """Check credentials and set the session cookie."""
    try:
        user = await svc.sign_in(email=body.email, password=body.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))

    cookie.attach(response, codec.encode(str(user.id)))
    return user


@router.api_route("/signout", methods=["GET", "POST"])
async def sign_out(
    response: Response,
    cookie: SessionCookie = Depends(get_session_cookie),
):
    """Clear the session cookie."""
    cookie.clear(response)
    return {"message": "success"}


@router.get("/me", response_model=UserRead)
async def get_me(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    """Get the current authenticated user's info."""
    user = await svc.get_user(identity.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.delete("/me")
async def delete_me(
    response: Response,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: UserService = Depends(_svc),
    cookie: SessionCookie = Depends(get_session_cookie),
):
    """Delete the current account, its files, and the session cookie."""
    if not await svc.delete_account(identity.user_id):
        raise HTTPException(status_code=404, detail="User not found")
    cookie.clear(response)
    return {"message": "success"}
