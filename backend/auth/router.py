# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Auth endpoints – login, token refresh, logout, password change,
current-user info.

The handlers only translate between HTTP and :mod:`auth.service`; all
session rules live there.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from auth import service
from auth.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    TokenPair,
)
from core.activity import ActivitySink, RequestContext, get_activity_sink, request_context
from core.schemas import Envelope
from core.security import Identity, authenticate, get_current_user
from database import get_db
from models.user import User
from users.schemas import UserOut

router = APIRouter(prefix="/auth", tags=["auth"])


# ---------------------------------------------------------------------------
# POST /auth/login
# ---------------------------------------------------------------------------


@router.post("/login", response_model=Envelope[LoginResponse])
def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
    sink: ActivitySink = Depends(get_activity_sink),
    ctx: RequestContext = Depends(request_context),
):
    """Authenticate and return the user plus a fresh access/refresh pair."""
    result = service.login(db, sink, body.email, body.password, ctx)
    return Envelope(
        message="Logged in successfully",
        data=LoginResponse(
            user=UserOut.model_validate(result["user"]),
            access_token=result["access_token"],
            refresh_token=result["refresh_token"],
        ),
    )


# ---------------------------------------------------------------------------
# POST /auth/refresh
# ---------------------------------------------------------------------------


@router.post("/refresh", response_model=Envelope[TokenPair])
def refresh(body: RefreshRequest, db: Session = Depends(get_db)):
    """Rotate a refresh token.  The presented token cannot be used again."""
    pair = service.refresh(db, body.refresh_token)
    return Envelope(data=TokenPair(**pair))


# ---------------------------------------------------------------------------
# POST /auth/logout
# ---------------------------------------------------------------------------


@router.post("/logout", response_model=Envelope)
def logout(
    identity: Identity = Depends(authenticate),
    db: Session = Depends(get_db),
    sink: ActivitySink = Depends(get_activity_sink),
    ctx: RequestContext = Depends(request_context),
):
    """Revoke every refresh token of the caller, on every device."""
    service.logout(db, sink, identity, ctx)
    return Envelope(message="Logged out successfully")


# ---------------------------------------------------------------------------
# GET /auth/me
# ---------------------------------------------------------------------------


@router.get("/me", response_model=Envelope[UserOut])
def me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user's profile (no password hash)."""
    return Envelope(data=UserOut.model_validate(current_user))


# ---------------------------------------------------------------------------
# POST /auth/change-password
# ---------------------------------------------------------------------------


@router.post("/change-password", response_model=Envelope)
def change_password(
    body: ChangePasswordRequest,
    identity: Identity = Depends(authenticate),
    db: Session = Depends(get_db),
    sink: ActivitySink = Depends(get_activity_sink),
    ctx: RequestContext = Depends(request_context),
):
    """
    Change the authenticated user's password.  The current password must be
    supplied, so a stolen access token alone cannot take over the account.
    """
    service.change_password(db, sink, identity, body.current_password, body.new_password, ctx)
    return Envelope(message="Password changed successfully")
