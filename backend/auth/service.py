# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Session lifecycle – login, refresh, logout, password changes.

Every login mints an independent (access, refresh) pair.  Refresh tokens
are single use: ``refresh`` deletes the presented row before minting the
replacement, so replaying a rotated token finds nothing and fails.

Security notes
--------------
* Unknown email and wrong password raise the same ``InvalidCredentials``;
  only the activity log records which one it was.
* The active flag is checked before the password, so a disabled account is
  reported as disabled whatever password was supplied.
* Changing or resetting a password revokes every refresh token the account
  holds; access tokens already issued run out on their own.
"""

from sqlalchemy.orm import Session

from core import activity, clock
from core.activity import ActivitySink, RequestContext
from core.errors import AccountDisabled, InvalidCredentials, InvalidToken, NotFound
from core.logger import logger
from core.security import (
    Identity,
    hash_password,
    issue_access_token,
    issue_refresh_token,
    refresh_token_expiry,
    verify_password,
    verify_refresh_token,
)
from models.refresh_token import RefreshToken
from models.user import User


def _mint_pair(db: Session, user: User) -> tuple[str, str]:
    """Sign a new token pair and stage the refresh row (caller commits)."""
    access_token = issue_access_token(user)
    refresh_token = issue_refresh_token(user)
    db.add(RefreshToken(
        user_id=user.id,
        token=refresh_token,
        expires_at=refresh_token_expiry(),
    ))
    return access_token, refresh_token


def revoke_all_refresh_tokens(db: Session, user_id: int) -> int:
    """Stage a single bulk delete of every refresh token owned by *user_id*."""
    return (
        db.query(RefreshToken)
        .filter(RefreshToken.user_id == user_id)
        .delete(synchronize_session=False)
    )


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------


def login(
    db: Session,
    sink: ActivitySink,
    email: str,
    password: str,
    ctx: RequestContext = RequestContext(),
) -> dict:
    """
    Authenticate by email + password.

    Returns ``{"user", "access_token", "refresh_token"}``.  Raises
    ``InvalidCredentials`` or ``AccountDisabled``; every failure is logged.
    """
    user = db.query(User).filter(User.email == email).first()

    if not user:
        logger.warning("Login failed: unknown email client=%s", ctx.ip_address)
        sink.record(activity.LOGIN_FAILED, user_name=email,
                    details="Email not found", ctx=ctx)
        raise InvalidCredentials()

    if not user.is_active:
        logger.warning("Login refused: account disabled user_id=%s", user.id)
        sink.record(activity.LOGIN_FAILED, user_name=user.full_name, user_id=user.id,
                    details="Account disabled", ctx=ctx)
        raise AccountDisabled()

    if not verify_password(password, user.password_hash):
        logger.warning("Login failed: wrong password user_id=%s", user.id)
        sink.record(activity.LOGIN_FAILED, user_name=user.full_name, user_id=user.id,
                    details="Wrong password", ctx=ctx)
        raise InvalidCredentials()

    access_token, refresh_token = _mint_pair(db, user)
    user.last_login = clock.now()
    db.commit()
    db.refresh(user)

    logger.info("Login succeeded user_id=%s", user.id)
    sink.record(activity.LOGIN, user_name=user.full_name, user_id=user.id,
                details="Logged in", ctx=ctx)

    return {"user": user, "access_token": access_token, "refresh_token": refresh_token}


# ---------------------------------------------------------------------------
# Refresh (rotation)
# ---------------------------------------------------------------------------


def refresh(db: Session, token: str) -> dict:
    """
    Exchange a refresh token for a new pair.  The presented token is consumed.

    Any problem – bad signature, wrong type, unknown or expired row, missing
    or disabled owner – raises the same ``InvalidToken``.
    """
    payload = verify_refresh_token(token)
    if payload is None:
        raise InvalidToken()

    stored = db.query(RefreshToken).filter(RefreshToken.token == token).first()
    if not stored or clock.as_utc(stored.expires_at) < clock.now():
        raise InvalidToken()

    user = db.query(User).filter(User.id == payload["user_id"]).first()
    if not user or not user.is_active or user.id != stored.user_id:
        raise InvalidToken()

    # A concurrent refresh with the same token may already have taken the row
    consumed = (
        db.query(RefreshToken)
        .filter(RefreshToken.id == stored.id)
        .delete(synchronize_session=False)
    )
    if consumed != 1:
        db.rollback()
        raise InvalidToken()

    access_token, refresh_token = _mint_pair(db, user)
    db.commit()

    logger.info("Refresh token rotated user_id=%s", user.id)
    return {"access_token": access_token, "refresh_token": refresh_token}


# ---------------------------------------------------------------------------
# Logout
# ---------------------------------------------------------------------------


def logout(
    db: Session,
    sink: ActivitySink,
    identity: Identity,
    ctx: RequestContext = RequestContext(),
) -> int:
    """Revoke every refresh token of the caller ("log out everywhere")."""
    revoked = revoke_all_refresh_tokens(db, identity.user_id)
    db.commit()

    logger.info("Logout user_id=%s revoked=%d", identity.user_id, revoked)
    sink.record(activity.LOGOUT, user_name=identity.full_name, user_id=identity.user_id,
                details="Logged out", ctx=ctx)
    return revoked


# ---------------------------------------------------------------------------
# Password changes
# ---------------------------------------------------------------------------


def change_password(
    db: Session,
    sink: ActivitySink,
    identity: Identity,
    current_password: str,
    new_password: str,
    ctx: RequestContext = RequestContext(),
) -> None:
    """Change the caller's own password after re-verifying the current one."""
    user = db.query(User).filter(User.id == identity.user_id).first()
    if not user:
        raise NotFound("User not found")

    if not verify_password(current_password, user.password_hash):
        sink.record(activity.CHANGE_PASSWORD_FAILED, user_name=user.full_name, user_id=user.id,
                    details="Current password incorrect", ctx=ctx)
        raise InvalidCredentials("Current password is incorrect")

    user.password_hash = hash_password(new_password)
    user.updated_at = clock.now()
    revoked = revoke_all_refresh_tokens(db, user.id)
    db.commit()

    logger.info("Password changed user_id=%s revoked=%d", user.id, revoked)
    sink.record(activity.CHANGE_PASSWORD, user_name=user.full_name, user_id=user.id,
                details="Password changed", ctx=ctx)


def admin_reset_password(
    db: Session,
    sink: ActivitySink,
    admin: Identity,
    target_user_id: int,
    new_password: str,
    ctx: RequestContext = RequestContext(),
) -> None:
    """Overwrite another user's password.  Logged against the admin."""
    target = db.query(User).filter(User.id == target_user_id).first()
    if not target:
        raise NotFound("User not found")

    target.password_hash = hash_password(new_password)
    target.updated_at = clock.now()
    revoke_all_refresh_tokens(db, target.id)
    db.commit()

    logger.info("Password reset user_id=%s by admin_id=%s", target.id, admin.user_id)
    sink.record(activity.RESET_PASSWORD, user_name=admin.full_name, user_id=admin.user_id,
                details=f"Reset password for {target.full_name} ({target.email})", ctx=ctx)


# ---------------------------------------------------------------------------
# Housekeeping
# ---------------------------------------------------------------------------


def purge_expired_refresh_tokens(db: Session) -> int:
    """Delete refresh rows past their expiry.  Expired rows are rejected anyway."""
    purged = (
        db.query(RefreshToken)
        .filter(RefreshToken.expires_at < clock.now())
        .delete(synchronize_session=False)
    )
    db.commit()
    return purged
