# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
User endpoints – staff account lifecycle management.

Reads are open to managers; every write is guarded by ``admin_only``.  A
request that carries a valid token but the wrong role receives 403 before
any business logic runs.  The one exception is ``/users/update-profile``,
which any signed-in user may call for their own account.

Guards: an admin cannot delete or deactivate their own account.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from auth import service as auth_service
from core import activity, clock
from core.activity import ActivitySink, RequestContext, get_activity_sink, request_context
from core.errors import Conflict, Forbidden, NotFound
from core.schemas import Envelope, Page, Pagination
from core.security import Identity, admin_only, authenticate, hash_password, manager_and_above
from database import LIKE_ESCAPE, get_db, like_pattern
from models.user import Role, User
from users.schemas import (
    ActiveStatus,
    CreateUserRequest,
    ResetPasswordRequest,
    UpdateProfileRequest,
    UpdateUserRequest,
    UserOut,
)

router = APIRouter(prefix="/users", tags=["users"])

_SORT_COLUMNS = {
    "createdAt": User.created_at,
    "fullName": User.full_name,
    "email": User.email,
    "role": User.role,
}


def _get_user(user_id: int, db: Session) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


def _ensure_email_free(db: Session, email: str, owner_id: Optional[int] = None) -> None:
    existing = db.query(User).filter(User.email == email).first()
    if existing and existing.id != owner_id:
        raise Conflict("Email already in use")


def _commit_unique(db: Session) -> None:
    """Commit, turning a lost race on the email unique key into 409."""
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Email already in use")


# ---------------------------------------------------------------------------
# PUT /users/update-profile  – any user edits their own profile
# ---------------------------------------------------------------------------
# Declared before the /{user_id} routes so the literal path wins.


@router.put("/update-profile", response_model=Envelope[UserOut])
def update_profile(
    body: UpdateProfileRequest,
    identity: Identity = Depends(authenticate),
    db: Session = Depends(get_db),
    sink: ActivitySink = Depends(get_activity_sink),
    ctx: RequestContext = Depends(request_context),
):
    user = _get_user(identity.user_id, db)

    if body.email is not None:
        _ensure_email_free(db, body.email, owner_id=user.id)
        user.email = body.email
    if body.full_name is not None:
        user.full_name = body.full_name
    # Blank strings clear the optional contact fields
    if body.phone is not None:
        user.phone = body.phone or None
    if body.department is not None:
        user.department = body.department or None
    user.updated_at = clock.now()
    _commit_unique(db)
    db.refresh(user)

    sink.record(activity.UPDATE_PROFILE, user_name=user.full_name, user_id=user.id,
                details="Updated own profile", ctx=ctx)
    return Envelope(message="Profile updated", data=UserOut.model_validate(user))


# ---------------------------------------------------------------------------
# GET /users  – list users (manager and above)
# ---------------------------------------------------------------------------


@router.get("", response_model=Envelope[Page[UserOut]])
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, description="Substring of name, email or department"),
    role: Optional[Role] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    sort_by: Literal["createdAt", "fullName", "email", "role"] = Query("createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    _: Identity = Depends(manager_and_above),
    db: Session = Depends(get_db),
):
    """Return one page of users (no password data – handled by the schema)."""
    q = db.query(User)

    if search:
        pattern = like_pattern(search)
        q = q.filter(or_(
            User.full_name.ilike(pattern, escape=LIKE_ESCAPE),
            User.email.ilike(pattern, escape=LIKE_ESCAPE),
            User.department.ilike(pattern, escape=LIKE_ESCAPE),
        ))
    if role is not None:
        q = q.filter(User.role == role)
    if is_active is not None:
        q = q.filter(User.is_active.is_(is_active))

    column = _SORT_COLUMNS[sort_by]
    ordering = column.asc() if sort_order == "asc" else column.desc()

    total = q.count()
    rows = q.order_by(ordering, User.id).offset((page - 1) * limit).limit(limit).all()
    return Envelope(data=Page(
        items=[UserOut.model_validate(u) for u in rows],
        pagination=Pagination.build(page, limit, total),
    ))


# ---------------------------------------------------------------------------
# GET /users/{id}
# ---------------------------------------------------------------------------


@router.get("/{user_id}", response_model=Envelope[UserOut])
def get_user(
    user_id: int,
    _: Identity = Depends(manager_and_above),
    db: Session = Depends(get_db),
):
    return Envelope(data=UserOut.model_validate(_get_user(user_id, db)))


# ---------------------------------------------------------------------------
# POST /users  – create a new user
# ---------------------------------------------------------------------------


@router.post("", response_model=Envelope[UserOut], status_code=status.HTTP_201_CREATED)
def create_user(
    body: CreateUserRequest,
    admin: Identity = Depends(admin_only),
    db: Session = Depends(get_db),
    sink: ActivitySink = Depends(get_activity_sink),
    ctx: RequestContext = Depends(request_context),
):
    _ensure_email_free(db, body.email)

    fields = body.model_dump(exclude={"password"})
    user = User(**fields, password_hash=hash_password(body.password))
    db.add(user)
    _commit_unique(db)
    db.refresh(user)

    sink.record(activity.CREATE_USER, user_name=admin.full_name, user_id=admin.user_id,
                details=f"Created user {user.full_name} ({user.email}) role={user.role.value}",
                ctx=ctx)
    return Envelope(message="User created", data=UserOut.model_validate(user))


# ---------------------------------------------------------------------------
# PUT /users/{id}  – edit another user
# ---------------------------------------------------------------------------


@router.put("/{user_id}", response_model=Envelope[UserOut])
def update_user(
    user_id: int,
    body: UpdateUserRequest,
    admin: Identity = Depends(admin_only),
    db: Session = Depends(get_db),
    sink: ActivitySink = Depends(get_activity_sink),
    ctx: RequestContext = Depends(request_context),
):
    """Partial update.  Deactivation goes through the same self-guard as toggle-active."""
    user = _get_user(user_id, db)
    changes = body.model_dump(exclude_unset=True)

    if changes.get("is_active") is False and user_id == admin.user_id:
        raise Forbidden("You cannot deactivate your own account")
    if changes.get("email") and changes["email"] != user.email:
        _ensure_email_free(db, changes["email"], owner_id=user.id)

    for field, value in changes.items():
        # email, name, role and the active flag are NOT NULL
        if value is None and field in {"email", "full_name", "role", "is_active"}:
            continue
        setattr(user, field, value)
    user.updated_at = clock.now()
    _commit_unique(db)
    db.refresh(user)

    sink.record(activity.UPDATE_USER, user_name=admin.full_name, user_id=admin.user_id,
                details=f"Updated user {user.full_name} ({user.email})", ctx=ctx)
    return Envelope(message="User updated", data=UserOut.model_validate(user))


# ---------------------------------------------------------------------------
# DELETE /users/{id}
# ---------------------------------------------------------------------------


@router.delete("/{user_id}", response_model=Envelope)
def delete_user(
    user_id: int,
    admin: Identity = Depends(admin_only),
    db: Session = Depends(get_db),
    sink: ActivitySink = Depends(get_activity_sink),
    ctx: RequestContext = Depends(request_context),
):
    """Hard delete.  Refresh tokens go with the user; activity rows keep the name."""
    if user_id == admin.user_id:
        raise Forbidden("You cannot delete your own account")

    user = _get_user(user_id, db)
    summary = f"Deleted user {user.full_name} ({user.email})"
    db.delete(user)
    db.commit()

    sink.record(activity.DELETE_USER, user_name=admin.full_name, user_id=admin.user_id,
                details=summary, ctx=ctx)
    return Envelope(message="User deleted")


# ---------------------------------------------------------------------------
# POST /users/{id}/reset-password  – admin resets another user's password
# ---------------------------------------------------------------------------


@router.post("/{user_id}/reset-password", response_model=Envelope)
def reset_password(
    user_id: int,
    body: ResetPasswordRequest,
    admin: Identity = Depends(admin_only),
    db: Session = Depends(get_db),
    sink: ActivitySink = Depends(get_activity_sink),
    ctx: RequestContext = Depends(request_context),
):
    auth_service.admin_reset_password(db, sink, admin, user_id, body.new_password, ctx)
    return Envelope(message="Password reset successfully")


# ---------------------------------------------------------------------------
# POST /users/{id}/toggle-active  – enable / disable an account
# ---------------------------------------------------------------------------


@router.post("/{user_id}/toggle-active", response_model=Envelope[ActiveStatus])
def toggle_active(
    user_id: int,
    admin: Identity = Depends(admin_only),
    db: Session = Depends(get_db),
    sink: ActivitySink = Depends(get_activity_sink),
    ctx: RequestContext = Depends(request_context),
):
    """
    Flip ``is_active``.  A disabled user can no longer log in or refresh;
    access tokens already issued run until they expire.
    """
    if user_id == admin.user_id:
        raise Forbidden("You cannot deactivate your own account")

    user = _get_user(user_id, db)
    user.is_active = not user.is_active
    user.updated_at = clock.now()
    db.commit()

    action = activity.ACTIVATE_USER if user.is_active else activity.DEACTIVATE_USER
    sink.record(action, user_name=admin.full_name, user_id=admin.user_id,
                details=f"{'Activated' if user.is_active else 'Deactivated'} user {user.full_name} ({user.email})",
                ctx=ctx)
    return Envelope(
        message="User activated" if user.is_active else "User deactivated",
        data=ActiveStatus(is_active=user.is_active),
    )
