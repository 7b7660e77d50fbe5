# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Guest endpoints – public registration plus front-desk management.

* ``POST /guests`` is open: it backs the self-service registration form.
  The registration number is always allocated server-side.
* Everything else requires a front-desk role (admin, manager, staff,
  front office).
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core import activity
from core.activity import ActivitySink, RequestContext, get_activity_sink, request_context
from core.errors import Conflict, NotFound
from core.logger import logger
from core.schemas import Envelope, Page, Pagination
from core.security import Identity, front_desk
from database import LIKE_ESCAPE, get_db, like_pattern
from guests.numbering import allocate_next
from guests.schemas import GuestCreate, GuestOut, GuestUpdate
from models.guest import Guest

router = APIRouter(prefix="/guests", tags=["guests"])

# Columns that may not be cleared through a partial update
_REQUIRED_FIELDS = {"first_name", "last_name"}


def _get_guest(guest_id: int, db: Session) -> Guest:
    guest = db.query(Guest).filter(Guest.id == guest_id).first()
    if not guest:
        raise NotFound("Guest not found")
    return guest


# ---------------------------------------------------------------------------
# POST /guests  – public registration
# ---------------------------------------------------------------------------


@router.post("", response_model=Envelope[GuestOut], status_code=status.HTTP_201_CREATED)
def register_guest(
    body: GuestCreate,
    db: Session = Depends(get_db),
    sink: ActivitySink = Depends(get_activity_sink),
    ctx: RequestContext = Depends(request_context),
):
    """Create an intake record with the next registration number."""
    reg_number = allocate_next(db)
    guest = Guest(**body.model_dump(), reg_number=reg_number, checked_in=False)
    db.add(guest)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Registration number %s collided on insert", reg_number)
        raise Conflict("Registration number already in use, please try again")
    db.refresh(guest)

    logger.info("Guest registered id=%s reg_number=%s", guest.id, guest.reg_number)
    sink.record_guest_event(activity.REGISTRATION, guest.id, guest.display_name,
                            guest.reg_number, details="Registration form", ctx=ctx)
    return Envelope(message="Registration complete", data=GuestOut.model_validate(guest))


# ---------------------------------------------------------------------------
# GET /guests  – filtered, paginated list
# ---------------------------------------------------------------------------


@router.get("", response_model=Envelope[Page[GuestOut]])
def list_guests(
    search: Optional[str] = Query(None, description="Substring of names, flight or registration number"),
    status_filter: Literal["all", "checkedIn", "notCheckedIn"] = Query("all", alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    _: Identity = Depends(front_desk),
    db: Session = Depends(get_db),
):
    """Newest registrations first."""
    q = db.query(Guest)

    if search:
        pattern = like_pattern(search)
        q = q.filter(or_(*(
            column.ilike(pattern, escape=LIKE_ESCAPE)
            for column in (
                Guest.first_name,
                Guest.last_name,
                Guest.guest2_first_name,
                Guest.guest2_last_name,
                Guest.flight_number,
                Guest.reg_number,
            )
        )))
    if status_filter == "checkedIn":
        q = q.filter(Guest.checked_in.is_(True))
    elif status_filter == "notCheckedIn":
        q = q.filter(Guest.checked_in.is_(False))

    total = q.count()
    rows = (
        q.order_by(Guest.created_at.desc(), Guest.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return Envelope(data=Page(
        items=[GuestOut.model_validate(g) for g in rows],
        pagination=Pagination.build(page, limit, total),
    ))


# ---------------------------------------------------------------------------
# GET /guests/{id}
# ---------------------------------------------------------------------------


@router.get("/{guest_id}", response_model=Envelope[GuestOut])
def get_guest(
    guest_id: int,
    _: Identity = Depends(front_desk),
    db: Session = Depends(get_db),
):
    return Envelope(data=GuestOut.model_validate(_get_guest(guest_id, db)))


# ---------------------------------------------------------------------------
# PUT /guests/{id}  – partial edit
# ---------------------------------------------------------------------------


@router.put("/{guest_id}", response_model=Envelope[GuestOut])
def update_guest(
    guest_id: int,
    body: GuestUpdate,
    identity: Identity = Depends(front_desk),
    db: Session = Depends(get_db),
    sink: ActivitySink = Depends(get_activity_sink),
    ctx: RequestContext = Depends(request_context),
):
    """Only the fields present in the body are written."""
    guest = _get_guest(guest_id, db)

    applied = []
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(guest, field, value)
        applied.append(field)
    db.commit()
    db.refresh(guest)

    sink.record(activity.UPDATE_GUEST, user_name=identity.full_name, user_id=identity.user_id,
                details=f"Edited guest #{guest.reg_number}: {', '.join(sorted(applied)) or 'no changes'}",
                ctx=ctx)
    return Envelope(message="Guest updated", data=GuestOut.model_validate(guest))


# ---------------------------------------------------------------------------
# DELETE /guests/{id}
# ---------------------------------------------------------------------------


@router.delete("/{guest_id}", response_model=Envelope)
def delete_guest(
    guest_id: int,
    identity: Identity = Depends(front_desk),
    db: Session = Depends(get_db),
    sink: ActivitySink = Depends(get_activity_sink),
    ctx: RequestContext = Depends(request_context),
):
    """Remove the record.  Its registration number is not handed out again."""
    guest = _get_guest(guest_id, db)
    summary = f"Deleted guest #{guest.reg_number}: {guest.display_name}"
    db.delete(guest)
    db.commit()

    sink.record(activity.DELETE_GUEST, user_name=identity.full_name, user_id=identity.user_id,
                details=summary, ctx=ctx)
    return Envelope(message="Guest deleted")


# ---------------------------------------------------------------------------
# PATCH /guests/{id}/check-in  – toggle
# ---------------------------------------------------------------------------


@router.patch("/{guest_id}/check-in", response_model=Envelope[GuestOut])
def toggle_check_in(
    guest_id: int,
    identity: Identity = Depends(front_desk),
    db: Session = Depends(get_db),
    sink: ActivitySink = Depends(get_activity_sink),
    ctx: RequestContext = Depends(request_context),
):
    """Flip the checked-in flag and record a CHECK_IN / CHECK_OUT event."""
    guest = _get_guest(guest_id, db)
    guest.checked_in = not guest.checked_in
    db.commit()
    db.refresh(guest)

    action = activity.CHECK_IN if guest.checked_in else activity.CHECK_OUT
    sink.record_guest_event(action, guest.id, guest.display_name, guest.reg_number,
                            details=f"By {identity.full_name}", ctx=ctx)
    return Envelope(data=GuestOut.model_validate(guest))
