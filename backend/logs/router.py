# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Activity-log endpoints – paginated audit trail, dashboard counters, guest
registration history and an Excel export.

Admin only.  The tables are append-only; nothing here writes to them.
"""

import io
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from sqlalchemy.orm import Session

from core import activity, clock
from core.schemas import Envelope, Page, Pagination
from core.security import Identity, admin_only
from database import LIKE_ESCAPE, get_db, like_pattern
from logs.schemas import ActivityLogRow, ActivityStats, GuestRegistrationLogRow
from models.activity_log import ActivityLog, GuestRegistrationLog

router = APIRouter(prefix="/logs", tags=["logs"])


def _filtered(q, model, action, start_date, end_date):
    if action:
        q = q.filter(model.action.ilike(like_pattern(action), escape=LIKE_ESCAPE))
    if start_date:
        q = q.filter(model.created_at >= start_date)
    if end_date:
        q = q.filter(model.created_at <= end_date)
    return q


# ---------------------------------------------------------------------------
# GET /logs  – staff activity, newest first
# ---------------------------------------------------------------------------


@router.get("", response_model=Envelope[Page[ActivityLogRow]])
def list_activity_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user_id: int | None = Query(None, alias="userId"),
    action: str | None = Query(None, description="Case-insensitive substring of the action tag"),
    start_date: datetime | None = Query(None, alias="startDate", description="ISO-8601 start of time window"),
    end_date: datetime | None = Query(None, alias="endDate", description="ISO-8601 end of time window"),
    _: Identity = Depends(admin_only),
    db: Session = Depends(get_db),
):
    q = db.query(ActivityLog)
    if user_id is not None:
        q = q.filter(ActivityLog.user_id == user_id)
    q = _filtered(q, ActivityLog, action, start_date, end_date)

    total = q.count()
    rows = (
        q.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return Envelope(data=Page(
        items=[ActivityLogRow.model_validate(r) for r in rows],
        pagination=Pagination.build(page, limit, total),
    ))


# ---------------------------------------------------------------------------
# GET /logs/stats  – dashboard counters
# ---------------------------------------------------------------------------


@router.get("/stats", response_model=Envelope[ActivityStats])
def activity_stats(
    _: Identity = Depends(admin_only),
    db: Session = Depends(get_db),
):
    """Counts since midnight (UTC) today and over the last seven days."""
    today = clock.now().replace(hour=0, minute=0, second=0, microsecond=0)
    week_ago = today - timedelta(days=7)

    base = db.query(ActivityLog)
    return Envelope(data=ActivityStats(
        today_activities=base.filter(ActivityLog.created_at >= today).count(),
        week_activities=base.filter(ActivityLog.created_at >= week_ago).count(),
        today_logins=base.filter(
            ActivityLog.created_at >= today,
            ActivityLog.action == activity.LOGIN,
        ).count(),
    ))


# ---------------------------------------------------------------------------
# GET /logs/guest-registrations
# ---------------------------------------------------------------------------


@router.get("/guest-registrations", response_model=Envelope[Page[GuestRegistrationLogRow]])
def list_guest_registration_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    action: str | None = Query(None),
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
    _: Identity = Depends(admin_only),
    db: Session = Depends(get_db),
):
    q = _filtered(db.query(GuestRegistrationLog), GuestRegistrationLog, action, start_date, end_date)

    total = q.count()
    rows = (
        q.order_by(GuestRegistrationLog.created_at.desc(), GuestRegistrationLog.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return Envelope(data=Page(
        items=[GuestRegistrationLogRow.model_validate(r) for r in rows],
        pagination=Pagination.build(page, limit, total),
    ))


# ---------------------------------------------------------------------------
# GET /logs/export  – download activity logs as Excel
# ---------------------------------------------------------------------------

_HEADER_FONT  = Font(name="Calibri", size=11, bold=True, color="FFFFFF")
_HEADER_FILL  = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
_HEADER_ALIGN = Alignment(horizontal="center", vertical="center")
_THIN_BORDER  = Border(
    left=Side(style="thin", color="CCCCCC"),
    right=Side(style="thin", color="CCCCCC"),
    top=Side(style="thin", color="CCCCCC"),
    bottom=Side(style="thin", color="CCCCCC"),
)

EXPORT_HEADERS = ["ID", "Time (UTC)", "User", "Action", "IP Address", "User Agent", "Details"]
_COL_WIDTHS = [8, 20, 28, 22, 16, 36, 50]


@router.get("/export")
def export_activity_logs(
    _: Identity = Depends(admin_only),
    db: Session = Depends(get_db),
):
    """Export the whole activity log, newest first, as an .xlsx workbook."""
    rows = db.query(ActivityLog).order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc()).all()

    wb = Workbook()
    ws = wb.active
    ws.title = "Activity Logs"

    ws.append(EXPORT_HEADERS)
    for cell in ws[1]:
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = _HEADER_ALIGN
        cell.border = _THIN_BORDER

    for row in rows:
        created = clock.as_utc(row.created_at)
        ws.append([
            row.id,
            created.strftime("%Y-%m-%d %H:%M:%S") if created else "",
            row.user_name,
            row.action,
            row.ip_address or "",
            row.user_agent or "",
            row.details or "",
        ])
        for col_idx in range(1, len(EXPORT_HEADERS) + 1):
            ws.cell(row=ws.max_row, column=col_idx).border = _THIN_BORDER

    for col_idx, width in enumerate(_COL_WIDTHS, start=1):
        ws.column_dimensions[chr(64 + col_idx)].width = width

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    wb.close()

    return StreamingResponse(
        buf,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": 'attachment; filename="activity-logs.xlsx"'},
    )
