# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Best-effort activity log sink.

Callers invoke ``record`` / ``record_guest_event`` and move on: the write
happens in its own session, and any failure is logged to the operational
log and dropped.  The business action that triggered the entry succeeds or
fails on its own – an audit write can never roll it back.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Request
from sqlalchemy.orm import Session

from core.logger import logger
from core.security import get_client_ip
from database import SessionLocal
from models.activity_log import ActivityLog, GuestRegistrationLog


# Action vocabulary for ActivityLog.action
LOGIN = "LOGIN"
LOGIN_FAILED = "LOGIN_FAILED"
LOGOUT = "LOGOUT"
CREATE_USER = "CREATE_USER"
UPDATE_USER = "UPDATE_USER"
DELETE_USER = "DELETE_USER"
CHANGE_PASSWORD = "CHANGE_PASSWORD"
CHANGE_PASSWORD_FAILED = "CHANGE_PASSWORD_FAILED"
RESET_PASSWORD = "RESET_PASSWORD"
ACTIVATE_USER = "ACTIVATE_USER"
DEACTIVATE_USER = "DEACTIVATE_USER"
UPDATE_PROFILE = "UPDATE_PROFILE"
UPDATE_GUEST = "UPDATE_GUEST"
DELETE_GUEST = "DELETE_GUEST"

# Action vocabulary for GuestRegistrationLog.action
REGISTRATION = "REGISTRATION"
CHECK_IN = "CHECK_IN"
CHECK_OUT = "CHECK_OUT"


@dataclass(frozen=True)
class RequestContext:
    """Who is on the other end of the wire, as far as we can tell."""

    ip_address: str = "unknown"
    user_agent: str = "unknown"


def request_context(request: Request) -> RequestContext:
    """FastAPI dependency: capture requester IP and user agent."""
    return RequestContext(
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("User-Agent") or "unknown",
    )


class ActivitySink:
    """Append-only writer for the audit tables."""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self._session_factory = session_factory

    def record(
        self,
        action: str,
        user_name: str,
        user_id: Optional[int] = None,
        details: Optional[str] = None,
        ctx: RequestContext = RequestContext(),
    ) -> None:
        self._write(ActivityLog(
            user_id=user_id,
            user_name=user_name,
            action=action,
            details=details,
            ip_address=ctx.ip_address,
            user_agent=ctx.user_agent,
        ))

    def record_guest_event(
        self,
        action: str,
        guest_id: Optional[int],
        guest_name: str,
        reg_number: str,
        details: Optional[str] = None,
        ctx: RequestContext = RequestContext(),
    ) -> None:
        self._write(GuestRegistrationLog(
            guest_id=guest_id,
            guest_name=guest_name,
            reg_number=reg_number,
            action=action,
            details=details,
            ip_address=ctx.ip_address,
            user_agent=ctx.user_agent,
        ))

    def _write(self, row) -> None:
        try:
            db = self._session_factory()
        except Exception:
            logger.exception("Failed to open session for %s", type(row).__name__)
            return

        try:
            db.add(row)
            db.commit()
        except Exception:
            # Never propagated: the triggering action must not depend on this
            db.rollback()
            logger.exception("Failed to write %s action=%s", type(row).__name__, row.action)
        finally:
            db.close()


# Module-level singleton – replaced in tests via app.dependency_overrides
activity_sink = ActivitySink()


def get_activity_sink() -> ActivitySink:
    """FastAPI dependency returning the process-wide sink."""
    return activity_sink
