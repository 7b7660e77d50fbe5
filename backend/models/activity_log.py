# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Append-only audit tables.

* ActivityLog          – staff actions (login, user admin, profile changes).
* GuestRegistrationLog – guest intake events (registration, check-in/out).

Rows are written through core.activity.ActivitySink and never updated.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func

from database import Base


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # The acting user (NULL for failed logins against unknown emails, or
    # after the user has been deleted)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    # Snapshot of the display name (or the attempted email) at write time
    user_name = Column(String(255), nullable=False)
    action = Column(String(100), nullable=False, index=True)   # e.g. "LOGIN_FAILED"
    details = Column(Text, nullable=True)
    ip_address = Column(String(45), nullable=True)             # supports IPv6
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)


class GuestRegistrationLog(Base):
    __tablename__ = "guest_registration_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    guest_id = Column(
        Integer,
        ForeignKey("guests.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    guest_name = Column(String(255), nullable=False)
    reg_number = Column(String(32), nullable=False)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    action = Column(String(100), nullable=False, index=True)   # REGISTRATION / CHECK_IN / CHECK_OUT
    details = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
