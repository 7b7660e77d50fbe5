# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""Pydantic response models for the activity-log endpoints."""

from datetime import datetime
from typing import Optional

from core.schemas import CamelModel


class ActivityLogRow(CamelModel):
    id: int
    user_id: Optional[int] = None
    user_name: str
    action: str
    details: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime


class GuestRegistrationLogRow(CamelModel):
    id: int
    guest_id: Optional[int] = None
    guest_name: str
    reg_number: str
    action: str
    details: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime


class ActivityStats(CamelModel):
    today_activities: int
    week_activities: int
    today_logins: int
