# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the guest endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from core.schemas import CamelModel


# -- Requests --------------------------------------------------------------
# There is deliberately no reg_number field: the server allocates it, and
# unknown keys in the body are ignored.


class GuestCreate(CamelModel):
    first_name: str = Field(min_length=1, max_length=255)
    middle_name: Optional[str] = Field(default=None, max_length=255)
    last_name: str = Field(min_length=1, max_length=255)
    gender: Optional[str] = Field(default=None, max_length=20)
    passport_no: Optional[str] = Field(default=None, max_length=50)
    nationality: Optional[str] = Field(default=None, max_length=100)
    birth_date: Optional[str] = Field(default=None, max_length=20)
    check_out_date: Optional[str] = Field(default=None, max_length=20)
    phone_no: Optional[str] = Field(default=None, max_length=30)
    flight_number: Optional[str] = Field(default=None, max_length=20)
    guest2_first_name: Optional[str] = Field(default=None, max_length=255)
    guest2_middle_name: Optional[str] = Field(default=None, max_length=255)
    guest2_last_name: Optional[str] = Field(default=None, max_length=255)
    room_number: Optional[str] = Field(default=None, max_length=20)
    image: Optional[str] = None


class GuestUpdate(CamelModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    middle_name: Optional[str] = Field(default=None, max_length=255)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    gender: Optional[str] = Field(default=None, max_length=20)
    passport_no: Optional[str] = Field(default=None, max_length=50)
    nationality: Optional[str] = Field(default=None, max_length=100)
    birth_date: Optional[str] = Field(default=None, max_length=20)
    check_out_date: Optional[str] = Field(default=None, max_length=20)
    phone_no: Optional[str] = Field(default=None, max_length=30)
    flight_number: Optional[str] = Field(default=None, max_length=20)
    guest2_first_name: Optional[str] = Field(default=None, max_length=255)
    guest2_middle_name: Optional[str] = Field(default=None, max_length=255)
    guest2_last_name: Optional[str] = Field(default=None, max_length=255)
    room_number: Optional[str] = Field(default=None, max_length=20)
    image: Optional[str] = None
    checked_in: Optional[bool] = None


# -- Responses -------------------------------------------------------------


class GuestOut(CamelModel):
    id: int
    reg_number: str
    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    gender: Optional[str] = None
    passport_no: Optional[str] = None
    nationality: Optional[str] = None
    birth_date: Optional[str] = None
    check_out_date: Optional[str] = None
    phone_no: Optional[str] = None
    flight_number: Optional[str] = None
    guest2_first_name: Optional[str] = None
    guest2_middle_name: Optional[str] = None
    guest2_last_name: Optional[str] = None
    room_number: Optional[str] = None
    image: Optional[str] = None
    checked_in: bool
    created_at: datetime
