# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the user-administration endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from core.schemas import CamelModel
from models.user import Role


# -- Requests --------------------------------------------------------------
# Role is typed as the enum, so an unknown role is a 422 before any handler
# code runs.


class CreateUserRequest(CamelModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=2, max_length=255)
    role: Role = Role.USER
    department: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)
    avatar: Optional[str] = None
    is_active: bool = True


class UpdateUserRequest(CamelModel):
    email: Optional[str] = Field(default=None, min_length=3, max_length=255)
    full_name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    role: Optional[Role] = None
    department: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)
    avatar: Optional[str] = None
    is_active: Optional[bool] = None


class UpdateProfileRequest(CamelModel):
    email: Optional[str] = Field(default=None, min_length=3, max_length=255)
    full_name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    department: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)


class ResetPasswordRequest(CamelModel):
    new_password: str = Field(min_length=6)


# -- Responses -------------------------------------------------------------
# No password data – the hash column is simply not part of the schema.


class UserOut(CamelModel):
    id: int
    email: str
    full_name: str
    role: Role
    department: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ActiveStatus(CamelModel):
    is_active: bool
