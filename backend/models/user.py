# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""User ORM model and the closed set of staff roles."""

import enum

from sqlalchemy import Column, Integer, String, Text, Boolean, Enum, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database import Base


class Role(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"
    USER = "user"
    SALES = "sales"
    SALES_COORDINATOR = "salescoordinator"
    FRONT_OFFICE = "frontoffice"
    HOUSEKEEPING = "housekeeping"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    # passlib hash string; the salt is embedded in it
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    # Persist the enum *values* ("frontoffice"), not the member names
    role = Column(
        Enum(Role, name="user_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=Role.USER,
    )
    department = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    avatar = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # Removing a user removes every refresh token they hold (FK cascade).
    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
