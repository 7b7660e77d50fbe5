# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""Guest intake record and the counter used to number registrations."""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from sqlalchemy.sql import func

from database import Base


class Guest(Base):
    __tablename__ = "guests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Human-facing number printed on the registration card.  Text column,
    # decimal digits only, allocated by guests.numbering – never by clients.
    reg_number = Column(String(32), unique=True, nullable=False)
    first_name = Column(String(255), nullable=False)
    middle_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=False)
    gender = Column(String(20), nullable=True)
    passport_no = Column(String(50), nullable=True)
    nationality = Column(String(100), nullable=True)
    birth_date = Column(String(20), nullable=True)
    check_out_date = Column(String(20), nullable=True)
    phone_no = Column(String(30), nullable=True)
    flight_number = Column(String(20), nullable=True)
    # Optional second guest sharing the room
    guest2_first_name = Column(String(255), nullable=True)
    guest2_middle_name = Column(String(255), nullable=True)
    guest2_last_name = Column(String(255), nullable=True)
    room_number = Column(String(20), nullable=True)
    image = Column(Text, nullable=True)  # photo reference (URL or path)
    checked_in = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)


class RegistrationSequence(Base):
    """One row per named counter; ``last_value`` is the last number handed out."""

    __tablename__ = "registration_sequences"

    name = Column(String(64), primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)
