# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Registration-number allocation for guest intake.

Numbers come from a single counter row in ``registration_sequences``::

    UPDATE registration_sequences SET last_value = last_value + 1 WHERE name = 'guest'
    SELECT last_value FROM registration_sequences WHERE name = 'guest'

The UPDATE takes a row lock that is held until the caller's transaction
ends, so two desks registering at the same moment are serialised and never
see the same value.  The guest INSERT must run in that same transaction.

The first allocation seeds the counter from the guest with the highest
primary key (registration numbers are text, so ordering by the column
itself would put "10" before "9").  With no guests at all the first number
is "1".  Numbers are never reissued, even after the guest holding the
highest one is deleted.
"""

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.logger import logger
from models.guest import Guest, RegistrationSequence

GUEST_SEQUENCE = "guest"


def _highest_existing(db: Session) -> int:
    """Registration number of the most recently inserted guest, or 0."""
    latest = db.query(Guest.reg_number).order_by(Guest.id.desc()).first()
    if latest is None:
        return 0
    try:
        return int(latest.reg_number)
    except (TypeError, ValueError):
        logger.warning("Non-numeric registration number %r ignored when seeding", latest.reg_number)
        return 0


def _bump(db: Session, name: str) -> bool:
    result = db.execute(
        update(RegistrationSequence)
        .where(RegistrationSequence.name == name)
        .values(last_value=RegistrationSequence.last_value + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def _seed(db: Session, name: str) -> None:
    """Create the counter row.  Losing the race to another seeder is fine."""
    savepoint = db.begin_nested()
    try:
        db.add(RegistrationSequence(name=name, last_value=_highest_existing(db)))
        savepoint.commit()
    except IntegrityError:
        savepoint.rollback()


def allocate_next(db: Session, name: str = GUEST_SEQUENCE) -> str:
    """
    Reserve and return the next registration number as a decimal string.

    Does not commit: the number belongs to the caller's transaction and is
    released again if that transaction rolls back.
    """
    if not _bump(db, name):
        _seed(db, name)
        if not _bump(db, name):
            raise RuntimeError(f"registration sequence {name!r} could not be initialised")

    value = (
        db.query(RegistrationSequence.last_value)
        .filter(RegistrationSequence.name == name)
        .scalar()
    )
    return str(value)
