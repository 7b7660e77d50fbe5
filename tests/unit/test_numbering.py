"""Unit tests for registration-number allocation."""
from guests.numbering import GUEST_SEQUENCE, allocate_next
from models.guest import Guest, RegistrationSequence


def _add_guest(db, reg_number):
    db.add(Guest(reg_number=reg_number, first_name="A", last_name="B"))
    db.commit()


def test_empty_store_starts_at_one(db_session):
    assert allocate_next(db_session) == "1"


def test_allocations_are_sequential(db_session):
    assert [allocate_next(db_session) for _ in range(3)] == ["1", "2", "3"]


def test_counter_is_seeded_from_latest_guest(db_session):
    _add_guest(db_session, "9")
    _add_guest(db_session, "41")

    assert allocate_next(db_session) == "42"


def test_rollback_releases_the_number(db_session):
    allocate_next(db_session)
    db_session.commit()

    allocate_next(db_session)
    db_session.rollback()

    assert allocate_next(db_session) == "2"


def test_counter_survives_deletion_of_latest_guest(db_session):
    _add_guest(db_session, allocate_next(db_session))
    last = allocate_next(db_session)
    _add_guest(db_session, last)

    db_session.query(Guest).filter(Guest.reg_number == last).delete()
    db_session.commit()

    assert allocate_next(db_session) == "3"
    assert db_session.get(RegistrationSequence, GUEST_SEQUENCE).last_value == 3
