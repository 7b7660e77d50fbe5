"""Unit tests for the role gate."""
import pytest

from core.errors import Forbidden, Unauthorized
from core.security import (
    Identity,
    admin_only,
    check_role,
    front_desk,
    manager_and_above,
    staff_and_above,
)
from models.user import Role

FRONT_DESK = frozenset({Role.ADMIN, Role.MANAGER, Role.STAFF, Role.FRONT_OFFICE})


def _identity(role: Role) -> Identity:
    return Identity(user_id=1, email="x@hotel.com", role=role, full_name="X")


def test_missing_identity_is_unauthorized():
    with pytest.raises(Unauthorized):
        check_role(None, FRONT_DESK)


@pytest.mark.parametrize("role", [Role.HOUSEKEEPING, Role.SALES, Role.USER])
def test_role_outside_gate_is_forbidden(role):
    with pytest.raises(Forbidden):
        check_role(_identity(role), FRONT_DESK)


def test_allowed_role_passes_through():
    identity = _identity(Role.FRONT_OFFICE)

    assert check_role(identity, FRONT_DESK) is identity


def test_identity_from_payload_falls_back_to_email():
    identity = Identity.from_payload({"user_id": 3, "email": "a@hotel.com", "role": "staff"})

    assert identity.role is Role.STAFF
    assert identity.full_name == "a@hotel.com"


def test_predefined_gates():
    staff = _identity(Role.STAFF)

    assert staff_and_above(staff) is staff
    assert front_desk(_identity(Role.FRONT_OFFICE)).role is Role.FRONT_OFFICE
    with pytest.raises(Forbidden):
        admin_only(staff)
    with pytest.raises(Forbidden):
        manager_and_above(staff)
    with pytest.raises(Forbidden):
        staff_and_above(_identity(Role.FRONT_OFFICE))
