"""Unit tests for password hashing and the token service."""
from datetime import timedelta

import jwt

from core.config import settings
from core.security import (
    hash_password,
    issue_access_token,
    issue_refresh_token,
    verify_access_token,
    verify_password,
    verify_refresh_token,
)
from models.user import Role, User


def _user(**overrides) -> User:
    fields = {"id": 7, "email": "desk@hotel.com", "full_name": "Desk Clerk", "role": Role.FRONT_OFFICE}
    fields.update(overrides)
    return User(**fields)


class TestPasswordHashing:
    """Hashes are salted and verify only the original password."""

    def test_hash_and_verify(self):
        hashed = hash_password("s3cret!")

        assert hashed != "s3cret!"
        assert verify_password("s3cret!", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_same_password_different_hashes(self):
        assert hash_password("s3cret!") != hash_password("s3cret!")

    def test_malformed_hash_never_matches(self):
        assert verify_password("s3cret!", "not-a-hash") is False


class TestAccessTokens:
    def test_claims_round_trip(self):
        payload = verify_access_token(issue_access_token(_user()))

        assert payload["user_id"] == 7
        assert payload["email"] == "desk@hotel.com"
        assert payload["role"] == "frontoffice"
        assert payload["full_name"] == "Desk Clerk"
        assert payload["type"] == "access"

    def test_expired_token_is_rejected(self):
        token = issue_access_token(_user(), expires_delta=timedelta(seconds=-5))

        assert verify_access_token(token) is None

    def test_tampered_token_is_rejected(self):
        token = issue_access_token(_user())
        forged = jwt.encode(
            {**jwt.decode(token, options={"verify_signature": False}), "role": "admin"},
            "some-other-key-that-is-long-enough-for-hs256",
            algorithm="HS256",
        )

        assert verify_access_token(forged) is None

    def test_unknown_role_is_rejected(self):
        token = jwt.encode(
            {"user_id": 1, "email": "x@hotel.com", "role": "concierge", "type": "access"},
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
        )

        assert verify_access_token(token) is None

    def test_garbage_is_rejected(self):
        assert verify_access_token("not.a.jwt") is None


class TestRefreshTokens:
    def test_refresh_tokens_are_unique(self):
        user = _user()

        assert issue_refresh_token(user) != issue_refresh_token(user)

    def test_types_are_not_interchangeable(self):
        user = _user()

        assert verify_refresh_token(issue_access_token(user)) is None
        assert verify_access_token(issue_refresh_token(user)) is None
        assert verify_refresh_token(issue_refresh_token(user))["user_id"] == 7
