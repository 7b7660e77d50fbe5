# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Central security module.  All cryptographic primitives and auth guards live
here.  No other module should touch raw crypto directly.

Responsibilities
----------------
1. Password hashing / verification          (passlib pbkdf2_sha256)
2. JWT issuance / verification              (PyJWT / HS256)
3. FastAPI dependency guards                (authenticate, require_role …)
4. Client IP extraction
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import jwt as _jwt        # PyJWT
from passlib.hash import pbkdf2_sha256 as _pbkdf2  # pure Python, no binary deps
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from core import clock
from core.config import settings
from core.errors import Forbidden, NotFound, Unauthorized
from database import get_db
from models.user import Role, User

# ---------------------------------------------------------------------------
# 1.  pbkdf2_sha256 – password hashing  (pure Python, no glibc constraint)
# ---------------------------------------------------------------------------
# bcrypt 4.x abi3 wheels require GLIBC_2.34 and newer bcrypt releases break
# passlib's backend probe; pbkdf2_sha256 has neither problem.  The round
# count comes from settings so the test suite can run with a cheap hash.
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Hash a plaintext password.  The salt is embedded in the returned string."""
    return _pbkdf2.using(rounds=settings.password_hash_rounds).hash(plain)


def verify_password(plain: str, stored_hash: str) -> bool:
    """
    Constant-time verification of a plaintext password against a hash
    produced by :func:`hash_password`.  A malformed stored hash never
    matches.
    """
    try:
        return _pbkdf2.verify(plain, stored_hash)
    except (ValueError, TypeError):
        return False


# ---------------------------------------------------------------------------
# 2.  JWT – access and refresh tokens
# ---------------------------------------------------------------------------
# Access tokens are verified statelessly.  Refresh tokens are additionally
# checked against the refresh_tokens table by auth.service – a signature is
# necessary but not sufficient.

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def _role_value(role) -> str:
    return Role(role).value


def issue_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a short-lived access token carrying the caller's identity and role.
    """
    expire = clock.now() + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {
        "sub": str(user.id),
        "user_id": user.id,
        "email": user.email,
        "role": _role_value(user.role),
        "full_name": user.full_name,
        "type": ACCESS_TOKEN_TYPE,
        "exp": expire,
    }
    return _jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def issue_refresh_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a refresh token.  ``jti`` makes every token unique even when the
    same user logs in twice within one second.
    """
    expire = clock.now() + (
        expires_delta or timedelta(days=settings.refresh_token_expire_days)
    )
    payload = {
        "sub": str(user.id),
        "user_id": user.id,
        "type": REFRESH_TOKEN_TYPE,
        "jti": secrets.token_hex(16),
        "exp": expire,
    }
    return _jwt.encode(payload, settings.refresh_signing_key, algorithm=settings.jwt_algorithm)


def refresh_token_expiry() -> datetime:
    """Expiry stamped on the refresh_tokens row for a token minted now."""
    return clock.now() + timedelta(days=settings.refresh_token_expire_days)


def _decode(token: str, key: str) -> Optional[dict]:
    try:
        return _jwt.decode(token, key, algorithms=[settings.jwt_algorithm])
    except _jwt.PyJWTError:
        return None


def verify_access_token(token: str) -> Optional[dict]:
    """
    Return the payload of a valid access token, or None.  Never raises:
    expired, tampered, malformed and wrong-type tokens all look the same.
    """
    payload = _decode(token, settings.secret_key)
    if payload is None or payload.get("type") != ACCESS_TOKEN_TYPE:
        return None
    if not isinstance(payload.get("user_id"), int) or not payload.get("email"):
        return None
    if payload.get("role") not in {r.value for r in Role}:
        return None
    return payload


def verify_refresh_token(token: str) -> Optional[dict]:
    """Like :func:`verify_access_token` but only accepts ``type == "refresh"``."""
    payload = _decode(token, settings.refresh_signing_key)
    if payload is None or payload.get("type") != REFRESH_TOKEN_TYPE:
        return None
    if not isinstance(payload.get("user_id"), int):
        return None
    return payload


# ---------------------------------------------------------------------------
# 3.  FastAPI dependency guards
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Identity:
    """Caller identity decoded from an access token."""

    user_id: int
    email: str
    role: Role
    full_name: str

    @classmethod
    def from_payload(cls, payload: dict) -> "Identity":
        return cls(
            user_id=payload["user_id"],
            email=payload["email"],
            role=Role(payload["role"]),
            full_name=payload.get("full_name") or payload["email"],
        )


# The tokenUrl here is only used by the auto-generated OpenAPI docs.
# auto_error=False so a missing header produces our own 401 envelope.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def authenticate(request: Request, token: Optional[str] = Depends(oauth2_scheme)) -> Identity:
    """
    Dependency: resolve the bearer token into an :class:`Identity` and attach
    it to ``request.state.identity``.  Purely stateless – no DB lookup.
    """
    if not token:
        raise Unauthorized("Please log in")

    payload = verify_access_token(token)
    if payload is None:
        raise Unauthorized("Token invalid or expired")

    identity = Identity.from_payload(payload)
    request.state.identity = identity
    return identity


def check_role(identity: Optional[Identity], allowed: frozenset) -> Identity:
    """
    Assert that *identity* holds one of the *allowed* roles.  A missing
    identity means authentication never ran, which is a 401, not a crash.
    """
    if identity is None:
        raise Unauthorized("Please log in")
    if identity.role not in allowed:
        raise Forbidden()
    return identity


def require_role(*roles: Role):
    """Build a dependency that authenticates and then applies :func:`check_role`."""
    allowed = frozenset(Role(r) for r in roles)

    def _gate(identity: Identity = Depends(authenticate)) -> Identity:
        return check_role(identity, allowed)

    return _gate


admin_only = require_role(Role.ADMIN)
manager_and_above = require_role(Role.ADMIN, Role.MANAGER)
staff_and_above = require_role(Role.ADMIN, Role.MANAGER, Role.STAFF)
# Guest records are handled at the front desk as well as by management
front_desk = require_role(Role.ADMIN, Role.MANAGER, Role.STAFF, Role.FRONT_OFFICE)


def get_current_user(
    identity: Identity = Depends(authenticate),
    db=Depends(get_db),
) -> User:
    """
    Dependency: load the User row behind the token.  Raises 404 if the
    account has been deleted since the token was issued.
    """
    user = db.query(User).filter(User.id == identity.user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


# -- IP Address extraction ----------------------------------------------------


def get_client_ip(request: Request) -> str:
    """
    Extract the client IP address from the request.
    Checks X-Forwarded-For header first (for proxies), then falls back to client host.
    Returns the IP address as a string (supports both IPv4 and IPv6).
    """
    # X-Forwarded-For can contain multiple IPs, take the first (original client)
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"
