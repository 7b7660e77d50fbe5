import os
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_hotel.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
# Cheap hashes keep the suite fast; production uses the default
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "1000")

from core.security import hash_password  # noqa: E402
from database import Base, SessionLocal, engine  # noqa: E402
import models  # noqa: E402,F401
from models.user import Role, User  # noqa: E402
from main import app  # noqa: E402

ADMIN_EMAIL = "admin@hotel.com"
PASSWORD = "Passw0rd!"


@pytest.fixture(autouse=True, scope="function")
def _create_test_database() -> Generator[None, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def create_user(db_session) -> Callable[..., User]:
    def _create(email: str, role: Role = Role.USER, password: str = PASSWORD,
                full_name: str | None = None, is_active: bool = True) -> User:
        user = User(
            email=email,
            password_hash=hash_password(password),
            full_name=full_name or email.split("@")[0].title(),
            role=role,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create


@pytest.fixture()
def admin(create_user) -> User:
    return create_user(ADMIN_EMAIL, Role.ADMIN, full_name="System Administrator")


@pytest.fixture()
def manager(create_user) -> User:
    return create_user("manager@hotel.com", Role.MANAGER, full_name="Hotel Manager")


@pytest.fixture()
def front_office(create_user) -> User:
    return create_user("frontoffice@hotel.com", Role.FRONT_OFFICE, full_name="Front Office Staff")


@pytest.fixture()
def housekeeping(create_user) -> User:
    return create_user("housekeeping@hotel.com", Role.HOUSEKEEPING, full_name="Housekeeping Staff")


def login(client: TestClient, email: str, password: str = PASSWORD) -> dict:
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["data"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_headers(client) -> Callable[[User], dict[str, str]]:
    def _headers(user: User) -> dict[str, str]:
        return bearer(login(client, user.email)["accessToken"])

    return _headers
