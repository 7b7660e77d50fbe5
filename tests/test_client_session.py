import pytest

from client.session import ApiError, HotelClient, JsonFileTokenStore, MemoryTokenStore, SessionContext
from conftest import ADMIN_EMAIL, PASSWORD


@pytest.fixture()
def hotel(client):
    return HotelClient(session=SessionContext(MemoryTokenStore()), http=client)


def test_login_populates_session(hotel, admin):
    user = hotel.login(ADMIN_EMAIL, PASSWORD)

    assert user["role"] == "admin"
    assert hotel.session.is_authenticated
    assert hotel.session.refresh_token
    assert hotel.me()["email"] == ADMIN_EMAIL


def test_failed_login_raises_and_keeps_session_empty(hotel, admin):
    with pytest.raises(ApiError) as excinfo:
        hotel.login(ADMIN_EMAIL, "wrong")

    assert excinfo.value.status_code == 401
    assert excinfo.value.kind == "invalid_credentials"
    assert not hotel.session.is_authenticated


def test_expired_access_token_is_refreshed_once(hotel, admin):
    hotel.login(ADMIN_EMAIL, PASSWORD)
    old_refresh = hotel.session.refresh_token
    hotel.session.access_token = "expired"

    assert hotel.me()["email"] == ADMIN_EMAIL
    assert hotel.session.access_token != "expired"
    assert hotel.session.refresh_token != old_refresh


def test_refused_refresh_clears_session(hotel, admin):
    hotel.login(ADMIN_EMAIL, PASSWORD)
    hotel.session.access_token = "expired"
    hotel.session.refresh_token = "revoked"

    with pytest.raises(ApiError) as excinfo:
        hotel.me()

    assert excinfo.value.status_code == 401
    assert hotel.session.user is None
    assert not hotel.session.is_authenticated


def test_logout_revokes_server_side(hotel, admin, client):
    hotel.login(ADMIN_EMAIL, PASSWORD)
    refresh_token = hotel.session.refresh_token

    hotel.logout()

    assert not hotel.session.is_authenticated
    assert client.post("/auth/refresh", json={"refreshToken": refresh_token}).status_code == 401


def test_front_desk_flow(hotel, front_office):
    guest = hotel.register_guest(firstName="Anna", lastName="Lee")
    hotel.login(front_office.email, PASSWORD)

    toggled = hotel.toggle_check_in(guest["id"])
    listing = hotel.list_guests(status="checkedIn")

    assert toggled["checkedIn"] is True
    assert [g["regNumber"] for g in listing["items"]] == [guest["regNumber"]]


def test_file_store_survives_restart(client, admin, tmp_path):
    path = tmp_path / "session.json"
    first = HotelClient(session=SessionContext(JsonFileTokenStore(path)), http=client)
    first.login(ADMIN_EMAIL, PASSWORD)

    restored = SessionContext(JsonFileTokenStore(path))
    assert restored.access_token == first.session.access_token
    assert restored.user["email"] == ADMIN_EMAIL

    second = HotelClient(session=restored, http=client)
    assert second.me()["email"] == ADMIN_EMAIL

    second.logout()
    assert not path.exists()
