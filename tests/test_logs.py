import io

from openpyxl import load_workbook

from conftest import ADMIN_EMAIL, PASSWORD
from logs.router import EXPORT_HEADERS


def test_logs_are_admin_only(client, admin, manager, auth_headers):
    assert client.get("/logs").status_code == 401
    assert client.get("/logs", headers=auth_headers(manager)).status_code == 403


def test_list_newest_first_with_filters(client, admin, auth_headers):
    client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": "wrong"})
    headers = auth_headers(admin)

    everything = client.get("/logs", headers=headers).json()["data"]
    assert [row["action"] for row in everything["items"]] == ["LOGIN", "LOGIN_FAILED"]
    assert everything["items"][0]["userName"] == "System Administrator"
    assert everything["items"][0]["ipAddress"]

    failed = client.get("/logs", params={"action": "failed"}, headers=headers).json()["data"]
    assert [row["action"] for row in failed["items"]] == ["LOGIN_FAILED"]

    by_user = client.get("/logs", params={"userId": admin.id}, headers=headers).json()["data"]
    assert by_user["pagination"]["total"] == 2


def test_stats_count_today(client, admin, manager, auth_headers):
    client.post("/auth/login", json={"email": manager.email, "password": PASSWORD})
    headers = auth_headers(admin)

    stats = client.get("/logs/stats", headers=headers).json()["data"]

    assert stats["todayLogins"] == 2
    assert stats["todayActivities"] == 2
    assert stats["weekActivities"] == 2


def test_guest_registration_history(client, admin, auth_headers):
    client.post("/guests", json={"firstName": "Anna", "lastName": "Lee"})

    response = client.get("/logs/guest-registrations", headers=auth_headers(admin))

    assert response.status_code == 200
    items = response.json()["data"]["items"]
    assert len(items) == 1
    assert items[0]["regNumber"] == "1"
    assert items[0]["guestName"] == "Anna Lee"


def test_export_workbook(client, admin, auth_headers):
    response = client.get("/logs/export", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    sheet = load_workbook(io.BytesIO(response.content)).active
    rows = list(sheet.iter_rows(values_only=True))
    assert list(rows[0]) == EXPORT_HEADERS
    assert rows[1][3] == "LOGIN"
