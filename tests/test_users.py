from conftest import ADMIN_EMAIL, PASSWORD, login

from models.activity_log import ActivityLog
from models.user import Role

NEW_USER = {
    "email": "sales@hotel.com",
    "password": "sales123",
    "fullName": "Sales Staff",
    "role": "sales",
    "department": "Sales",
}


def test_admin_creates_user(client, admin, auth_headers, db_session):
    response = client.post("/users", json=NEW_USER, headers=auth_headers(admin))

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["email"] == "sales@hotel.com"
    assert data["role"] == "sales"
    assert data["isActive"] is True
    assert "password" not in data
    login(client, "sales@hotel.com", "sales123")
    assert db_session.query(ActivityLog).filter(ActivityLog.action == "CREATE_USER").count() == 1


def test_duplicate_email_is_conflict(client, admin, auth_headers):
    headers = auth_headers(admin)
    client.post("/users", json=NEW_USER, headers=headers)

    response = client.post("/users", json=NEW_USER, headers=headers)

    assert response.status_code == 409
    assert response.json()["kind"] == "conflict"


def test_unknown_role_is_rejected(client, admin, auth_headers):
    response = client.post("/users", json={**NEW_USER, "role": "concierge"}, headers=auth_headers(admin))

    assert response.status_code == 422


def test_manager_can_list_but_not_create(client, admin, manager, auth_headers):
    headers = auth_headers(manager)

    listing = client.get("/users", headers=headers)
    assert listing.status_code == 200
    assert listing.json()["data"]["pagination"]["total"] == 2

    created = client.post("/users", json=NEW_USER, headers=headers)
    assert created.status_code == 403
    assert created.json()["kind"] == "forbidden"


def test_front_office_cannot_list_users(client, front_office, auth_headers):
    response = client.get("/users", headers=auth_headers(front_office))

    assert response.status_code == 403


def test_list_filters_and_sorting(client, admin, manager, front_office, housekeeping, auth_headers):
    headers = auth_headers(admin)

    by_role = client.get("/users", params={"role": "frontoffice"}, headers=headers).json()["data"]
    assert [u["email"] for u in by_role["items"]] == ["frontoffice@hotel.com"]

    by_search = client.get("/users", params={"search": "keeping"}, headers=headers).json()["data"]
    assert [u["email"] for u in by_search["items"]] == ["housekeeping@hotel.com"]

    sorted_names = client.get(
        "/users", params={"sortBy": "fullName", "sortOrder": "asc"}, headers=headers
    ).json()["data"]["items"]
    names = [u["fullName"] for u in sorted_names]
    assert names == sorted(names)

    paged = client.get("/users", params={"limit": 3, "page": 2}, headers=headers).json()["data"]
    assert len(paged["items"]) == 1
    assert paged["pagination"]["totalPages"] == 2


def test_get_user_not_found(client, admin, auth_headers):
    response = client.get("/users/9999", headers=auth_headers(admin))

    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"


def test_admin_updates_role(client, admin, front_office, auth_headers):
    response = client.put(
        f"/users/{front_office.id}",
        json={"role": "staff", "department": "Lobby"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["data"]["role"] == "staff"
    assert response.json()["data"]["department"] == "Lobby"


def test_admin_cannot_deactivate_self_through_update(client, admin, auth_headers):
    response = client.put(f"/users/{admin.id}", json={"isActive": False}, headers=auth_headers(admin))

    assert response.status_code == 403


def test_admin_cannot_delete_self(client, admin, auth_headers):
    response = client.delete(f"/users/{admin.id}", headers=auth_headers(admin))

    assert response.status_code == 403
    assert response.json()["message"] == "You cannot delete your own account"


def test_delete_user_keeps_activity_rows(client, admin, manager, auth_headers, db_session):
    login(client, manager.email)

    response = client.delete(f"/users/{manager.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    orphaned = db_session.query(ActivityLog).filter(ActivityLog.user_name == "Hotel Manager").all()
    assert orphaned
    assert all(row.user_id is None for row in orphaned)


def test_toggle_active_blocks_login(client, admin, manager, auth_headers):
    headers = auth_headers(admin)

    response = client.post(f"/users/{manager.id}/toggle-active", headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["isActive"] is False

    refused = client.post("/auth/login", json={"email": manager.email, "password": PASSWORD})
    assert refused.status_code == 403

    client.post(f"/users/{manager.id}/toggle-active", headers=headers)
    login(client, manager.email)


def test_toggle_active_on_self_is_forbidden(client, admin, auth_headers):
    response = client.post(f"/users/{admin.id}/toggle-active", headers=auth_headers(admin))

    assert response.status_code == 403


def test_reset_password_revokes_target_sessions(client, admin, manager, auth_headers):
    tokens = login(client, manager.email)

    response = client.post(
        f"/users/{manager.id}/reset-password",
        json={"newPassword": "reset123"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert client.post("/auth/refresh", json={"refreshToken": tokens["refreshToken"]}).status_code == 401
    login(client, manager.email, "reset123")


def test_update_profile_changes_own_details(client, create_user, auth_headers):
    user = create_user("desk@hotel.com", Role.USER, full_name="Desk Clerk")

    response = client.put(
        "/users/update-profile",
        json={"fullName": "Desk Clerk Two", "phone": "0812345678"},
        headers=auth_headers(user),
    )

    assert response.status_code == 200
    assert response.json()["data"]["fullName"] == "Desk Clerk Two"
    assert response.json()["data"]["phone"] == "0812345678"
    assert response.json()["data"]["role"] == "user"


def test_update_profile_email_taken(client, admin, manager, auth_headers):
    response = client.put(
        "/users/update-profile",
        json={"email": ADMIN_EMAIL},
        headers=auth_headers(manager),
    )

    assert response.status_code == 409


def test_staff_calling_admin_operation_is_forbidden(client, admin, create_user, auth_headers):
    staff = create_user("staff@hotel.com", Role.STAFF)

    denied = client.post("/users", json=NEW_USER, headers=auth_headers(staff))
    allowed = client.post("/users", json=NEW_USER, headers=auth_headers(admin))

    assert denied.status_code == 403
    assert allowed.status_code == 201


def test_contact_fields_are_length_checked(client, admin, auth_headers):
    headers = auth_headers(admin)

    created = client.post("/users", json={**NEW_USER, "phone": "0" * 21}, headers=headers)
    profile = client.put("/users/update-profile", json={"department": "x" * 101}, headers=headers)

    assert created.status_code == 422
    assert created.json()["kind"] == "validation_error"
    assert profile.status_code == 422


def test_search_treats_wildcards_literally(client, admin, manager, auth_headers):
    headers = auth_headers(admin)

    assert client.get("/users", params={"search": "_"}, headers=headers).json()["data"]["items"] == []
    assert client.get("/users", params={"search": "%"}, headers=headers).json()["data"]["items"] == []
