"""Unit tests for the best-effort activity sink."""
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from core.activity import ActivitySink, RequestContext, get_activity_sink
from database import SessionLocal
from main import app
from models.activity_log import ActivityLog, GuestRegistrationLog


def _unavailable_session():
    raise OperationalError("INSERT INTO activity_logs", {}, Exception("database is locked"))


def test_record_writes_row(db_session):
    sink = ActivitySink(SessionLocal)

    sink.record("LOGIN", user_name="Desk", details="ok",
                ctx=RequestContext(ip_address="10.0.0.1", user_agent="pytest"))

    row = db_session.query(ActivityLog).one()
    assert row.action == "LOGIN"
    assert row.ip_address == "10.0.0.1"
    assert row.user_agent == "pytest"


def test_record_guest_event_writes_row(db_session):
    ActivitySink(SessionLocal).record_guest_event("REGISTRATION", None, "Anna Lee", "1")

    row = db_session.query(GuestRegistrationLog).one()
    assert row.ip_address == "unknown"
    assert row.reg_number == "1"


def test_failed_commit_is_swallowed(db_session, monkeypatch):
    fake_logger = MagicMock()
    monkeypatch.setattr("core.activity.logger", fake_logger)

    ActivitySink(SessionLocal).record("LOGIN", user_name=None)  # violates NOT NULL

    assert db_session.query(ActivityLog).count() == 0
    fake_logger.exception.assert_called_once()


def test_unavailable_store_is_swallowed():
    ActivitySink(_unavailable_session).record("LOGIN", user_name="Desk")


def test_actions_succeed_when_sink_fails(client, admin, manager, auth_headers):
    app.dependency_overrides[get_activity_sink] = lambda: ActivitySink(_unavailable_session)

    registered = client.post("/guests", json={"firstName": "Anna", "lastName": "Lee"})
    assert registered.status_code == 201

    toggled = client.post(f"/users/{manager.id}/toggle-active", headers=auth_headers(admin))
    assert toggled.status_code == 200
    assert toggled.json()["data"]["isActive"] is False
