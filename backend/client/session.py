# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Python client for the hotel API with an explicit session context.

The signed-in user and the token pair live in a :class:`SessionContext`
that is handed to :class:`HotelClient`; where that state is persisted is
decided by the injected :class:`TokenStore` (memory for scripts and tests,
a JSON file for a desk workstation).

``HotelClient`` talks to any requests-compatible HTTP object – a
``requests.Session`` in production, FastAPI's ``TestClient`` in tests.
When a call comes back 401 it rotates the refresh token once and retries;
if the refresh is refused the session is cleared.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional, Protocol

import requests

from core.logger import logger


# ---------------------------------------------------------------------------
# Persistence boundary
# ---------------------------------------------------------------------------


class TokenStore(Protocol):
    def load(self) -> Optional[dict]: ...

    def save(self, state: dict) -> None: ...

    def clear(self) -> None: ...


class MemoryTokenStore:
    def __init__(self, state: Optional[dict] = None):
        self._state = dict(state) if state else None

    def load(self) -> Optional[dict]:
        return dict(self._state) if self._state else None

    def save(self, state: dict) -> None:
        self._state = dict(state)

    def clear(self) -> None:
        self._state = None


class JsonFileTokenStore:
    """Keeps the session in a JSON file readable only by its owner."""

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> Optional[dict]:
        if not self.path.is_file():
            return None
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable session file %s", self.path)
            return None

    def save(self, state: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(state), encoding="utf-8")
        os.chmod(self.path, 0o600)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


# ---------------------------------------------------------------------------
# Session context
# ---------------------------------------------------------------------------


class SessionContext:
    """Current user and token pair, mirrored into a :class:`TokenStore`."""

    def __init__(self, store: Optional[TokenStore] = None):
        self._store = store or MemoryTokenStore()
        state = self._store.load() or {}
        self.user: Optional[dict] = state.get("user")
        self.access_token: Optional[str] = state.get("accessToken")
        self.refresh_token: Optional[str] = state.get("refreshToken")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    def set_auth(self, user: dict, access_token: str, refresh_token: str) -> None:
        self.user = user
        self.set_tokens(access_token, refresh_token)

    def set_tokens(self, access_token: str, refresh_token: str) -> None:
        self.access_token = access_token
        self.refresh_token = refresh_token
        self._persist()

    def update_user(self, user: dict) -> None:
        self.user = user
        self._persist()

    def clear(self) -> None:
        self.user = None
        self.access_token = None
        self.refresh_token = None
        self._store.clear()

    def _persist(self) -> None:
        self._store.save({
            "user": self.user,
            "accessToken": self.access_token,
            "refreshToken": self.refresh_token,
        })


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class ApiError(Exception):
    """A non-2xx response, carrying the server's ``kind`` and ``message``."""

    def __init__(self, status_code: int, kind: str, message: str):
        super().__init__(f"{status_code} {kind}: {message}")
        self.status_code = status_code
        self.kind = kind
        self.message = message


class HotelClient:
    def __init__(self, base_url: str = "", session: Optional[SessionContext] = None, http=None):
        self.base_url = base_url.rstrip("/")
        self.session = session or SessionContext()
        self._http = http or requests.Session()

    # -- auth -------------------------------------------------------------

    def login(self, email: str, password: str) -> dict:
        data = self.request("POST", "/auth/login",
                            json={"email": email, "password": password}, auth=False)
        self.session.set_auth(data["user"], data["accessToken"], data["refreshToken"])
        return data["user"]

    def logout(self) -> None:
        """Revoke server-side, then forget locally even if the server call fails."""
        try:
            if self.session.is_authenticated:
                self.request("POST", "/auth/logout")
        finally:
            self.session.clear()

    def me(self) -> dict:
        user = self.request("GET", "/auth/me")
        self.session.update_user(user)
        return user

    def change_password(self, current_password: str, new_password: str, confirm_password: str) -> None:
        self.request("POST", "/auth/change-password", json={
            "currentPassword": current_password,
            "newPassword": new_password,
            "confirmPassword": confirm_password,
        })

    def refresh(self) -> bool:
        """Rotate the refresh token.  Clears the session when it is refused."""
        if not self.session.refresh_token:
            return False
        response = self._send("POST", "/auth/refresh",
                              json={"refreshToken": self.session.refresh_token})
        if response.status_code != 200:
            logger.info("Refresh refused (%d); clearing session", response.status_code)
            self.session.clear()
            return False
        data = response.json()["data"]
        self.session.set_tokens(data["accessToken"], data["refreshToken"])
        return True

    # -- guests -----------------------------------------------------------

    def register_guest(self, **fields) -> dict:
        return self.request("POST", "/guests", json=fields, auth=False)

    def list_guests(self, **params) -> dict:
        return self.request("GET", "/guests", params=params)

    def toggle_check_in(self, guest_id: int) -> dict:
        return self.request("PATCH", f"/guests/{guest_id}/check-in")

    # -- plumbing ---------------------------------------------------------

    def request(self, method: str, path: str, json: Any = None, params: Optional[dict] = None,
                auth: bool = True) -> Any:
        """Send a request and return the envelope's ``data``; raise ApiError otherwise."""
        response = self._send(method, path, json=json, params=params, auth=auth)
        if response.status_code == 401 and auth and self.refresh():
            response = self._send(method, path, json=json, params=params, auth=auth)

        body = response.json() if response.content else {}
        if not 200 <= response.status_code < 300:
            raise ApiError(response.status_code, body.get("kind", "http_error"),
                           body.get("message", response.reason_phrase
                                    if hasattr(response, "reason_phrase") else ""))
        return body.get("data")

    def _send(self, method: str, path: str, json: Any = None, params: Optional[dict] = None,
              auth: bool = False):
        headers = {}
        if auth and self.session.access_token:
            headers["Authorization"] = f"Bearer {self.session.access_token}"
        return self._http.request(method, f"{self.base_url}{path}",
                                  json=json, params=params, headers=headers)
