"""HTTP client for the Shiori API."""
import logging
from typing import Any, Dict, List, Optional

import httpx

from shiori.client.session import SessionStore

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, detail: str, errors: Optional[List[str]] = None):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail
        self.errors = errors or []


class SessionExpiredError(ApiError):
    """The API answered 401; the stored session has been cleared."""
    pass


class ShioriClient:
    """
    Thin wrapper over the REST API.

    Every request carries the stored bearer token. A 401 from any endpoint
    ends the session locally: the store is cleared before the error is raised.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        store: Optional[SessionStore] = None,
        http: Optional[httpx.Client] = None,
        api_prefix: str = "/api",
        timeout: float = 10.0,
    ):
        self.store = store if store is not None else SessionStore()
        self.http = http if http is not None else httpx.Client(base_url=base_url, timeout=timeout)
        self.api_prefix = api_prefix.rstrip("/")

    def close(self) -> None:
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # =====================================================================
    # PLUMBING
    # =====================================================================

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.store.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(self, method: str, path: str, json: Any = None) -> httpx.Response:
        response = self.http.request(
            method, f"{self.api_prefix}{path}", json=json, headers=self._headers()
        )
        if response.status_code == 401:
            self.store.clear()
            detail, errors = self._error_detail(response)
            logger.info(f"Session ended by server on {method} {path}: {detail}")
            raise SessionExpiredError(response.status_code, detail, errors)
        if response.is_error:
            detail, errors = self._error_detail(response)
            raise ApiError(response.status_code, detail, errors)
        return response

    @staticmethod
    def _error_detail(response: httpx.Response):
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase, []
        if not isinstance(body, dict):
            return str(body), []
        detail = body.get("detail") or body.get("error") or response.reason_phrase
        return str(detail), list(body.get("errors") or [])

    def _remember(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.store.save(payload["token"], payload["user"])
        return payload

    # =====================================================================
    # AUTH
    # =====================================================================

    def register(self, username: str, email: str, password: str) -> Dict[str, Any]:
        response = self._request(
            "POST", "/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        return self._remember(response.json())

    def login(self, email: str, password: str) -> Dict[str, Any]:
        response = self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )
        return self._remember(response.json())

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/me").json()["user"]

    def logout(self) -> None:
        """Tell the server, then drop the local session whatever it answered."""
        try:
            if self.store.token:
                self._request("POST", "/auth/logout")
        finally:
            self.store.clear()

    def check_username(self, username: str) -> Dict[str, Any]:
        return self._request("POST", "/auth/check-username", json={"username": username}).json()

    def check_email(self, email: str) -> Dict[str, Any]:
        return self._request("POST", "/auth/check-email", json={"email": email}).json()

    def validate_token(self, token: Optional[str] = None) -> Dict[str, Any]:
        """Server-side token check; a rejected token is reported, not raised."""
        token = token or self.store.token
        response = self.http.post(
            f"{self.api_prefix}/auth/validate", json={"token": token}
        )
        if response.status_code in (200, 401):
            return response.json()
        detail, errors = self._error_detail(response)
        raise ApiError(response.status_code, detail, errors)

    # =====================================================================
    # DIARY
    # =====================================================================

    def list_days(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/days").json()

    def get_day(self, date: str) -> Dict[str, Any]:
        return self._request("GET", f"/days/{date}").json()

    def get_today(self) -> Dict[str, Any]:
        return self._request("GET", "/today").json()

    def create_today_entry(self, text: str) -> Dict[str, Any]:
        return self._request("POST", "/today/entries", json={"text": text}).json()

    def get_statistics(self) -> Dict[str, Any]:
        return self._request("GET", "/statistics").json()

    def export_data(self) -> Dict[str, Any]:
        return self._request("GET", "/export").json()
