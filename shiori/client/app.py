"""View-state controller for a Shiori front end.

Holds which of the mutually exclusive views is showing and the data it
needs, and moves between them in response to user actions. Rendering is
left to whatever sits on top (terminal, GUI, tests).
"""
import enum
import logging
from typing import Any, Dict, List, Optional

from shiori.client.api import ApiError, SessionExpiredError, ShioriClient
from shiori.client.session import is_session_valid

logger = logging.getLogger(__name__)


class ViewMode(str, enum.Enum):
    AUTH = "auth"
    DAYS = "days"
    DAY = "day"
    ADD_ENTRY = "add_entry"


class DiaryApp:
    def __init__(self, client: ShioriClient):
        self.client = client
        self.view = ViewMode.AUTH
        self.user: Optional[Dict[str, Any]] = None
        self.days: List[Dict[str, Any]] = []
        self.current_day: Optional[Dict[str, Any]] = None
        self.error: Optional[str] = None

    # =====================================================================
    # SESSION
    # =====================================================================

    def start(self) -> ViewMode:
        """Resume a stored session if it is still usable, else show the login view."""
        store = self.client.store
        if not store.is_authenticated() or not is_session_valid(store.token):
            store.clear()
            return self._to_auth()

        self.user = store.user
        return self.show_days()

    def login(self, email: str, password: str) -> ViewMode:
        return self._authenticate(lambda: self.client.login(email, password))

    def register(self, username: str, email: str, password: str) -> ViewMode:
        return self._authenticate(lambda: self.client.register(username, email, password))

    def logout(self) -> ViewMode:
        try:
            self.client.logout()
        except ApiError as exc:
            logger.info(f"Logout request failed, session dropped locally: {exc}")
        return self._to_auth()

    def _authenticate(self, call) -> ViewMode:
        try:
            payload = call()
        except ApiError as exc:
            self.error = exc.detail
            return self.view
        self.error = None
        self.user = payload["user"]
        return self.show_days()

    def _to_auth(self) -> ViewMode:
        self.view = ViewMode.AUTH
        self.user = None
        self.days = []
        self.current_day = None
        return self.view

    # =====================================================================
    # NAVIGATION
    # =====================================================================

    def show_days(self) -> ViewMode:
        try:
            self.days = self.client.list_days()
        except SessionExpiredError:
            return self._to_auth()
        self.current_day = None
        self.view = ViewMode.DAYS
        return self.view

    def select_day(self, date: str) -> ViewMode:
        try:
            self.current_day = self.client.get_day(date)
        except SessionExpiredError:
            return self._to_auth()
        except ApiError as exc:
            self.error = exc.detail
            return self.view
        self.error = None
        self.view = ViewMode.DAY
        return self.view

    def back(self) -> ViewMode:
        return self.show_days()

    # =====================================================================
    # ADD ENTRY
    # =====================================================================

    def open_add_entry(self) -> ViewMode:
        if self.view == ViewMode.AUTH:
            return self.view
        self.view = ViewMode.ADD_ENTRY
        return self.view

    def cancel_add_entry(self) -> ViewMode:
        return self.show_days()

    def submit_entry(self, text: str) -> ViewMode:
        """Post to today; the form stays open with an error if the server refuses."""
        try:
            self.client.create_today_entry(text)
        except SessionExpiredError:
            return self._to_auth()
        except ApiError as exc:
            self.error = exc.detail
            return self.view
        self.error = None
        return self.show_days()
