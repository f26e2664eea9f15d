"""Client-side session storage: the bearer token and the cached user."""
import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

from jose import JWTError, jwt

logger = logging.getLogger(__name__)

DEFAULT_SESSION_PATH = Path.home() / ".shiori" / "session.json"


def is_session_valid(token: Optional[str], now: Optional[float] = None) -> bool:
    """
    Cheap local check of a stored token before calling the API.

    The client has no signing key, so the payload is only read, never
    trusted: it must decode to claims with a numeric ``exp`` that is still
    in the future. Anything else counts as an ended session. The server
    remains the authority and may still reject the token.
    """
    if not token or not isinstance(token, str):
        return False
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return False

    if not isinstance(claims, dict):
        return False
    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return False

    if now is None:
        now = time.time()
    return exp > now


class SessionStore:
    """
    Token and user cache, kept in a JSON file or, with ``path=None``, in memory.
    """

    def __init__(self, path: Union[str, Path, None] = DEFAULT_SESSION_PATH):
        self.path = Path(path) if path is not None else None
        self._data: Dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        if self.path is None or not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning(f"Discarding unreadable session file {self.path}: {exc}")
            self.clear()
            return
        if isinstance(data, dict):
            self._data = data

    def _flush(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data), encoding="utf-8")

    @property
    def token(self) -> Optional[str]:
        return self._data.get("token")

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return self._data.get("user")

    def save(self, token: str, user: Dict[str, Any]) -> None:
        self._data = {"token": token, "user": user}
        self._flush()

    def clear(self) -> None:
        self._data = {}
        if self.path is not None and self.path.exists():
            self.path.unlink()

    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None
