# shiori/core/security.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from shiori.core.config import settings, get_db
from shiori.core.exceptions import (
    TokenExpiredError,
    TokenInvalidError,
    UnauthorizedError,
    UserGoneError,
)
from shiori.crud.user_auth import crud_user_auth
from shiori.models.user import User

logger = logging.getLogger(__name__)


# =====================================================================
# JWT TOKEN CONFIGURATION
# =====================================================================

# auto_error=False so a missing header goes through our own 401 handler
security = HTTPBearer(auto_error=False)


# =====================================================================
# TOKEN CREATION
# =====================================================================

def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed bearer token for a user.

    Args:
        user_id: Id of the authenticated user
        expires_delta: Lifetime override, defaults to ACCESS_TOKEN_EXPIRE_DAYS

    Returns:
        Encoded JWT carrying {"userId", "exp"}
    """
    if expires_delta is None:
        expires_delta = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"userId": user_id, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


# =====================================================================
# TOKEN VERIFICATION
# =====================================================================

def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises:
        TokenExpiredError: If the token is past its expiration
        TokenInvalidError: If the signature or structure is wrong, or exp is missing
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"require_exp": True},
        )
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise TokenInvalidError()

    user_id = payload.get("userId")
    # bool is an int subclass; a token claiming userId=true is malformed
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise TokenInvalidError()
    return payload


def verify_access_token(token: str) -> int:
    """Verify a token and return the user id it carries."""
    return decode_access_token(token)["userId"]


def resolve_request_user(db: Session, token: Optional[str]) -> User:
    """
    Map a bearer token to a stored user.

    Raises:
        UnauthorizedError: If no token was supplied
        TokenExpiredError / TokenInvalidError: From verification
        UserGoneError: If the user id no longer exists
    """
    if not token:
        raise UnauthorizedError("Token not provided, please log in")

    user_id = verify_access_token(token)
    user = crud_user_auth.get(db, id=user_id)
    if user is None:
        raise UserGoneError()
    return user


def validate_token(db: Session, token: str) -> Dict[str, Any]:
    """Report whether a token is usable, for clients checking a stored session."""
    try:
        payload = decode_access_token(token)
    except TokenExpiredError:
        return {"valid": False, "error": "Token has expired"}
    except TokenInvalidError:
        return {"valid": False, "error": "Invalid token"}

    user = crud_user_auth.get(db, id=payload["userId"])
    if user is None:
        return {"valid": False, "error": "User not found"}

    return {
        "valid": True,
        "user": user,
        "expires_at": datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    }


# =====================================================================
# USER AUTHENTICATION DEPENDENCIES
# =====================================================================

def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Get current authenticated user from the bearer token.

    Raises:
        UnauthorizedError: If token is missing, expired or its user is gone
        TokenInvalidError: If token is malformed
    """
    token = credentials.credentials if credentials else None
    return resolve_request_user(db, token)


# =====================================================================
# OPTIONAL AUTHENTICATION
# =====================================================================

def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """
    Get current user if authenticated, otherwise return None.
    Useful for endpoints that work both with and without authentication.
    """
    if not credentials:
        return None

    try:
        return resolve_request_user(db, credentials.credentials)
    except UnauthorizedError as exc:
        logger.debug(f"Ignoring unusable token on optional auth: {exc}")
        return None
