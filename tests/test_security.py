import time
from datetime import timedelta

import pytest
from jose import jwt

from shiori.core.config import settings
from shiori.core.exceptions import TokenExpiredError, TokenInvalidError, UnauthorizedError, UserGoneError
from shiori.core.security import (
    create_access_token,
    decode_access_token,
    resolve_request_user,
    validate_token,
    verify_access_token,
)
from shiori.client.session import is_session_valid
from shiori.services.user_auth import user_auth_service


def test_token_round_trip_carries_user_id_and_expiry():
    token = create_access_token(42)
    payload = decode_access_token(token)

    assert payload["userId"] == 42
    lifetime = payload["exp"] - time.time()
    assert timedelta(days=7) - timedelta(minutes=1) < timedelta(seconds=lifetime) <= timedelta(days=7)
    assert verify_access_token(token) == 42


def test_expired_token():
    token = create_access_token(1, expires_delta=timedelta(seconds=-5))
    with pytest.raises(TokenExpiredError):
        verify_access_token(token)


def test_token_signed_with_another_secret_is_invalid():
    token = jwt.encode({"userId": 1, "exp": int(time.time()) + 60}, "other", algorithm="HS256")
    with pytest.raises(TokenInvalidError):
        verify_access_token(token)


def test_garbage_token_is_invalid():
    with pytest.raises(TokenInvalidError):
        verify_access_token("not-a-jwt")


@pytest.mark.parametrize("user_id", ["1", None, True, 1.5])
def test_user_id_claim_must_be_an_integer(user_id):
    claims = {"exp": int(time.time()) + 60}
    if user_id is not None:
        claims["userId"] = user_id
    token = jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    with pytest.raises(TokenInvalidError):
        verify_access_token(token)


def test_token_without_expiry_is_invalid(db):
    user = user_auth_service.register_user(db, "alice", "alice@x.com", "secret1")
    token = jwt.encode({"userId": user.id}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    with pytest.raises(TokenInvalidError):
        verify_access_token(token)
    assert validate_token(db, token) == {"valid": False, "error": "Invalid token"}


def test_resolve_request_user(db):
    user = user_auth_service.register_user(db, "alice", "alice@x.com", "secret1")
    assert resolve_request_user(db, create_access_token(user.id)).id == user.id


def test_resolve_request_user_without_token(db):
    with pytest.raises(UnauthorizedError):
        resolve_request_user(db, None)


def test_resolve_request_user_for_missing_user(db):
    with pytest.raises(UserGoneError):
        resolve_request_user(db, create_access_token(9999))


def test_validate_token_reports_reason(db):
    user = user_auth_service.register_user(db, "alice", "alice@x.com", "secret1")

    ok = validate_token(db, create_access_token(user.id))
    assert ok["valid"] is True
    assert ok["user"].id == user.id
    assert ok["expires_at"].tzinfo is not None

    expired = validate_token(db, create_access_token(user.id, expires_delta=timedelta(seconds=-1)))
    assert expired == {"valid": False, "error": "Token has expired"}

    assert validate_token(db, "junk") == {"valid": False, "error": "Invalid token"}
    assert validate_token(db, create_access_token(777)) == {"valid": False, "error": "User not found"}


# ---------------------------------------------------------------------
# Client-side session check
# ---------------------------------------------------------------------

def test_client_session_check_accepts_live_token():
    assert is_session_valid(create_access_token(1))


def test_client_session_check_rejects_expired_token():
    assert not is_session_valid(create_access_token(1, expires_delta=timedelta(seconds=-1)))


@pytest.mark.parametrize("token", [None, "", "abc", "a.b.c", "x.eyJleHAiOiJzb29uIn0.y"])
def test_client_session_check_rejects_malformed_tokens(token):
    assert not is_session_valid(token)


def test_client_session_check_requires_numeric_exp():
    token = jwt.encode({"userId": 1, "exp": "tomorrow"}, "k", algorithm="HS256")
    assert not is_session_valid(token)
    token = jwt.encode({"userId": 1}, "k", algorithm="HS256")
    assert not is_session_valid(token)
