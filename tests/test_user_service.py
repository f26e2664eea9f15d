import pytest

from shiori.core.exceptions import (
    DuplicateEmailError,
    DuplicateUsernameError,
    InvalidCredentialError,
    UserNotFoundError,
    ValidationError,
)
from shiori.crud.user_auth import crud_user_auth
from shiori.services.user_auth import user_auth_service


def test_register_then_authenticate(db):
    user = user_auth_service.register_user(db, "alice", "alice@x.com", "secret1")

    assert user.id is not None
    assert user.password_hash != "secret1"
    assert crud_user_auth.verify_password("secret1", user.password_hash)
    assert user.last_login is None

    logged_in = user_auth_service.authenticate_user(db, "alice@x.com", "secret1")
    assert logged_in.id == user.id
    assert logged_in.last_login is not None


def test_register_rejects_bad_input(db):
    with pytest.raises(ValidationError) as exc_info:
        user_auth_service.register_user(db, "al", "alice@x.com", "secret")
    assert len(exc_info.value.errors) == 2
    assert crud_user_auth.count(db) == 0


def test_duplicate_email(db):
    user_auth_service.register_user(db, "alice", "alice@x.com", "secret1")
    with pytest.raises(DuplicateEmailError):
        user_auth_service.register_user(db, "alice2", "alice@x.com", "secret1")


def test_duplicate_username(db):
    user_auth_service.register_user(db, "alice", "alice@x.com", "secret1")
    with pytest.raises(DuplicateUsernameError):
        user_auth_service.register_user(db, "alice", "other@x.com", "secret1")


def test_email_is_checked_before_username(db):
    user_auth_service.register_user(db, "alice", "alice@x.com", "secret1")
    with pytest.raises(DuplicateEmailError):
        user_auth_service.register_user(db, "alice", "alice@x.com", "secret1")


def test_authenticate_unknown_email(db):
    with pytest.raises(UserNotFoundError):
        user_auth_service.authenticate_user(db, "ghost@x.com", "secret1")


def test_authenticate_wrong_password(db):
    user_auth_service.register_user(db, "alice", "alice@x.com", "secret1")
    with pytest.raises(InvalidCredentialError) as exc_info:
        user_auth_service.authenticate_user(db, "alice@x.com", "secret2")
    assert "$2" not in str(exc_info.value)


@pytest.mark.parametrize("email,password", [(None, "secret1"), ("alice@x.com", ""), ("not-an-email", "secret1")])
def test_authenticate_requires_valid_input(db, email, password):
    with pytest.raises(ValidationError):
        user_auth_service.authenticate_user(db, email, password)


def test_lookups(db):
    user = user_auth_service.register_user(db, "alice", "alice@x.com", "secret1")

    assert user_auth_service.get_user_by_id(db, user.id).username == "alice"
    assert user_auth_service.get_user_by_username(db, "alice").id == user.id
    assert user_auth_service.get_user_by_email(db, "alice@x.com").id == user.id
    assert user_auth_service.get_user_by_id(db, user.id + 1) is None
    assert user_auth_service.get_user_by_username(db, "bob") is None


def test_availability_checks(db):
    user_auth_service.register_user(db, "alice", "alice@x.com", "secret1")

    assert user_auth_service.check_username_available(db, "alice")["available"] is False
    assert user_auth_service.check_username_available(db, "bob")["available"] is True
    assert user_auth_service.check_email_available(db, "alice@x.com")["available"] is False
    assert user_auth_service.check_email_available(db, "bob@x.com")["available"] is True

    with pytest.raises(ValidationError):
        user_auth_service.check_username_available(db, "no spaces")
    with pytest.raises(ValidationError):
        user_auth_service.check_email_available(db, "bob@")
