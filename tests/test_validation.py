import pytest

from shiori.core.exceptions import ValidationError
from shiori.services import validation


@pytest.mark.parametrize("username", ["abc", "alice_01", "A" * 20, "___"])
def test_valid_usernames(username):
    assert validation.validate_username(username) == []


@pytest.mark.parametrize("username", ["ab", "a" * 21, "bad name", "émile", "dash-ed"])
def test_invalid_usernames(username):
    assert validation.validate_username(username)


@pytest.mark.parametrize("email", ["alice@x.com", "a.b+tag@mail.example.org"])
def test_valid_emails(email):
    assert validation.is_valid_email(email)


@pytest.mark.parametrize("email", ["alice", "alice@x", "@x.com", "a b@x.com", "alice@@x.com"])
def test_invalid_emails(email):
    assert not validation.is_valid_email(email)


def test_password_rules():
    assert validation.validate_password("secret1") == []
    assert validation.validate_password("abc12") == ["Password must be at least 6 characters"]
    assert validation.validate_password("abcdefg") == ["Password must contain both letters and digits"]
    assert validation.validate_password("1234567") == ["Password must contain both letters and digits"]


def test_registration_requires_all_fields():
    assert validation.validate_registration_data("alice", "", "secret1") == ["All fields are required"]
    assert validation.validate_registration_data(None, "alice@x.com", "secret1") == ["All fields are required"]


def test_registration_collects_every_error():
    errors = validation.validate_registration_data("a!", "nope", "short")
    assert len(errors) == 3


def test_ensure_valid_registration_raises_with_errors():
    with pytest.raises(ValidationError) as exc_info:
        validation.ensure_valid_registration("ok_name", "bad-email", "secret1")
    assert exc_info.value.errors == ["Invalid email format"]


def test_date_strings():
    assert validation.is_valid_date_string("2024-02-29")
    assert not validation.is_valid_date_string("2023-02-29")
    assert not validation.is_valid_date_string("2024-1-01")
    assert not validation.is_valid_date_string("20240101")
    assert not validation.is_valid_date_string("2024-13-01")


def test_time_strings():
    assert validation.is_valid_time_string("00:00")
    assert validation.is_valid_time_string("23:59")
    assert not validation.is_valid_time_string("24:00")
    assert not validation.is_valid_time_string("9:30")
    assert not validation.is_valid_time_string("12:60")


@pytest.mark.parametrize("username", ["alice\n", "\nalice", "abc٣", "alice\t"])
def test_usernames_must_match_whole_string(username):
    assert validation.validate_username(username)


@pytest.mark.parametrize("email", ["a@b.com\n", "alice@x.com\n\n"])
def test_emails_must_match_whole_string(email):
    assert not validation.is_valid_email(email)


def test_password_digits_are_ascii_only():
    assert validation.validate_password("abcde٣") == ["Password must contain both letters and digits"]
    assert validation.validate_password("abcde３") == ["Password must contain both letters and digits"]


def test_date_and_time_reject_trailing_newline_and_unicode_digits():
    assert not validation.is_valid_date_string("2024-01-01\n")
    assert not validation.is_valid_date_string("٢٠٢٤-01-01")
    assert not validation.is_valid_time_string("07:05\n")
    assert not validation.is_valid_time_string("٠٧:05")
