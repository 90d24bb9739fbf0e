import pytest

from app.auth.errors import ValidationError
from app.auth.validation import (
    comprehensive_login_validation,
    sanitize_login_data,
    validate_email,
    validate_password,
)


@pytest.mark.parametrize(
    "email, message",
    [
        (None, "Email address is required"),
        ("", "Email address cannot be empty"),
        ("   ", "Email address cannot be empty"),
        ("invalid-email", "Please enter a valid email address"),
        ("test@", "Please enter a valid email address"),
        ("user@host", "Please enter a valid email address"),
        ("user@host.io", "Please enter a valid email address with a proper domain"),
    ],
)
def test_invalid_emails_are_rejected_with_messages(email, message):
    check = validate_email(email)
    assert check.is_valid is False
    assert check.error == message


@pytest.mark.parametrize("email", ["test@example.com", "a@b.org", "Rider@Station.NET"])
def test_valid_emails_pass(email):
    assert validate_email(email).is_valid


@pytest.mark.parametrize(
    "password, message",
    [
        (None, "Password is required"),
        ("", "Password cannot be empty"),
        ("123", "Password must be at least 6 characters long"),
        ("abcde", "Password must be at least 6 characters long"),
        ("pass word", "Password cannot contain spaces"),
    ],
)
def test_invalid_passwords_are_rejected(password, message):
    check = validate_password(password)
    assert check.is_valid is False
    assert check.error == message


def test_six_character_password_is_enough():
    assert validate_password("abc123").is_valid


def test_sanitize_lowercases_email_and_trims_password():
    sanitized = sanitize_login_data({"email": "  Test@Example.COM ", "password": "  Secret1 "})
    assert sanitized == {"email": "test@example.com", "password": "Secret1"}


def test_sanitize_is_idempotent():
    raw = {"email": " MiXeD@Example.Com\t", "password": " PassWord9 "}
    once = sanitize_login_data(raw)
    assert sanitize_login_data(once) == once


def test_sanitize_leaves_missing_fields_absent():
    assert sanitize_login_data({"email": None}) == {}


def test_email_errors_are_reported_before_password_errors():
    result = comprehensive_login_validation({"email": "nope", "password": "x"})
    assert result.is_valid is False
    assert result.field == "email"
    assert result.error == "Please enter a valid email address"


def test_password_field_is_tagged_when_email_is_fine():
    result = comprehensive_login_validation({"email": "test@example.com", "password": "pass word"})
    assert result.field == "password"
    assert result.error == "Password cannot contain spaces"


def test_validation_runs_on_sanitized_form():
    result = comprehensive_login_validation({"email": "  USER@Example.com  ", "password": " secret1 "})
    assert result.is_valid
    assert result.field is None
    assert result.error is None
    assert result.sanitized_data == {"email": "user@example.com", "password": "secret1"}
    assert result.timestamp.endswith("Z")


def test_security_checks_annotate_without_failing():
    result = comprehensive_login_validation({"email": "test@example.com", "password": "QWERTY"})
    assert result.is_valid
    assert result.security_checks == {
        "hasSpecialChars": False,
        "hasNumbers": False,
        "hasLetters": True,
        "isCommonPassword": True,
    }


def test_security_checks_detect_character_classes():
    checks = comprehensive_login_validation(
        {"email": "test@example.com", "password": "s3cret!x"}
    ).security_checks
    assert checks["hasSpecialChars"] and checks["hasNumbers"] and checks["hasLetters"]
    assert checks["isCommonPassword"] is False


def test_raise_for_error_carries_field_and_timestamp():
    result = comprehensive_login_validation({"password": "secret1"})
    with pytest.raises(ValidationError) as info:
        result.raise_for_error()
    assert info.value.field == "email"
    assert info.value.message == "Email address is required"
    assert info.value.timestamp == result.timestamp
