# tests/test_validation.py

from __future__ import annotations

import pytest

from taskdeck.auth.validation import (
    sanitize_input,
    validate_email,
    validate_name,
    validate_password,
    validate_phone_number,
    validate_signin_form,
    validate_signup_form,
)


@pytest.mark.parametrize(
    ("email", "ok"),
    [
        ("a@b.co", True),
        ("  user.name@example.org ", True),
        ("", False),
        (None, False),
        ("no-at-sign.com", False),
        ("two words@example.com", False),
        ("user@nodot", False),
    ],
)
def test_validate_email(email, ok) -> None:
    assert validate_email(email).is_valid is ok


def test_validate_password_messages() -> None:
    assert validate_password("").error == "Password is required"
    assert validate_password("short").error == "Password must be at least 8 characters"
    assert validate_password("longenough").is_valid


def test_validate_name() -> None:
    assert validate_name("Mary-Jane O'Neil").is_valid
    assert validate_name("", "First name").error == "First name is required"
    assert validate_name("A").error == "Name must be at least 2 characters"
    assert not validate_name("R2D2").is_valid


def test_validate_phone_number_is_optional() -> None:
    assert validate_phone_number("").is_valid
    assert validate_phone_number(None).is_valid
    assert validate_phone_number("+1 (555) 123-4567").is_valid
    assert not validate_phone_number("12345").is_valid
    assert not validate_phone_number("555-CALL-NOW").is_valid


def test_signin_form() -> None:
    result = validate_signin_form({"email": "bad", "password": ""})
    assert not result.is_valid
    assert set(result.errors) == {"email", "password"}

    assert validate_signin_form({"email": "a@b.co", "password": "12345678"}).is_valid
    assert not validate_signin_form(None).is_valid


def test_signup_form() -> None:
    form = {
        "email": "a@b.co",
        "password": "12345678",
        "confirm_password": "12345679",
        "first_name": "",
        "last_name": "Doe",
    }
    result = validate_signup_form(form)
    assert result.errors == {
        "confirm_password": "Passwords do not match",
        "first_name": "First name is required",
    }

    form.update(confirm_password="12345678", first_name="Jane")
    assert validate_signup_form(form).is_valid


def test_sanitize_input() -> None:
    assert sanitize_input("  hello   big\n world ") == "hello big world"
    assert sanitize_input(None) == ""
