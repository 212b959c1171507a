# src/taskdeck/auth/validation.py

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[\d\s\-()]{10,}$")
NAME_RE = re.compile(r"^[a-zA-Z\s\-']+$")
PASSWORD_MIN_LENGTH = 8


@dataclass(frozen=True, slots=True)
class ValidationResult:
    is_valid: bool
    error: str | None = None


@dataclass(frozen=True, slots=True)
class FormValidation:
    is_valid: bool
    errors: dict[str, str] = field(default_factory=dict)


_OK = ValidationResult(True)


def _stripped(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def validate_email(email: str | None) -> ValidationResult:
    value = _stripped(email)
    if not value:
        return ValidationResult(False, "Email is required")
    if not EMAIL_RE.match(value):
        return ValidationResult(False, "Please enter a valid email address")
    return _OK


def validate_password(password: str | None) -> ValidationResult:
    if not password:
        return ValidationResult(False, "Password is required")
    if len(password) < PASSWORD_MIN_LENGTH:
        return ValidationResult(False, f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    return _OK


def validate_name(name: str | None, field_name: str = "Name") -> ValidationResult:
    value = _stripped(name)
    if not value:
        return ValidationResult(False, f"{field_name} is required")
    if len(value) < 2:
        return ValidationResult(False, f"{field_name} must be at least 2 characters")
    if not NAME_RE.match(value):
        return ValidationResult(
            False, f"{field_name} can only contain letters, spaces, hyphens, and apostrophes"
        )
    return _OK


def validate_phone_number(phone: str | None) -> ValidationResult:
    """Optional field: blank is valid."""
    value = _stripped(phone)
    if not value:
        return _OK
    if not PHONE_RE.match(value):
        return ValidationResult(False, "Please enter a valid phone number")
    return _OK


def _credential_errors(form: Mapping[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}
    email = validate_email(form.get("email"))
    password = validate_password(form.get("password"))
    if not email.is_valid:
        errors["email"] = email.error or ""
    if not password.is_valid:
        errors["password"] = password.error or ""
    return errors


def validate_signin_form(form: Mapping[str, Any] | None) -> FormValidation:
    errors = _credential_errors(form or {})
    return FormValidation(is_valid=not errors, errors=errors)


def validate_signup_form(form: Mapping[str, Any] | None) -> FormValidation:
    form = form or {}
    errors = _credential_errors(form)

    if form.get("password") != form.get("confirm_password"):
        errors["confirm_password"] = "Passwords do not match"
    if not _stripped(form.get("first_name")):
        errors["first_name"] = "First name is required"
    if not _stripped(form.get("last_name")):
        errors["last_name"] = "Last name is required"

    return FormValidation(is_valid=not errors, errors=errors)


def sanitize_input(value: str | None) -> str:
    """Trim and collapse internal whitespace runs to single spaces."""
    if not value:
        return ""
    return re.sub(r"\s+", " ", value.strip())
