"""Form-level checks. Each raises ValueError with a user-facing message."""
import math
import re

from utils.constants import (
    CATEGORY_TYPES, DEFAULT_CATEGORY_NAME, MIN_PASSWORD_LENGTH, TRANSACTION_TYPES,
)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def parse_amount(raw: str | float) -> float:
    """Parse a positive amount from user input, e.g. '1,250.50'."""
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = raw.strip().replace(",", "")
        if not text:
            raise ValueError("Amount is required.")
        try:
            value = float(text)
        except ValueError:
            raise ValueError("Amount must be a number.") from None
    if not math.isfinite(value) or value <= 0:
        raise ValueError("Amount must be positive.")
    return value


def parse_optional_amount(raw: str) -> float:
    """Non-negative amount where blank means 0."""
    text = raw.strip().replace(",", "")
    if not text:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        raise ValueError("Amount must be a number.") from None
    if not math.isfinite(value):
        raise ValueError("Amount must be a number.")
    if value < 0:
        raise ValueError("Amount cannot be negative.")
    return value


def validate_transaction_type(type_: str) -> str:
    if type_ not in TRANSACTION_TYPES:
        raise ValueError(f"Invalid type: {type_}")
    return type_


def validate_category_type(type_: str) -> str:
    if type_ not in CATEGORY_TYPES:
        raise ValueError(f"Invalid category type: {type_}")
    return type_


def transaction_category(name: str | None) -> str:
    """Blank category on a transaction falls back to 'Other'."""
    name = (name or "").strip()
    return name or DEFAULT_CATEGORY_NAME


def require_category(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise ValueError("Please choose a category.")
    return name


def require_category_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise ValueError("Category name cannot be empty.")
    return name


def validate_email(email: str) -> str:
    email = email.strip().lower()
    if not _EMAIL_RE.match(email):
        raise ValueError("Enter a valid email address.")
    return email


def validate_password(password: str) -> str:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    return password


def validate_passwords_match(password: str, confirm: str):
    if password != confirm:
        raise ValueError("Passwords do not match")
