# File: src/casestatus/core/validators.py
"""Reusable validation utilities for admin input."""

import re

REGISTRATION_NUMBER_PATTERN = re.compile(r"^A?[0-9][0-9-]{0,19}$")
NATIONALITY_PATTERN = re.compile(r"^[A-Z]{2}$")


def validate_registration_number(value: str) -> str:
    """
    Validate an alien registration number (A-Number).

    Accepts an optional leading "A" followed by digits and dashes,
    e.g. "20544377", "A123", "A-123-456".

    Returns:
        Stripped, upper-cased registration number

    Raises:
        ValueError: If the format is invalid
    """
    cleaned = value.strip().upper() if value else ""
    if not cleaned:
        raise ValueError("Registration number cannot be empty")

    if not REGISTRATION_NUMBER_PATTERN.match(cleaned.replace("A-", "A", 1)):
        raise ValueError("Registration number can only contain digits and dashes, optionally prefixed by 'A'")

    return cleaned


def validate_nationality(value: str) -> str:
    """Validate an ISO 3166-1 alpha-2 nationality code ("MX", "GT")."""
    cleaned = value.strip().upper() if value else ""
    if not NATIONALITY_PATTERN.match(cleaned):
        raise ValueError("Nationality must be a two-letter country code")
    return cleaned


_PHONE_CHARS = re.compile(r"^[0-9\s+\-()]+$")
_EMAIL = re.compile(r"^[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}$")


def validate_phone(value: str | None) -> str | None:
    """Court or attorney contact number; blank means none on file."""
    number = (value or "").strip()
    if not number:
        return None
    if not _PHONE_CHARS.match(number):
        raise ValueError("Contact phone may only use digits, spaces and + - ( )")
    if sum(ch.isdigit() for ch in number) < 7:
        raise ValueError("Contact phone needs at least 7 digits")
    return number


def strip_html(value: str | None) -> str | None:
    """
    Remove HTML tags from free text.

    Escaping is left to the template layer, which autoescapes on render.

    Returns:
        Cleaned text or None if empty
    """
    if not value:
        return None

    cleaned = re.sub(r"<[^>]+>", "", value).strip()
    return cleaned or None


def validate_email(value: str) -> str:
    """Lowercased login email for an administrator account."""
    email = value.strip().lower()
    if not _EMAIL.match(email):
        raise ValueError(f"Not a usable login email: {email!r}")
    return email
