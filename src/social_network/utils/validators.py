"""Input validation helpers for account data."""

from __future__ import annotations

import re
import secrets

_EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,6}$")
MAX_TLD_LENGTH = 6


def is_valid_email(email: str) -> bool:
    """Return True if `email` looks like a deliverable address."""
    if not _EMAIL_PATTERN.match(email):
        return False
    if ".." in email:
        return False
    tld = email.rsplit(".", 1)[-1]
    return len(tld) <= MAX_TLD_LENGTH


def is_alpha(value: str) -> bool:
    """Return True if every character of `value` is a letter."""
    return all(ch.isalpha() for ch in value)


def generate_code() -> int:
    """Return a random 4-digit verification code."""
    return 1000 + secrets.randbelow(9000)
