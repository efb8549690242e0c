"""Tests for account input validation helpers."""

from __future__ import annotations

import pytest

from social_network.utils.validators import generate_code, is_alpha, is_valid_email


@pytest.mark.parametrize(
    "email",
    ["alice@example.com", "first.last+tag@sub.example.org", "x_y%z@mail.co"],
)
def test_valid_emails(email: str) -> None:
    assert is_valid_email(email)


@pytest.mark.parametrize(
    "email",
    [
        "",
        "plainaddress",
        "@example.com",
        "alice@",
        "alice@example",
        "alice..smith@example.com",
        "alice@example..com",
        "alice@example.toolongtld",
        "alice@example.c",
        "alice smith@example.com",
    ],
)
def test_invalid_emails(email: str) -> None:
    assert not is_valid_email(email)


def test_is_alpha() -> None:
    assert is_alpha("Alice")
    assert is_alpha("Zoë")
    assert not is_alpha("alice1")
    assert not is_alpha("alice smith")
    assert not is_alpha("al-ice")


def test_generate_code_range() -> None:
    codes = {generate_code() for _ in range(500)}
    assert all(1000 <= code <= 9999 for code in codes)
    assert len(codes) > 1
