"""Tests for the admin bootstrap script."""

from __future__ import annotations

import pytest

from social_network.models import User
from social_network.scripts.create_admin import ensure_admin, main


def test_creates_active_admin(db_session, password_hasher) -> None:
    user, created = ensure_admin(
        db_session, password_hasher, "admin", "admin@example.com", "admin-pass"
    )
    assert created is True
    assert user.is_admin is True
    assert user.is_active is True
    assert password_hasher.verify("admin-pass", user.password)


def test_promotes_existing_account(db_session, password_hasher, test_user) -> None:
    user, created = ensure_admin(
        db_session, password_hasher, "ignored", test_user.email, "fresh-pass"
    )
    assert created is False
    assert user.id == test_user.id
    assert user.username == "alice"
    assert user.is_admin is True
    assert db_session.query(User).count() == 1


def test_admin_can_reach_dashboard(client, db_session, password_hasher) -> None:
    ensure_admin(db_session, password_hasher, "admin", "admin@example.com", "admin-pass")
    token = client.post(
        "/api/login", json={"email": "admin@example.com", "password": "admin-pass"}
    ).json()["token"]
    response = client.get("/api/admin/users", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


@pytest.mark.parametrize(
    "argv",
    [
        ["--username", "admin", "--email", "not-an-email", "--password", "x"],
        ["--username", "admin1", "--email", "admin@example.com", "--password", "x"],
    ],
)
def test_rejects_invalid_input(argv, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 1
    assert "invalid username or email" in capsys.readouterr().err
