# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Generator, Iterator
from dataclasses import dataclass, field
from itertools import count
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from social_network.core.security import PasswordHasher
from social_network.core.settings import Settings
from social_network.db.session import (
    Base,
    build_engine,
    build_session_factory,
    create_tables,
    drop_tables,
)
from social_network.main import create_app
from social_network.models import User

TEST_DB_URL = "sqlite://"
TEST_SECRET_KEY = "test-secret-key-not-for-production"
TEST_PASSWORD = "correct-horse"

_USER_COUNTER = count(1)


@dataclass
class SentEmail:
    to: str
    subject: str
    body: str
    attachment: Path | None = None
    attachment_bytes: bytes | None = None


@dataclass
class RecordingEmailSender:
    """In-memory stand-in for the SMTP sender."""

    sent: list[SentEmail] = field(default_factory=list)
    fail_for: set[str] = field(default_factory=set)

    async def send(
        self,
        to: str,
        subject: str,
        body: str,
        attachment: Path | None = None,
    ) -> bool:
        self.sent.append(
            SentEmail(
                to=to,
                subject=subject,
                body=body,
                attachment=attachment,
                attachment_bytes=attachment.read_bytes() if attachment else None,
            )
        )
        return to not in self.fail_for


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return Settings(
        SECRET_KEY=TEST_SECRET_KEY,
        DATABASE_URL=TEST_DB_URL,
        BCRYPT_ROUNDS=4,
        CREATE_TABLES=False,
        SMTP_HOST=None,
        _env_file=None,
    )


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = build_engine(TEST_DB_URL)
    create_tables(engine)
    try:
        yield engine
    finally:
        drop_tables(engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture()
def app(
    test_settings: Settings,
    engine: Engine,
    db_session: Session,
    email_sender: RecordingEmailSender,
) -> FastAPI:
    return create_app(test_settings, engine=engine, email_sender=email_sender)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture()
def make_user(
    db_session: Session, password_hasher: PasswordHasher
) -> Callable[..., User]:
    """Factory inserting an account directly into the database."""

    def _make_user(
        username: str | None = None,
        email: str | None = None,
        *,
        password: str = TEST_PASSWORD,
        is_admin: bool = False,
        is_active: bool = True,
    ) -> User:
        n = next(_USER_COUNTER)
        user = User(
            username=username or f"user{chr(ord('a') + n % 26)}",
            email=email or f"user{n}@example.com",
            password=password_hasher.hash(password),
            is_admin=is_admin,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    return make_user("alice", "alice@example.com")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    return make_user("bob", "bob@example.com")


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user("root", "admin@example.com", is_admin=True)


def bearer(app: FastAPI, user: User) -> dict[str, str]:
    token = app.state.token_service.issue(user.id, user.is_admin)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_headers(app: FastAPI, test_user: User) -> dict[str, str]:
    return bearer(app, test_user)


@pytest.fixture()
def other_headers(app: FastAPI, other_user: User) -> dict[str, str]:
    return bearer(app, other_user)


@pytest.fixture()
def admin_headers(app: FastAPI, admin_user: User) -> dict[str, str]:
    return bearer(app, admin_user)
