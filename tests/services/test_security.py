"""Tests for bcrypt password hashing."""

from __future__ import annotations

import pytest

from social_network.core.security import (
    MAX_PASSWORD_BYTES,
    MalformedHashError,
    PasswordHasher,
    PasswordTooLongError,
)


@pytest.fixture(scope="module")
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


def test_hashes_are_salted(hasher: PasswordHasher) -> None:
    """Hashing the same password twice yields two different digests."""
    first = hasher.hash("s3cret")
    second = hasher.hash("s3cret")
    assert first != second
    assert hasher.verify("s3cret", first)
    assert hasher.verify("s3cret", second)


def test_digest_encodes_cost(hasher: PasswordHasher) -> None:
    digest = hasher.hash("s3cret")
    assert digest.startswith("$2b$04$")
    assert "s3cret" not in digest


def test_wrong_password_is_rejected(hasher: PasswordHasher) -> None:
    digest = hasher.hash("s3cret")
    assert hasher.verify("S3cret", digest) is False
    assert hasher.verify("", digest) is False


def test_unicode_password(hasher: PasswordHasher) -> None:
    digest = hasher.hash("pässwörd")
    assert hasher.verify("pässwörd", digest)
    assert not hasher.verify("passwort", digest)


@pytest.mark.parametrize("digest", ["", "plaintext", "$2b$04$short", "$1$abc$def"])
def test_malformed_digest_raises(hasher: PasswordHasher, digest: str) -> None:
    with pytest.raises(MalformedHashError):
        hasher.verify("anything", digest)


def test_password_over_limit_cannot_be_hashed(hasher: PasswordHasher) -> None:
    with pytest.raises(PasswordTooLongError):
        hasher.hash("x" * (MAX_PASSWORD_BYTES + 1))


def test_password_over_limit_never_verifies(hasher: PasswordHasher) -> None:
    exact = "x" * MAX_PASSWORD_BYTES
    digest = hasher.hash(exact)
    assert hasher.verify(exact, digest)
    assert hasher.verify(exact + "y", digest) is False


@pytest.mark.asyncio
async def test_async_variants_match_sync(hasher: PasswordHasher) -> None:
    digest = await hasher.hash_async("s3cret")
    assert hasher.verify("s3cret", digest)
    assert await hasher.verify_async("s3cret", digest) is True
    assert await hasher.verify_async("wrong", digest) is False
