"""Password hashing utilities built on bcrypt."""

from __future__ import annotations

import asyncio
import re

import bcrypt

DEFAULT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes of input.
MAX_PASSWORD_BYTES = 72

_BCRYPT_DIGEST = re.compile(r"^\$2[abxy]?\$(0[4-9]|[12]\d|3[01])\$[./A-Za-z0-9]{53}$")


class MalformedHashError(ValueError):
    """Raised when a stored digest is not a bcrypt hash."""


class PasswordTooLongError(ValueError):
    """Raised when a password exceeds bcrypt's input limit."""


class PasswordHasher:
    """Salted, deliberately slow one-way password hashing."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """Return a bcrypt digest of `plaintext` with a fresh random salt.

        Args:
            plaintext: Password as entered by the user.

        Returns:
            The modular-crypt encoded digest (``$2b$<cost>$<salt><hash>``).

        Raises:
            PasswordTooLongError: If the UTF-8 encoding exceeds 72 bytes.
        """
        password = plaintext.encode("utf-8")
        if len(password) > MAX_PASSWORD_BYTES:
            raise PasswordTooLongError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
            )
        return bcrypt.hashpw(password, bcrypt.gensalt(rounds=self.rounds)).decode("ascii")

    def verify(self, plaintext: str, digest: str) -> bool:
        """Check `plaintext` against a stored digest.

        The comparison itself is done by `bcrypt.checkpw`, which compares in
        constant time.

        Returns:
            True on match, False on mismatch.

        Raises:
            MalformedHashError: If `digest` is not a bcrypt hash.
        """
        if not _BCRYPT_DIGEST.match(digest or ""):
            raise MalformedHashError("Stored password digest is malformed")
        password = plaintext.encode("utf-8")
        if len(password) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(password, digest.encode("ascii"))
        except ValueError as err:
            raise MalformedHashError("Stored password digest is malformed") from err

    async def hash_async(self, plaintext: str) -> str:
        """`hash` on a worker thread, for use inside request handlers."""
        return await asyncio.to_thread(self.hash, plaintext)

    async def verify_async(self, plaintext: str, digest: str) -> bool:
        """`verify` on a worker thread, for use inside request handlers."""
        return await asyncio.to_thread(self.verify, plaintext, digest)
