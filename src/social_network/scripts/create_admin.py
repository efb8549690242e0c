"""Create an administrator account, or promote an existing one.

Administrators cannot be created through the HTTP API, so the first admin of a
fresh deployment is bootstrapped with this script against ``DATABASE_URL``.

Typical usage:
  social-network-create-admin --username admin --email admin@example.com
"""
from __future__ import annotations

import argparse
import getpass
import sys
from collections.abc import Sequence

from sqlalchemy.orm import Session

from social_network.core.security import PasswordHasher, PasswordTooLongError
from social_network.core.settings import get_settings
from social_network.db.session import build_engine, build_session_factory, create_tables
from social_network.models import User
from social_network.utils.validators import is_alpha, is_valid_email


def ensure_admin(
    db: Session,
    hasher: PasswordHasher,
    username: str,
    email: str,
    password: str,
) -> tuple[User, bool]:
    """Return the admin account for `email` and whether it was newly created.

    An existing account keeps its username and gets a new password, the admin
    flag and an active status.
    """
    user = db.query(User).filter(User.email == email).first()
    created = user is None
    if user is None:
        user = User(username=username, email=email)
        db.add(user)
    user.password = hasher.hash(password)
    user.is_admin = True
    user.is_active = True
    db.commit()
    db.refresh(user)
    return user, created


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create or promote an administrator account")
    parser.add_argument("--username", required=True, help="Alphabetic display name")
    parser.add_argument("--email", required=True, help="Login email address")
    parser.add_argument(
        "--password",
        help="Password to set (prompted for when omitted)",
    )
    args = parser.parse_args(argv)

    if not is_valid_email(args.email) or not args.username or not is_alpha(args.username):
        print("[create_admin] ERROR: invalid username or email", file=sys.stderr)
        sys.exit(1)
    password = args.password or getpass.getpass("Password: ")
    if not password:
        print("[create_admin] ERROR: password must not be empty", file=sys.stderr)
        sys.exit(1)

    settings = get_settings()
    engine = build_engine(settings.database_url_sync)
    if settings.create_tables:
        create_tables(engine)
    session_factory = build_session_factory(engine)
    try:
        with session_factory() as db:
            user, created = ensure_admin(
                db, PasswordHasher(settings.bcrypt_rounds), args.username, args.email, password
            )
    except PasswordTooLongError as exc:
        print(f"[create_admin] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        engine.dispose()

    action = "created" if created else "promoted"
    print(f"[create_admin] {action} admin {user.email} (id={user.id})")


if __name__ == "__main__":
    main()
