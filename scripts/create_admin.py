#!/usr/bin/env python3
"""Create an admin account, or promote an existing user to admin.

The API never hands out the admin role, so the first administrator has to be
created from the command line.

Usage:
    # From project root:
    python scripts/create_admin.py admin@example.com "Site Admin" 's3cret-pass'

    # Promote an existing account (password is left untouched):
    python scripts/create_admin.py existing@example.com
"""

import argparse
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import Session

from src.database import init_db, session_scope
from src.models.enums import Role
from src.models.user import User
from src.services.users import get_user_by_email, normalize_email


def create_admin(session: Session, email: str, name: str | None, password: str | None) -> User:
    """Create or promote the admin account. The caller commits."""
    user = get_user_by_email(session, email)
    if user:
        user.role = Role.ADMIN
        user.is_verified = True
        print(f"Promoted {user.email} to admin.")
        return user

    if not name or not password:
        raise SystemExit("A new admin needs a name and a password.")

    user = User(name=name, email=normalize_email(email), role=Role.ADMIN, is_verified=True)
    user.password = password
    session.add(user)
    print(f"Created admin {user.email}.")
    return user


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("email")
    parser.add_argument("name", nargs="?")
    parser.add_argument("password", nargs="?")
    args = parser.parse_args()

    init_db()
    with session_scope() as session:
        create_admin(session, args.email, args.name, args.password)


if __name__ == "__main__":
    main()
