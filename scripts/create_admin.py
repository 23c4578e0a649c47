#!/usr/bin/env python3
"""
Create an admin account, or promote an existing one, directly in the database.

Usage:
  python scripts/create_admin.py --email admin@example.com [--password ...] [--name "Site Admin"]
"""
from __future__ import annotations

import argparse
import secrets
import sys

from accounts.core.security import hash_password
from accounts.db.create_tables import create_all
from accounts.db.models import User
from accounts.repositories.sql_repository import SQLRepository


def create_admin(repo: SQLRepository, email: str, password: str | None, name: str | None = None) -> tuple[User, str | None]:
    """Return the admin user and the generated password (None when the account already existed)."""
    email = (email or "").strip().lower()
    if not email or "@" not in email:
        raise SystemExit("Invalid email")
    existing = repo.get_user_by_email(email)
    if existing:
        return repo.update_user(existing.id, {"role": "admin"}), None
    generated = None
    if not password:
        generated = password = secrets.token_urlsafe(12)
    if len(password) < 8:
        raise SystemExit("Password must have at least 8 characters")
    user = repo.create_user(email, hash_password(password), name=name)
    return repo.update_user(user.id, {"role": "admin"}), generated


def main() -> None:
    ap = argparse.ArgumentParser(description="Create or promote an admin account")
    ap.add_argument("--email", required=True, help="Account email")
    ap.add_argument("--password", help="Password for a new account (default: random)")
    ap.add_argument("--name", help="Display name for a new account")
    args = ap.parse_args()

    create_all()
    user, generated = create_admin(SQLRepository(), args.email, args.password, args.name)
    print("OK: admin ready")
    print(f"  ID: {user.id}")
    print(f"  Email: {user.email}")
    if generated:
        print(f"  Password: {generated}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
