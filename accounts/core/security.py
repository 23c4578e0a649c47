"""Security helpers (hashing and verification)."""

from __future__ import annotations

import hashlib
import secrets

from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()


def hash_password(password: str) -> str:
    return _ph.hash(password)


def verify_password(password: str, stored_hash: str | None) -> bool:
    if not stored_hash or not password:
        return False
    try:
        return _ph.verify(stored_hash, password)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def new_reset_token() -> str:
    return secrets.token_urlsafe(32)


def digest_token(token: str) -> str:
    """Reset tokens are stored as SHA-256 digests, never in plain text."""
    return hashlib.sha256(token.encode()).hexdigest()
