"""
Credential hashing.

bcrypt with a random per-password salt.  The work factor defaults to 10
and is taken from ``config.bcrypt_rounds`` by the auth service.
"""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes; newer releases raise instead
# of truncating silently.
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return a salted bcrypt hash (``$2b$<rounds>$...``) for ``password``."""
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check ``password`` against a stored bcrypt hash.

    Fails closed: a malformed or missing hash yields ``False``.
    """
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode())
    except (ValueError, TypeError, AttributeError):
        return False
