"""Password hashing helpers (bcrypt).

Digests are self-describing (``$2b$<cost>$<salt+hash>``) so verification
needs nothing but the stored string. The cost factor comes from
configuration; there is no rotation or rehash-on-login policy.
"""

from __future__ import annotations

import logging

import bcrypt

from recruit_api.config import load_config

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 10
# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def _rounds() -> int:
    try:
        return load_config().security.bcrypt_rounds
    except ValueError:
        logger.warning("bcrypt_rounds_config_invalid; using default=%d", DEFAULT_ROUNDS)
        return DEFAULT_ROUNDS


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash ``password`` with a freshly generated salt.

    Raises ValueError when the password is longer than 72 bytes.
    """
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        raise ValueError("password exceeds 72 bytes")
    salt = bcrypt.gensalt(rounds=rounds or _rounds())
    return bcrypt.hashpw(raw, salt).decode("ascii")


def verify_password(candidate: str, digest: str) -> bool:
    """Return True when ``candidate`` hashes to ``digest`` under its embedded salt."""
    raw = candidate.encode("utf-8")
    if not digest or len(raw) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(raw, digest.encode("ascii"))
    except (ValueError, UnicodeEncodeError):
        # Malformed or non-bcrypt digest stored for this user
        logger.warning("password_digest_malformed")
        return False


__all__ = ["hash_password", "verify_password", "DEFAULT_ROUNDS", "MAX_PASSWORD_BYTES"]
