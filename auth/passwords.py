"""Password hashing helpers built on bcrypt."""

import bcrypt

import config

# Prefixes produced by bcrypt implementations ($2a$, $2b$, $2y$)
_BCRYPT_PREFIX = "$2"


def looks_hashed(value: str) -> bool:
    """Return True if value is already a bcrypt hash."""
    return value.startswith(_BCRYPT_PREFIX) and len(value) == 60


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password with the configured work factor."""
    salt = bcrypt.gensalt(rounds=rounds or config.settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain-text password against a stored hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a valid bcrypt hash
        return False


def prepare_password_for_write(value: str) -> str:
    """
    Return the value to persist in users.password_hash.

    Every write path (signup, admin create/update, password change) goes
    through this function: plain text is hashed, an existing hash is kept
    as-is so re-saving a user never double-hashes.
    """
    if looks_hashed(value):
        return value
    return hash_password(value)
