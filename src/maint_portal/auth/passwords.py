"""
maint_portal.auth.passwords

bcrypt password hashing.
"""

from __future__ import annotations

import re

import bcrypt

# Same policy the admin user form enforces: 6+ chars with lower, upper and digit.
_PASSWORD_POLICY = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).{6,}$")

# bcrypt only reads the first 72 bytes, and bcrypt>=5 rejects anything longer.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, *, rounds: int = 12) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash.
        return False


def meets_policy(password: str) -> bool:
    return _PASSWORD_POLICY.match(password) is not None


def fits_bcrypt(password: str) -> bool:
    return len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES
