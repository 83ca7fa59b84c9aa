"""
Password hashing.

Digests are unsalted SHA-256 hex strings so that stored hashes stay
comparable with existing data. This is a local convenience, not a
security boundary.
"""

import hashlib
import hmac


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    return hmac.compare_digest(hash_password(password), hashed)
