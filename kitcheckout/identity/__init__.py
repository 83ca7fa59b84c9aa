"""
Identity Module for KitCheckout

Account handling:
- SHA-256 password digests
- Registration and authentication
- Legacy plaintext-password migration
"""

from kitcheckout.identity.passwords import (
    hash_password,
    verify_password,
)
from kitcheckout.identity.service import (
    IdentityService,
    check_password_strength,
)

__all__ = [
    "hash_password",
    "verify_password",
    "IdentityService",
    "check_password_strength",
]
