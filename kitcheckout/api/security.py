"""
Bearer token handling for the KitCheckout API.

Access tokens are HS256 JWTs carrying the user's email as ``sub``, an
expiry, and a ``jti`` so a single token can be revoked on logout.
"""

import threading
from datetime import timedelta
from typing import Optional
from uuid import uuid4

from jose import JWTError, jwt
from loguru import logger

from kitcheckout.errors import AuthenticationError
from kitcheckout.utils import utcnow

ALGORITHM = "HS256"


def create_access_token(
    data: dict,
    secret_key: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign ``data`` with an expiry and a unique token id."""
    to_encode = data.copy()
    expire = utcnow() + (expires_delta or timedelta(minutes=15))
    to_encode.update({"exp": expire, "jti": uuid4().hex})
    return jwt.encode(to_encode, secret_key, algorithm=ALGORITHM)


class TokenService:
    """
    Issue, verify and revoke access tokens.

    Usage:
        tokens = TokenService(secret_key="change-me", expire_minutes=60)

        token = tokens.issue("a@school.edu")
        claims = tokens.decode(token)
        tokens.revoke(claims)
    """

    def __init__(self, secret_key: str, expire_minutes: int = 60):
        self.secret_key = secret_key
        self.expire_minutes = expire_minutes
        self._revoked: dict[str, float] = {}
        self._lock = threading.Lock()

    def issue(self, email: str) -> str:
        return create_access_token(
            data={"sub": email},
            secret_key=self.secret_key,
            expires_delta=timedelta(minutes=self.expire_minutes),
        )

    def decode(self, token: str) -> dict:
        """
        Verify a token's signature, expiry and revocation.

        Raises:
            AuthenticationError: NOT_AUTHENTICATED for any invalid token
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
        except JWTError as e:
            logger.info(f"Rejected access token: {e}")
            raise AuthenticationError(
                "Session expired. Please log in again.", code="NOT_AUTHENTICATED"
            ) from e

        if not payload.get("sub") or self.is_revoked(payload):
            raise AuthenticationError("Session expired. Please log in again.", code="NOT_AUTHENTICATED")
        return payload

    def revoke(self, payload: dict) -> None:
        """Reject the token described by ``payload`` until it would have expired anyway."""
        now = utcnow().timestamp()
        with self._lock:
            self._revoked = {jti: exp for jti, exp in self._revoked.items() if exp > now}
            self._revoked[payload.get("jti", "")] = float(payload.get("exp", now))

    def is_revoked(self, payload: dict) -> bool:
        with self._lock:
            return payload.get("jti", "") in self._revoked
