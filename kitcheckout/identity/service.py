"""
Identity Service for KitCheckout

Account lifecycle on top of the Users collection:
- Registration with email, password and admin-code rules
- Authentication with a single combined failure
- One-time migration of legacy plaintext passwords
"""

import re
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from loguru import logger

from kitcheckout.errors import AuthenticationError, ConflictError, ValidationError
from kitcheckout.storage.records import Role, User
from kitcheckout.storage.repository import CheckoutRepository
from kitcheckout.utils import Clock, epoch_millis, normalize_email, utcnow
from .passwords import hash_password, verify_password

MIN_PASSWORD_LENGTH = 8


def check_password_strength(password: str) -> dict:
    """Evaluate the password rules individually."""
    length = len(password or "") >= MIN_PASSWORD_LENGTH
    letters = bool(re.search(r"[A-Za-z]", password or ""))
    digits = bool(re.search(r"\d", password or ""))
    return {
        "length": length,
        "letters": letters,
        "digits": digits,
        "ok": length and letters and digits,
    }


class IdentityService:
    """
    Registration, login and legacy-user migration.

    Usage:
        identity = IdentityService(repo, admin_code="SPORTS-ADMIN")

        identity.register("a@school.edu", "goalie123")
        user = identity.authenticate(" A@School.edu ", "goalie123")
    """

    def __init__(
        self,
        repository: CheckoutRepository,
        admin_code: str,
        clock: Optional[Clock] = None,
    ):
        self.repository = repository
        self.admin_code = admin_code
        self.clock = clock or utcnow

    def find_user(self, email: str) -> Optional[User]:
        """Look up a user by trimmed, case-insensitive email."""
        email = normalize_email(email)
        return next((u for u in self.repository.get_users() if u.email == email), None)

    def register(
        self,
        email: str,
        password: str,
        role: Role = Role.STUDENT,
        admin_code: Optional[str] = None,
    ) -> User:
        """
        Create a new account.

        Args:
            email: Account email; stored lower-cased
            password: At least 8 characters with letters and digits
            role: Requested role
            admin_code: Required when ``role`` is admin

        Returns:
            Created User

        Raises:
            ValidationError: INVALID_EMAIL_FORMAT, WEAK_PASSWORD or INVALID_ADMIN_CODE
            ConflictError: EMAIL_IN_USE
        """
        role = Role(role)
        email = normalize_email(email)

        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValidationError(
                "Invalid email format.", code="INVALID_EMAIL_FORMAT", detail=str(e)
            ) from e

        with self.repository.lock:
            user = self._create_user(email, password, role, admin_code)

        logger.info(f"Registered {role.value} account {email}")
        return user

    def _create_user(self, email: str, password: str, role: Role, admin_code: Optional[str]) -> User:
        users = self.repository.get_users()
        if any(u.email == email for u in users):
            raise ConflictError("This email is already in use.", code="EMAIL_IN_USE")

        if not check_password_strength(password)["ok"]:
            raise ValidationError(
                "Password must be at least 8 characters and include letters and numbers.",
                code="WEAK_PASSWORD",
            )

        if role == Role.ADMIN and admin_code != self.admin_code:
            raise ValidationError("Invalid admin code.", code="INVALID_ADMIN_CODE")

        user = User(
            email=email,
            password_hash=hash_password(password),
            role=role,
            created_at=epoch_millis(self.clock()),
        )
        self.repository.save_user_documents([*self.repository.get_user_documents(), user.to_dict()])
        return user

    def authenticate(self, email: str, password: str) -> User:
        """
        Verify credentials.

        Raises:
            AuthenticationError: Unknown email or wrong password (indistinguishable)
        """
        user = self.find_user(email)
        if user and verify_password(password or "", user.password_hash):
            return user

        logger.info("Login failed")
        raise AuthenticationError()

    def migrate_legacy_users(self) -> int:
        """
        Replace legacy plaintext ``password`` fields with ``passwordHash``.

        Records that already carry a hash are left untouched. Running this
        again once no legacy records remain is a no-op.

        Returns:
            Number of migrated records
        """
        with self.repository.lock:
            documents = self.repository.get_user_documents()
            migrated = 0

            for document in documents:
                if not isinstance(document, dict):
                    continue
                if document.get("password") and not document.get("passwordHash"):
                    document["passwordHash"] = hash_password(str(document["password"]))
                    del document["password"]
                    migrated += 1

            if migrated:
                self.repository.save_user_documents(documents)

        if migrated:
            logger.info(f"User data migrated to hashed passwords ({migrated} records)")

        return migrated
