"""
Error taxonomy for KitCheckout.

Every domain failure raised by the store, identity, ledger, catalog and
inventory layers derives from CheckoutError. The HTTP layer and the app
context translate these into responses and notifications.
"""


class CheckoutError(Exception):
    """Base exception for KitCheckout errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        detail: str = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class ValidationError(CheckoutError):
    """Input has the wrong shape or range. Nothing was written."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR", detail: str = None):
        super().__init__(
            message=message,
            code=code,
            status_code=400,
            detail=detail,
        )


class NotFoundError(CheckoutError):
    """Referenced entity does not exist."""

    def __init__(self, resource: str, identifier):
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            status_code=404,
            detail=f"No {resource} with identifier '{identifier}' exists",
        )


class ConflictError(CheckoutError):
    """Operation would violate a ledger or catalog invariant."""

    def __init__(self, message: str, code: str = "CONFLICT", detail: str = None):
        super().__init__(
            message=message,
            code=code,
            status_code=409,
            detail=detail,
        )


class AuthenticationError(CheckoutError):
    """Credentials missing or wrong."""

    def __init__(self, message: str = "Invalid email or password.", code: str = "INVALID_CREDENTIALS"):
        super().__init__(
            message=message,
            code=code,
            status_code=401,
        )


class PermissionDeniedError(CheckoutError):
    """Authenticated user lacks the required role."""

    def __init__(self, message: str = "Only admins can access this page."):
        super().__init__(
            message=message,
            code="PERMISSION_DENIED",
            status_code=403,
        )


class StorageReadError(CheckoutError):
    """Stored document could not be decoded. Recovered by the store."""

    def __init__(self, key: str, detail: str = None):
        self.key = key
        super().__init__(
            message=f"Could not read '{key}' from storage",
            code="STORAGE_READ_ERROR",
            status_code=500,
            detail=detail,
        )


class StorageWriteError(CheckoutError):
    """Document could not be persisted."""

    def __init__(self, key: str, detail: str = None):
        self.key = key
        super().__init__(
            message=f"Could not write '{key}' to storage",
            code="STORAGE_WRITE_ERROR",
            status_code=500,
            detail=detail,
        )


class StorageUnavailableError(CheckoutError):
    """Backing database could not be queried. Not recovered."""

    def __init__(self, key: str, detail: str = None):
        self.key = key
        super().__init__(
            message="Storage is unavailable",
            code="STORAGE_UNAVAILABLE",
            status_code=503,
            detail=f"{key}: {detail}" if detail else key,
        )
