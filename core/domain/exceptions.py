"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""
from typing import Optional


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class KeyValidationError(DomainException):
    """Raised when a key operation receives invalid input."""

    def __init__(self, message: str = "Invalid request"):
        super().__init__(message, code="VALIDATION_ERROR")


class UnauthorizedError(DomainException):
    """Raised when the admin credential is missing or wrong."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHORIZED")


class KeyNotFoundError(DomainException):
    """Raised when an admin operation targets a key that does not exist."""

    def __init__(self, message: str = "Key not found"):
        super().__init__(message, code="KEY_NOT_FOUND")


class DuplicateKeyError(DomainException):
    """Raised by a key store when a key string is already taken."""

    def __init__(self, message: str = "Key already exists"):
        super().__init__(message, code="DUPLICATE_KEY")


class KeyGenerationError(DomainException):
    """Raised when no unique key could be generated."""

    def __init__(self, message: str = "Could not generate a unique key"):
        super().__init__(message, code="KEY_GENERATION_FAILED")


class VerificationRejected(DomainException):
    """Base exception for key verification rejections."""

    pass


class MissingKeyError(VerificationRejected):
    """Raised when a verification request carries no key."""

    def __init__(self, message: str = "key is required"):
        super().__init__(message, code="MISSING_KEY")


class MissingDeviceIdError(VerificationRejected):
    """Raised when a device-bound verification carries no device id."""

    def __init__(self, message: str = "device_id is required"):
        super().__init__(message, code="MISSING_DEVICE_ID")


class InvalidKeyError(VerificationRejected):
    """Raised when the presented key was never issued or was deleted."""

    def __init__(self, message: str = "Invalid key"):
        super().__init__(message, code="INVALID_KEY")


class KeyRevokedError(VerificationRejected):
    """Raised when the presented key has been revoked."""

    def __init__(self, message: str = "Key has been revoked"):
        super().__init__(message, code="KEY_REVOKED")


class KeyExpiredError(VerificationRejected):
    """Raised when the presented key has expired."""

    def __init__(self, message: str = "Key has expired"):
        super().__init__(message, code="KEY_EXPIRED")


class DeviceMismatchError(VerificationRejected):
    """
    Raised when a key bound to one device is presented by another.

    Carries the bound device's display name, never its identifier.
    """

    def __init__(
        self,
        device_name: Optional[str] = None,
        message: str = "Key is already activated on another device",
    ):
        super().__init__(message, code="DEVICE_MISMATCH")
        self.device_name = device_name


class StoreError(DomainException):
    """Base exception for key store infrastructure failures."""

    retryable = False


class StoreTimeoutError(StoreError):
    """Raised when a key store operation could not complete in time."""

    retryable = True

    def __init__(self, message: str = "Key store operation timed out"):
        super().__init__(message, code="STORE_TIMEOUT")


class StoreUnavailableError(StoreError):
    """Raised when the key store backend cannot be reached."""

    def __init__(self, message: str = "Key store unavailable"):
        super().__init__(message, code="STORE_UNAVAILABLE")
