"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


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


class AuthenticityError(DomainException):
    """Raised when a provider webhook signature is missing or invalid."""

    def __init__(self, message: str = "invalid signature", code: str = "invalid_signature"):
        super().__init__(message, code=code)


class WebhookMisconfiguredError(DomainException):
    """Raised when the webhook signing secret is not configured."""

    def __init__(self, message: str = "missing secret"):
        super().__init__(message, code="missing_secret")


class ValidationError(DomainException):
    """Base exception for missing or malformed request fields."""

    pass


class EmailMissingError(ValidationError):
    """Raised when an email is absent or syntactically invalid."""

    def __init__(self, message: str = "email missing"):
        super().__init__(message, code="email_missing")


class LicenseKeyMissingError(ValidationError):
    """Raised when a license key is empty after normalization."""

    def __init__(self, message: str = "key missing"):
        super().__init__(message, code="key_missing")


class DeviceIdMissingError(ValidationError):
    """Raised when a device identifier is absent."""

    def __init__(self, message: str = "modelId missing"):
        super().__init__(message, code="device_id_missing")


class InvalidLicenseKeyError(ValidationError):
    """Raised when the key-lookup oracle does not know a license key."""

    def __init__(self, message: str = "Invalid license key"):
        super().__init__(message, code="invalid_key")


class ConflictError(DomainException):
    """Base exception for expected steady-state conflicts."""

    pass


class KeyAlreadyRedeemedError(ConflictError):
    """Raised when a license key was already redeemed by any account."""

    def __init__(self, message: str = "License key already redeemed"):
        super().__init__(message, code="key_already_redeemed")


class KeyAlreadyRedeemedInAccountError(ConflictError):
    """Raised when a license key is already in the account's local registry."""

    def __init__(self, message: str = "License key already redeemed in this account"):
        super().__init__(message, code="key_already_redeemed_in_account")


class NoFreeSeatError(ConflictError):
    """Raised when an unlocked account has no assignable seat left."""

    def __init__(self, message: str = "no free seat"):
        super().__init__(message, code="no_free_seat")


class LockedError(DomainException):
    """Base exception for the account-level lock gate."""

    pass


class AccountLockedError(LockedError):
    """Raised when a locked account attempts to assign or redeem."""

    def __init__(self, message: str = "account_locked"):
        super().__init__(message, code="account_locked")


class NotFoundError(DomainException):
    """Base exception for missing resources."""

    pass


class SeatNotFoundError(NotFoundError):
    """Raised when a seat id does not exist in the account."""

    def __init__(self, message: str = "Seat not found"):
        super().__init__(message, code="seat_not_found")


class TransientStoreError(DomainException):
    """Raised when the account store fails; the operation was not applied."""

    def __init__(self, message: str = "Account store unavailable"):
        super().__init__(message, code="store_unavailable")


class KeyLookupUnavailableError(DomainException):
    """Raised when the key-lookup oracle cannot give a definite answer."""

    def __init__(self, message: str = "Key lookup unavailable"):
        super().__init__(message, code="key_lookup_unavailable")
