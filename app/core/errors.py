"""
Domain errors raised by the stores, the authorization policy and the services.

Every error carries an ``ErrorCode`` and a message that is safe to show to the
caller. The HTTP layer maps codes to status codes in ``app.main``.
"""
from enum import Enum
from typing import List, NamedTuple


class ErrorCode(str, Enum):
    VALIDATION = "VALIDATION"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    DUPLICATE_REGISTRATION = "DUPLICATE_REGISTRATION"
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    GUEST_NOT_FOUND = "GUEST_NOT_FOUND"
    NOT_OWNER = "NOT_OWNER"
    INSUFFICIENT_ROLE = "INSUFFICIENT_ROLE"
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    BAD_CREDENTIAL = "BAD_CREDENTIAL"
    LOCKED_OUT = "LOCKED_OUT"
    WEAK_CREDENTIAL = "WEAK_CREDENTIAL"
    INVALID_SCHEDULE = "INVALID_SCHEDULE"


class FieldError(NamedTuple):
    field: str
    message: str


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode = ErrorCode.VALIDATION

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised when input fails field-level validation."""

    code = ErrorCode.VALIDATION

    def __init__(self, errors: List[FieldError]) -> None:
        self.errors = list(errors)
        super().__init__(", ".join(e.message for e in self.errors))


class DuplicateEmailError(DomainError):
    code = ErrorCode.DUPLICATE_EMAIL

    def __init__(self, email: str) -> None:
        super().__init__("This email is already registered.")
        self.email = email


class DuplicateRegistrationError(DomainError):
    code = ErrorCode.DUPLICATE_REGISTRATION

    def __init__(self, event_id: int, email: str) -> None:
        super().__init__("This email is already registered for this event.")
        self.event_id = event_id
        self.email = email


class AccountNotFoundError(DomainError):
    code = ErrorCode.ACCOUNT_NOT_FOUND

    def __init__(self, account_id=None, message: str = "Account not found.") -> None:
        super().__init__(message)
        self.account_id = account_id


class EventNotFoundError(DomainError):
    code = ErrorCode.EVENT_NOT_FOUND

    def __init__(self, event_id, message: str = "Event not found.") -> None:
        super().__init__(message)
        self.event_id = event_id


class GuestNotFoundError(DomainError):
    code = ErrorCode.GUEST_NOT_FOUND

    def __init__(self, guest_id) -> None:
        super().__init__("Guest not found.")
        self.guest_id = guest_id


class NotOwnerError(DomainError):
    """Raised when an organiser targets an event owned by another account."""

    code = ErrorCode.NOT_OWNER

    def __init__(self) -> None:
        super().__init__("You can only manage your own events.")


class InsufficientRoleError(DomainError):
    code = ErrorCode.INSUFFICIENT_ROLE

    def __init__(self) -> None:
        super().__init__("You do not have permission to perform this action.")


class AuthenticationRequiredError(DomainError):
    code = ErrorCode.AUTHENTICATION_REQUIRED

    def __init__(self) -> None:
        super().__init__("Authentication required")


class BadCredentialError(DomainError):
    """Raised for an unknown email or a wrong password alike."""

    code = ErrorCode.BAD_CREDENTIAL

    def __init__(self) -> None:
        super().__init__("Invalid email or password.")


class LockedOutError(DomainError):
    code = ErrorCode.LOCKED_OUT

    def __init__(self) -> None:
        super().__init__(
            "Your account has been locked out due to too many failed login attempts. "
            "Please try again later."
        )


class WeakCredentialError(DomainError):
    code = ErrorCode.WEAK_CREDENTIAL


class InvalidScheduleError(DomainError):
    code = ErrorCode.INVALID_SCHEDULE

    def __init__(self) -> None:
        super().__init__("Event date must be in the future.")
