"""
Domain-level exceptions for the matching workflow.

Every exception carries a stable ``code`` so the (external) HTTP layer can map
failures to responses without inspecting messages. Preconditions are checked
before any write, so raising one of these never leaves a partial transition.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base exception for all domain-level errors."""

    code = "DOMAIN_ERROR"

    def __init__(self, message: str = "", *, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationError(DomainException):
    """Raised when domain validation rules or state preconditions are violated."""

    code = "BAD_REQUEST"


class InvalidStateError(ValidationError):
    """Raised when an entity is not in a status that allows the requested transition."""

    def __init__(self, entity: str, current: str, attempted: str, message: str | None = None):
        self.entity = entity
        self.current = current
        self.attempted = attempted
        super().__init__(
            message or f"Cannot {attempted} {entity} in status '{current}'"
        )


class DailyLimitReachedError(ValidationError):
    """Raised when a builder has used up today's interest quota."""

    code = "DAILY_LIMIT_REACHED"

    def __init__(self, limit: int, used: int):
        self.limit = limit
        self.used = used
        super().__init__(
            f"You've reached your daily limit of {limit} interests. Upgrade for more."
        )


class ProfileIncompleteError(ValidationError):
    """Raised when a builder acts before completing their profile."""


class NotFoundError(DomainException):
    """Base exception for entities not found."""

    code = "NOT_FOUND"


class OpeningNotFoundError(NotFoundError):
    """Raised when an opening is not found."""


class ProfileNotFoundError(NotFoundError):
    """Raised when a builder or founder profile is not found."""


class UserNotFoundError(NotFoundError):
    """Raised when a user account is not found."""


class InterestNotFoundError(NotFoundError):
    """Raised when an interest is not found."""


class ConversationNotFoundError(NotFoundError):
    """Raised when a conversation or message is not found."""


class TrialNotFoundError(NotFoundError):
    """Raised when a trial is not found."""


class AuthorizationError(DomainException):
    """Raised when the caller is not an authorized participant or owner."""

    code = "FORBIDDEN"


class ConflictError(DomainException):
    """Base exception for uniqueness violations."""

    code = "CONFLICT"


class DuplicateInterestError(ConflictError):
    """Raised when an interest already exists for a (builder, opening) pair."""


class DuplicateFeedbackError(ConflictError):
    """Raised when one side submits trial feedback twice."""


class LiveTrialExistsError(ConflictError):
    """Raised when a conversation already has a proposed or active trial."""


class ConcurrencyError(ConflictError):
    """Raised when a concurrent writer won a compare-and-set transition."""


class ConfigurationError(DomainException):
    """Raised when configuration is invalid or missing."""

    code = "CONFIGURATION_ERROR"


ERROR_STATUS_CODES: dict[str, int] = {
    "BAD_REQUEST": 400,
    "DAILY_LIMIT_REACHED": 400,
    "FORBIDDEN": 403,
    "NOT_FOUND": 404,
    "CONFLICT": 409,
    "CONFIGURATION_ERROR": 500,
    "DOMAIN_ERROR": 500,
}


def status_code_for(exc: DomainException) -> int:
    """Return the HTTP status an outer layer should surface for ``exc``."""
    return ERROR_STATUS_CODES.get(exc.code, 500)


__all__ = [
    "AuthorizationError",
    "ConcurrencyError",
    "ConfigurationError",
    "ConflictError",
    "ConversationNotFoundError",
    "DailyLimitReachedError",
    "DomainException",
    "DuplicateFeedbackError",
    "DuplicateInterestError",
    "ERROR_STATUS_CODES",
    "InterestNotFoundError",
    "InvalidStateError",
    "LiveTrialExistsError",
    "NotFoundError",
    "OpeningNotFoundError",
    "ProfileIncompleteError",
    "ProfileNotFoundError",
    "TrialNotFoundError",
    "UserNotFoundError",
    "ValidationError",
    "status_code_for",
]
