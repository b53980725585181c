class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` is a stable identifier callers can branch on instead of parsing
    the human readable message.
    """

    code = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class ConflictError(DomainError):
    """Raised when a write collides with existing state (duplicates)."""

    code = "conflict"


class InvalidStateError(DomainError):
    """Raised when an action is attempted outside its required state."""

    code = "invalid_state"


class AuthorizationError(DomainError):
    """Raised when an actor lacks role or reporting-line permission."""

    code = "forbidden"


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist or is not visible."""

    code = "not_found"


class AlreadyClockedInError(ConflictError):
    code = "already_clocked_in"


class AlreadyClockedOutError(ConflictError):
    code = "already_clocked_out"


class NotClockedInError(InvalidStateError):
    code = "not_clocked_in"


class NoShiftScheduledError(InvalidStateError):
    code = "no_shift_scheduled"
