"""Error type raised by every failure path of the action."""

from enum import Enum


class ErrorKind(str, Enum):
    """Where a failure originated. Drives retry classification."""

    CONFIGURATION = "configuration"
    TOKEN_EXCHANGE = "token_exchange"
    USER_NOT_FOUND = "user_not_found"
    LOOKUP = "lookup"
    SEND = "send"


# Kinds that are never worth retrying, whatever the HTTP status
FATAL_KINDS = frozenset({ErrorKind.CONFIGURATION, ErrorKind.TOKEN_EXCHANGE, ErrorKind.USER_NOT_FOUND})


class ActionError(Exception):
    """A failure of the action, tagged with its kind and upstream HTTP status.

    ``str(error)`` is the human-readable message, so callers that only know
    about plain exceptions still see the same text.
    """

    def __init__(self, message: str, kind: ErrorKind, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code

    @property
    def fatal(self) -> bool:
        """True when the kind alone rules out a retry."""
        return self.kind in FATAL_KINDS

    def __repr__(self) -> str:
        return (
            f"ActionError({self.message!r}, kind={self.kind.value!r}, "
            f"status_code={self.status_code!r})"
        )


class ErrorClass(str, Enum):
    """Retry verdict for a failed invocation."""

    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    FATAL = "fatal"
    UNKNOWN = "unknown"


RATE_LIMIT_STATUS = 429
SERVER_ERROR_STATUSES = (502, 503, 504)
AUTH_FAILURE_STATUSES = (401, 403)


def _classify_status(status_code: int | None) -> ErrorClass:
    if status_code == RATE_LIMIT_STATUS:
        return ErrorClass.RATE_LIMITED
    if status_code in SERVER_ERROR_STATUSES:
        return ErrorClass.SERVER_ERROR
    if status_code in AUTH_FAILURE_STATUSES:
        return ErrorClass.FATAL
    return ErrorClass.UNKNOWN


def classify_error(exc: BaseException) -> ErrorClass:
    """Classify an error raised by a previous invocation.

    ActionErrors are classified from their kind, then their status code.
    Other exceptions fall back to looking for status codes, or the
    "User not found" phrase, in the message text.
    """
    if isinstance(exc, ActionError):
        if exc.fatal:
            return ErrorClass.FATAL
        return _classify_status(exc.status_code)

    message = str(exc)
    if str(RATE_LIMIT_STATUS) in message:
        return ErrorClass.RATE_LIMITED
    if any(str(status) in message for status in SERVER_ERROR_STATUSES):
        return ErrorClass.SERVER_ERROR
    if any(str(status) in message for status in AUTH_FAILURE_STATUSES) or "User not found" in message:
        return ErrorClass.FATAL
    return ErrorClass.UNKNOWN
