"""Error kinds raised at the conversation service boundary.

Failures are classified once, where the HTTP response is seen, so that the
session layer can branch on a closed set of kinds instead of error text.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure categories for conversation calls."""

    CONFIG_UNAVAILABLE = "config_unavailable"
    TRANSPORT = "transport"
    CONFLICT = "conflict"
    INSUFFICIENT_HISTORY = "insufficient_history"


class ConversationError(Exception):
    """Raised when a conversation service call fails.

    Attributes:
        kind: Classified failure category.
        status_code: HTTP status, if the service responded at all.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"ConversationError({self.kind.value!r}, {str(self)!r}, status_code={self.status_code})"
