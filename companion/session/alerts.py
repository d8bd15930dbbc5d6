"""User-facing alerts for failed session actions."""

from collections.abc import Callable

from pydantic import BaseModel

from companion.api.errors import ErrorKind

CONFLICT_MESSAGE = (
    "Summarization is in progress. Please wait for it to finish before sending messages."
)
INSUFFICIENT_HISTORY_MESSAGE = (
    "Not enough conversation history to reminisce yet. At least 10 messages are needed."
)


class Alert(BaseModel):
    """A failure to show to the user.

    Attributes:
        kind: Classified failure category.
        message: Text to display.
    """

    kind: ErrorKind
    message: str


AlertHandler = Callable[[Alert], None]


def alert_for(kind: ErrorKind, generic: str) -> Alert:
    """Build the alert for a failure, using specific text where one exists.

    Args:
        kind: Failure category from the conversation client.
        generic: Action-specific fallback text for transport failures.
    """
    if kind is ErrorKind.CONFLICT:
        return Alert(kind=kind, message=CONFLICT_MESSAGE)
    if kind is ErrorKind.INSUFFICIENT_HISTORY:
        return Alert(kind=kind, message=INSUFFICIENT_HISTORY_MESSAGE)
    return Alert(kind=kind, message=generic)
