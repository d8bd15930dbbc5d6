"""Message timeline store with bounded rollback.

The timeline is the ordered list of bubbles shown in the chat. It only ever
grows by appending and shrinks by truncating back to an earlier length, which
is how a failed optimistic send is undone. Consumers subscribe once and are
notified after every change.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Literal

from pydantic import BaseModel, ConfigDict

from companion.models.schemas import ServerMessage

logger = logging.getLogger(__name__)

DISPLAY_ROLES = ("user", "assistant")


class DisplayMessage(BaseModel):
    """A single bubble in the chat timeline.

    Attributes:
        role: Who the bubble belongs to.
        content: Text shown in the bubble.
        mood: Assistant mood to switch to when the bubble is revealed.
        image_path: Cached image filename shown with the bubble.
    """

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str
    mood: str | None = None
    image_path: str | None = None


TimelineListener = Callable[["Timeline"], None]


def flatten_message(message: ServerMessage) -> list[DisplayMessage]:
    """Convert one stored message into the bubbles it is displayed as.

    An image message with a caption and a reaction shows only the reaction,
    next to the image. Anything else becomes one bubble per content segment.
    Roles other than user/assistant are not displayed.
    """
    if message.role not in DISPLAY_ROLES:
        return []

    if message.image_path and len(message.content_split) >= 2:
        return [
            DisplayMessage(
                role=message.role,
                content=message.content_split[1],
                mood=message.mood,
                image_path=message.image_path,
            )
        ]

    return [
        DisplayMessage(
            role=message.role,
            content=segment,
            mood=message.mood,
            image_path=message.image_path,
        )
        for segment in message.content_split
    ]


def flatten_messages(messages: Iterable[ServerMessage]) -> list[DisplayMessage]:
    return [display for message in messages for display in flatten_message(message)]


class Timeline:
    """Append-only list of display messages with truncating rollback."""

    def __init__(self) -> None:
        self._messages: list[DisplayMessage] = []
        self._listeners: list[TimelineListener] = []

    def __len__(self) -> int:
        return len(self._messages)

    @property
    def messages(self) -> tuple[DisplayMessage, ...]:
        return tuple(self._messages)

    def snapshot_length(self) -> int:
        """Return the current length, to be passed to rollback() later."""
        return len(self._messages)

    def append(self, message: DisplayMessage) -> int:
        """Add a message to the end.

        Returns:
            The new timeline length.
        """
        self._messages.append(message)
        self._notify()
        return len(self._messages)

    def extend(self, messages: Iterable[DisplayMessage]) -> int:
        """Append several messages with a single notification."""
        self._messages.extend(messages)
        self._notify()
        return len(self._messages)

    def rollback(self, to_length: int) -> None:
        """Truncate the timeline back to an earlier length.

        Args:
            to_length: A length previously returned by snapshot_length().

        Raises:
            ValueError: If to_length is negative or past the current end.
        """
        if to_length < 0 or to_length > len(self._messages):
            raise ValueError(
                f"Cannot roll back to {to_length}, timeline has {len(self._messages)} messages"
            )
        if to_length == len(self._messages):
            return

        removed = len(self._messages) - to_length
        del self._messages[to_length:]
        logger.debug(f"Rolled back {removed} timeline message(s)")
        self._notify()

    def subscribe(self, listener: TimelineListener) -> Callable[[], None]:
        """Register a listener called after every append or rollback.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
