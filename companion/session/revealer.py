"""Paced reveal of assistant responses into the timeline.

A response split into several bubbles is shown one bubble at a time with a
pause in between, so it reads like someone typing rather than a wall of text.
Each bubble that carries a mood switches the avatar as it appears.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from companion.session.avatar import AvatarResolver, ResolvedAvatar
from companion.session.timeline import DisplayMessage, Timeline

logger = logging.getLogger(__name__)

DEFAULT_REVEAL_DELAY = 1.0

Sleep = Callable[[float], Awaitable[None]]
AvatarListener = Callable[[ResolvedAvatar], None]


class ResponseRevealer:
    """Appends response messages to the timeline one at a time."""

    def __init__(
        self,
        timeline: Timeline,
        resolver: AvatarResolver,
        on_avatar: AvatarListener | None = None,
        delay: float = DEFAULT_REVEAL_DELAY,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the revealer.

        Args:
            timeline: Timeline the messages are appended to.
            resolver: Resolves message moods to avatar assets.
            on_avatar: Called with the new avatar when a message changes mood.
            delay: Default pause between messages, in seconds.
            sleep: Suspension primitive, replaceable in tests.
        """
        self._timeline = timeline
        self._resolver = resolver
        self._on_avatar = on_avatar
        self._delay = delay
        self._sleep = sleep

    async def reveal(
        self,
        messages: Sequence[DisplayMessage],
        delay: float | None = None,
    ) -> None:
        """Reveal messages in order, pausing between consecutive ones.

        Args:
            messages: Flattened response messages.
            delay: Pause between messages in seconds; defaults to the
                   revealer's configured delay.
        """
        delay = self._delay if delay is None else delay
        last = len(messages) - 1

        for index, message in enumerate(messages):
            self._timeline.append(message)

            if message.mood:
                avatar = await self._resolver.resolve(message.mood)
                if self._on_avatar is not None:
                    self._on_avatar(avatar)

            # Zero-length yield after every append so the UI renders the new bubble
            await self._sleep(0)

            if index < last:
                await self._sleep(delay)

        logger.debug(f"Revealed {len(messages)} message(s)")
