"""Send orchestration with optimistic append and rollback.

Every exchange with the conversation service runs through the same state
machine::

    Idle -> Sending -> RevealingSuccess -> Idle
                    -> RollingBack      -> Idle

Entering Sending records the timeline length, takes the pending attachment
and (for user messages) appends the user's bubble before the service has
answered. On success the response is flattened and revealed. On failure the
timeline is truncated to the recorded length and the attachment put back
before the error is reported. The sending flag is cleared on every path.

Entry points differ only in which service call they make, whether the result
is revealed, and whether failures alert the user or are only logged:

- send_user_message: user text, revealed, alerts
- send_proactive_message: menu triggered, revealed, alerts
- send_proactive_message_auto: timer triggered, revealed, logged only
- trigger_web_search / trigger_reminisce: background actions, not revealed, alerts
"""

import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from companion.api.client import ConversationClient
from companion.api.errors import ConversationError
from companion.models.schemas import ServerMessage
from companion.session.alerts import AlertHandler, alert_for
from companion.session.attachments import AttachmentManager, PendingAttachment
from companion.session.revealer import ResponseRevealer
from companion.session.state import SessionState
from companion.session.timeline import DisplayMessage, Timeline, flatten_messages

logger = logging.getLogger(__name__)

ServiceCall = Callable[[PendingAttachment | None], Awaitable[list[ServerMessage]]]


class ExchangeStatus(str, Enum):
    """How an orchestrated exchange ended."""

    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"


class SendOrchestrator:
    """Runs exchanges with the conversation service against the local timeline."""

    def __init__(
        self,
        client: ConversationClient,
        timeline: Timeline,
        attachments: AttachmentManager,
        state: SessionState,
        revealer: ResponseRevealer,
        on_alert: AlertHandler | None = None,
    ) -> None:
        self._client = client
        self._timeline = timeline
        self._attachments = attachments
        self._state = state
        self._revealer = revealer
        self._on_alert = on_alert

    async def send_user_message(self, text: str) -> ExchangeStatus:
        """Send the user's text along with any pending attachment.

        Args:
            text: Raw input text; surrounding whitespace is ignored.

        Returns:
            SKIPPED if the text is blank or the session is busy.
        """
        text = text.strip()
        if not text:
            return ExchangeStatus.SKIPPED

        async def call(attachment: PendingAttachment | None) -> list[ServerMessage]:
            images = [attachment.to_payload()] if attachment else []
            return await self._client.send_unified_message(text, images)

        return await self._exchange(
            call,
            action="message",
            failure_text="Failed to send message. Please try again.",
            user_text=text,
        )

    async def send_proactive_message(self) -> ExchangeStatus:
        """Ask the assistant to start a conversation (menu action)."""
        return await self._exchange(
            lambda _: self._client.send_proactive_message(),
            action="proactive message",
            failure_text="Failed to get a proactive message. Please try again.",
        )

    async def send_proactive_message_auto(self) -> ExchangeStatus:
        """Timer-triggered proactive message; failures are only logged."""
        return await self._exchange(
            lambda _: self._client.send_proactive_message(),
            action="automatic proactive message",
            failure_text="Failed to get a proactive message.",
            surface_errors=False,
        )

    async def trigger_web_search(self) -> ExchangeStatus:
        """Run the web search background action without showing its result."""
        return await self._exchange(
            lambda _: self._client.trigger_web_search(),
            action="web search",
            failure_text="Web search failed. Please try again.",
            reveal=False,
        )

    async def trigger_reminisce(self) -> ExchangeStatus:
        """Run the reminisce background action without showing its result."""
        return await self._exchange(
            lambda _: self._client.trigger_reminisce(),
            action="reminisce",
            failure_text="Reminisce failed. Please try again.",
            reveal=False,
        )

    async def _exchange(
        self,
        call: ServiceCall,
        action: str,
        failure_text: str,
        user_text: str | None = None,
        reveal: bool = True,
        surface_errors: bool = True,
    ) -> ExchangeStatus:
        if not self._state.try_begin_send():
            logger.debug(f"Skipping {action}: session busy")
            return ExchangeStatus.SKIPPED

        try:
            rollback_point = self._timeline.snapshot_length()
            attachment = None
            if user_text is not None:
                attachment = self._attachments.consume()
                self._timeline.append(
                    DisplayMessage(
                        role="user",
                        content=user_text,
                        image_path=attachment.filename if attachment else None,
                    )
                )

            try:
                messages = await call(attachment)
            except Exception as e:
                self._timeline.rollback(rollback_point)
                if attachment is not None:
                    self._attachments.restore(attachment)
                if not isinstance(e, ConversationError):
                    raise
                self._report(e, action, failure_text, surface_errors)
                return ExchangeStatus.FAILED

            if reveal:
                await self._revealer.reveal(flatten_messages(messages))
            else:
                logger.info(f"{action.capitalize()} completed with {len(messages)} message(s)")
            return ExchangeStatus.COMPLETED
        finally:
            self._state.end_send()

    def _report(
        self,
        error: ConversationError,
        action: str,
        failure_text: str,
        surface_errors: bool,
    ) -> None:
        logger.error(f"Failed {action} ({error.kind.value}): {error}")
        if surface_errors and self._on_alert is not None:
            self._on_alert(alert_for(error.kind, failure_text))
