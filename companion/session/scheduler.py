"""Background tasks for the chat session.

Two independent asyncio tasks run beside the user's exchanges:

- The proactive check runs for the whole session. Every interval it asks the
  service whether the assistant should start a conversation and, if so,
  sends an automatic proactive message. Ticks while a send or summarization
  is in flight are skipped without a request. Query failures are logged only,
  and a tick that raises is logged without ending the loop.
- The summarization poll runs only while a summarization is in progress. It
  polls the status until the service reports idle, then clears the
  summarizing flag. A failed poll clears the flag and alerts the user.

Both tasks are cancelled by stop().
"""

import asyncio
import logging

from companion.api.client import ConversationClient
from companion.api.errors import ConversationError
from companion.models.schemas import SummarizationStatus
from companion.session.alerts import AlertHandler, alert_for
from companion.session.orchestrator import ExchangeStatus, SendOrchestrator
from companion.session.revealer import Sleep
from companion.session.state import SessionState

logger = logging.getLogger(__name__)

DEFAULT_PROACTIVE_INTERVAL = 5 * 60.0
DEFAULT_SUMMARIZATION_POLL_INTERVAL = 2.0


class BackgroundScheduler:
    """Owns the proactive-check and summarization-poll tasks."""

    def __init__(
        self,
        client: ConversationClient,
        orchestrator: SendOrchestrator,
        state: SessionState,
        on_alert: AlertHandler | None = None,
        proactive_interval: float = DEFAULT_PROACTIVE_INTERVAL,
        summarization_poll_interval: float = DEFAULT_SUMMARIZATION_POLL_INTERVAL,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._client = client
        self._orchestrator = orchestrator
        self._state = state
        self._on_alert = on_alert
        self._proactive_interval = proactive_interval
        self._poll_interval = summarization_poll_interval
        self._sleep = sleep
        self._proactive_task: asyncio.Task[None] | None = None
        self._summarization_task: asyncio.Task[None] | None = None

    @property
    def proactive_task(self) -> asyncio.Task[None] | None:
        return self._proactive_task

    @property
    def summarization_task(self) -> asyncio.Task[None] | None:
        return self._summarization_task

    def start(self) -> None:
        """Start the proactive-check task for the session lifetime."""
        if self._proactive_task is not None and not self._proactive_task.done():
            return
        self._proactive_task = asyncio.create_task(
            self._proactive_loop(), name="proactive-check"
        )
        logger.info(f"Proactive check started (every {self._proactive_interval:.0f}s)")

    async def stop(self) -> None:
        """Cancel both background tasks and wait for them to finish."""
        tasks = [t for t in (self._proactive_task, self._summarization_task) if t is not None]
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.exception(f"Background task {task.get_name()} failed")
        # A poll cancelled before its first step never reaches its finally block
        if self._summarization_task is not None:
            self._state.end_summarization()
        self._proactive_task = None
        self._summarization_task = None
        logger.info("Background tasks stopped")

    async def _proactive_loop(self) -> None:
        while True:
            await self._sleep(self._proactive_interval)
            try:
                await self.check_proactive()
            except Exception:
                logger.exception("Proactive check tick failed")

    async def check_proactive(self) -> ExchangeStatus:
        """Run one proactive-check tick.

        Returns:
            SKIPPED if busy, if the service declined, or if the query failed;
            otherwise the outcome of the automatic proactive send.
        """
        if self._state.busy:
            logger.debug("Skipping proactive check: session busy")
            return ExchangeStatus.SKIPPED

        try:
            should_send = await self._client.should_send_proactive_message()
        except ConversationError as e:
            logger.warning(f"Proactive check failed ({e.kind.value}): {e}")
            return ExchangeStatus.SKIPPED

        if not should_send:
            return ExchangeStatus.SKIPPED

        logger.info("Sending automatic proactive message")
        return await self._orchestrator.send_proactive_message_auto()

    async def request_summarization(self) -> bool:
        """Ask the service to summarize history and start polling its status.

        Returns:
            True if the request was accepted and polling started.
        """
        if not self._state.try_begin_summarization():
            logger.debug("Skipping summarization request: session busy")
            return False

        try:
            response = await self._client.start_summarization()
        except ConversationError as e:
            self._state.end_summarization()
            logger.error(f"Failed to start summarization ({e.kind.value}): {e}")
            self._alert(e, "Failed to start summarization. Please try again.")
            return False

        logger.info(f"Summarization started: {response.message or response.status}")
        self._summarization_task = asyncio.create_task(
            self._summarization_poll(), name="summarization-poll"
        )
        return True

    async def _summarization_poll(self) -> None:
        try:
            while True:
                await self._sleep(self._poll_interval)
                try:
                    response = await self._client.get_summarization_status()
                except ConversationError as e:
                    logger.error(f"Summarization status check failed ({e.kind.value}): {e}")
                    self._alert(e, "Failed to check summarization status.")
                    return
                if response.status == SummarizationStatus.IDLE:
                    logger.info("Summarization complete")
                    return
        finally:
            self._state.end_summarization()

    def _alert(self, error: ConversationError, failure_text: str) -> None:
        if self._on_alert is not None:
            self._on_alert(alert_for(error.kind, failure_text))
