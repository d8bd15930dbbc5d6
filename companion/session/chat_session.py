"""Chat session wiring.

ChatSession builds the timeline, attachment manager, avatar resolver,
revealer, orchestrator and scheduler around one ConversationClient, and
exposes the actions the UI needs.
"""

import asyncio
import base64
import logging
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any

from companion.api.client import ConversationClient
from companion.api.errors import ConversationError
from companion.session.alerts import Alert, AlertHandler, alert_for
from companion.session.attachments import AttachmentManager, PendingAttachment
from companion.session.avatar import (
    DEFAULT_AVATAR,
    FALLBACK_MOOD,
    AssetProbe,
    AvatarResolver,
    HttpAssetProbe,
    ResolvedAvatar,
)
from companion.session.orchestrator import ExchangeStatus, SendOrchestrator
from companion.session.revealer import AvatarListener, ResponseRevealer, Sleep
from companion.session.scheduler import BackgroundScheduler
from companion.session.state import SessionState
from companion.session.timeline import Timeline, flatten_messages
from companion.storage.image_cache import ImageCache, make_cache_filename, read_file_as_base64
from companion.storage.preferences import ThemePreference

logger = logging.getLogger(__name__)


class ChatSession:
    """Manages chat state and background work for one user session."""

    def __init__(
        self,
        client: ConversationClient,
        probe: AssetProbe | None = None,
        image_cache: ImageCache | None = None,
        preferences: MutableMapping[str, Any] | None = None,
        on_alert: AlertHandler | None = None,
        on_avatar: AvatarListener | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the session.

        Args:
            client: Conversation service client; closed by close().
            probe: Avatar asset probe. Defaults to HEAD requests against
                   the configured asset URL.
            image_cache: Cache for attached images. Defaults to the
                         configured data directory.
            preferences: Persistent mapping holding the theme preference.
            on_alert: Called with failures that should be shown to the user.
            on_avatar: Called whenever the displayed avatar changes.
            sleep: Suspension primitive for reveal pacing.
        """
        config = client.config
        self._client = client
        self._owned_probe = None
        if probe is None:
            probe = self._owned_probe = HttpAssetProbe(config.asset_url)
        self._on_alert = on_alert
        self._on_avatar = on_avatar

        self.state = SessionState()
        self.timeline = Timeline()
        self.attachments = AttachmentManager()
        self.avatar: ResolvedAvatar = DEFAULT_AVATAR
        self.image_cache = image_cache or ImageCache(config.image_cache_dir)
        self.theme = ThemePreference(preferences if preferences is not None else {})

        self.avatar_resolver = AvatarResolver(probe)
        self.revealer = ResponseRevealer(
            self.timeline,
            self.avatar_resolver,
            on_avatar=self._set_avatar,
            delay=config.reveal_delay,
            sleep=sleep,
        )
        self.orchestrator = SendOrchestrator(
            client,
            self.timeline,
            self.attachments,
            self.state,
            self.revealer,
            on_alert=self._alert,
        )
        self.scheduler = BackgroundScheduler(
            client,
            self.orchestrator,
            self.state,
            on_alert=self._alert,
            proactive_interval=config.proactive_interval,
            summarization_poll_interval=config.summarization_poll_interval,
        )

    async def start(self) -> None:
        """Load history, show the initial avatar and start background checks."""
        await self.load_history()
        self._set_avatar(await self.avatar_resolver.resolve(FALLBACK_MOOD))
        self.scheduler.start()

    async def close(self) -> None:
        """Stop background tasks and release HTTP resources."""
        try:
            await self.scheduler.stop()
        finally:
            try:
                if self._owned_probe is not None:
                    await self._owned_probe.aclose()
            finally:
                await self._client.aclose()

    async def load_history(self) -> int:
        """Fill the timeline from the stored conversation history.

        Holds the sending flag while loading, so no exchange can append or
        roll back the timeline until the history is in place.

        Returns:
            Number of timeline messages after loading.
        """
        if not self.state.try_begin_send():
            logger.debug("Skipping history load: session busy")
            return len(self.timeline)

        try:
            history = await self._client.get_history()
        except ConversationError as e:
            logger.error(f"Failed to load history ({e.kind.value}): {e}")
            self._alert(alert_for(e.kind, "Failed to load conversation history."))
            return len(self.timeline)
        else:
            count = self.timeline.extend(flatten_messages(history))
        finally:
            self.state.end_send()

        logger.info(f"Loaded {len(history)} history records as {count} messages")
        return count

    def attach_image(self, name: str, content: bytes) -> PendingAttachment:
        """Cache uploaded image bytes and make them the pending attachment."""
        data = base64.b64encode(content).decode("ascii")
        filename = self.image_cache.save(make_cache_filename(name), data)
        return self.attachments.attach(filename, data)

    def attach_image_file(self, path: Path) -> PendingAttachment:
        """Cache a local image file and make it the pending attachment."""
        data = read_file_as_base64(path)
        filename = self.image_cache.save(make_cache_filename(Path(path).name), data)
        return self.attachments.attach(filename, data)

    async def send(self, text: str) -> ExchangeStatus:
        return await self.orchestrator.send_user_message(text)

    async def send_proactive(self) -> ExchangeStatus:
        return await self.orchestrator.send_proactive_message()

    async def web_search(self) -> ExchangeStatus:
        return await self.orchestrator.trigger_web_search()

    async def reminisce(self) -> ExchangeStatus:
        return await self.orchestrator.trigger_reminisce()

    async def summarize(self) -> bool:
        return await self.scheduler.request_summarization()

    def _set_avatar(self, avatar: ResolvedAvatar) -> None:
        self.avatar = avatar
        if self._on_avatar is not None:
            self._on_avatar(avatar)

    def _alert(self, alert: Alert) -> None:
        if self._on_alert is not None:
            self._on_alert(alert)
