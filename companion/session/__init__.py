"""Chat session controller.

Owns the local conversation timeline and mediates every optimistic action
against the asynchronous conversation service.

Responsibilities:
    - Timeline of display messages with rollback of failed sends
    - Single pending image attachment
    - Mood to avatar asset resolution with fallback
    - Paced reveal of multi-bubble responses
    - Send orchestration for messages, proactive messages and background actions
    - Proactive-check and summarization-poll background tasks

Runs on a single asyncio event loop; busy flags provide mutual exclusion.
"""

from companion.session.alerts import Alert
from companion.session.attachments import AttachmentManager, PendingAttachment
from companion.session.avatar import AvatarResolver, HttpAssetProbe, ResolvedAvatar
from companion.session.chat_session import ChatSession
from companion.session.orchestrator import ExchangeStatus, SendOrchestrator
from companion.session.revealer import ResponseRevealer
from companion.session.scheduler import BackgroundScheduler
from companion.session.state import SessionState
from companion.session.timeline import DisplayMessage, Timeline, flatten_message

__all__ = [
    "Alert",
    "AttachmentManager",
    "AvatarResolver",
    "BackgroundScheduler",
    "ChatSession",
    "DisplayMessage",
    "ExchangeStatus",
    "HttpAssetProbe",
    "PendingAttachment",
    "ResolvedAvatar",
    "ResponseRevealer",
    "SendOrchestrator",
    "SessionState",
    "Timeline",
    "flatten_message",
]
