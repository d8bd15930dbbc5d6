"""Pydantic models for the conversation service wire format.

Provides type safety and validation for everything crossing the HTTP boundary.

Models:
    - ServerMessage: A stored message record with content segments and mood
    - ChatResponse / HistoryResponse: Message lists returned by the service
    - SummarizeResponse: Summarization status report
    - ShouldSendProactiveResponse: Proactive message decision
    - ImagePayload / UnifiedMessageRequest: Outgoing message payload
"""

from companion.models.schemas import (
    ChatResponse,
    HistoryResponse,
    ImagePayload,
    ServerMessage,
    ShouldSendProactiveResponse,
    SummarizationStatus,
    SummarizeResponse,
    UnifiedMessageRequest,
)

__all__ = [
    "ChatResponse",
    "HistoryResponse",
    "ImagePayload",
    "ServerMessage",
    "ShouldSendProactiveResponse",
    "SummarizationStatus",
    "SummarizeResponse",
    "UnifiedMessageRequest",
]
