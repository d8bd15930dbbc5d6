from enum import Enum

from pydantic import BaseModel, Field


class SummarizationStatus(str, Enum):
    """Known status values reported by the summarization endpoints.

    The service may report other in-progress values; only IDLE ends a
    summarization.
    """

    IDLE = "idle"
    STARTED = "started"
    IN_PROGRESS = "in_progress"


class ServerMessage(BaseModel):
    """A message record as stored by the conversation service.

    Attributes:
        role: Speaker identifier (user or assistant).
        content_raw: Full unsplit message text.
        content_split: Display segments the service split the message into.
        mood: Assistant mood label, if any.
        time: Unix timestamp of the message.
        image_path: Cached image filename attached to the message.
        message_type: Service-side message category.
    """

    role: str
    content_raw: str = ""
    content_split: list[str] = Field(default_factory=list)
    mood: str | None = None
    time: float = 0
    image_path: str | None = None
    message_type: str = "text"


class ChatResponse(BaseModel):
    """Messages returned by message, proactive and background endpoints."""

    messages: list[ServerMessage] = Field(default_factory=list)


class HistoryResponse(BaseModel):
    """Full stored conversation history."""

    messages: list[ServerMessage] = Field(default_factory=list)


class SummarizeResponse(BaseModel):
    """Response from the summarization start and status endpoints.

    Attributes:
        status: Current summarization status, e.g. "idle" or "in_progress".
        message: Human readable status description.
    """

    status: str
    message: str = ""


class ShouldSendProactiveResponse(BaseModel):
    """Whether the service wants the assistant to start a conversation."""

    should_send: bool


class ImagePayload(BaseModel):
    """An image sent alongside a user message.

    Attributes:
        filename: Cache filename the image was stored under.
        data: Base64 encoded image bytes.
    """

    filename: str
    data: str


class UnifiedMessageRequest(BaseModel):
    """Request payload for the unified message endpoint."""

    text: str = Field(..., min_length=1)
    images: list[ImagePayload] = Field(default_factory=list)
