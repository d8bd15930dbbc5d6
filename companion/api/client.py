"""Async HTTP client for the remote conversation service.

Every call carries the bearer credential from the client configuration and
returns validated Pydantic models. Any failure, whether connection, HTTP
status or malformed payload, is raised as a ConversationError carrying an
ErrorKind, so callers never inspect error text.
"""

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from companion.api.errors import ConversationError, ErrorKind
from companion.config import ClientConfig, get_client_config
from companion.models.schemas import (
    ChatResponse,
    HistoryResponse,
    ImagePayload,
    ServerMessage,
    ShouldSendProactiveResponse,
    SummarizeResponse,
    UnifiedMessageRequest,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

HISTORY_ENDPOINT = "/api/history"
MESSAGE_ENDPOINT = "/api/message"
SUMMARIZE_ENDPOINT = "/api/summarize"
SUMMARIZE_STATUS_ENDPOINT = "/api/summarize/status"
SHOULD_SEND_PROACTIVE_ENDPOINT = "/api/proactive-message/should-send"
PROACTIVE_ENDPOINT = "/api/proactive-message"
WEB_SEARCH_ENDPOINT = "/api/background-action/web-search"
REMINISCE_ENDPOINT = "/api/background-action/reminisce"


def classify_status(status_code: int, endpoint: str) -> ErrorKind:
    """Map an HTTP error status to an ErrorKind.

    409 means the service is busy summarizing. A client error from the
    reminisce action means there is not enough history to draw from.
    """
    if status_code == httpx.codes.CONFLICT:
        return ErrorKind.CONFLICT
    if endpoint == REMINISCE_ENDPOINT and status_code in (
        httpx.codes.BAD_REQUEST,
        httpx.codes.UNPROCESSABLE_ENTITY,
    ):
        return ErrorKind.INSUFFICIENT_HISTORY
    return ErrorKind.TRANSPORT


class ConversationClient:
    """Client for the conversation service REST API.

    Wraps an httpx.AsyncClient configured with:
    - Base URL and bearer authorization from ClientConfig
    - A single request timeout for all calls
    - Optional custom transport (e.g. ASGITransport in tests)
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Optional client configuration.
                    Loaded once from config.json/environment if not provided.
            transport: Optional httpx transport override.
        """
        self._config = config or get_client_config()
        self._http = httpx.AsyncClient(
            base_url=self._config.server_url,
            headers={"Authorization": f"Bearer {self._config.api_key}"},
            timeout=self._config.request_timeout,
            transport=transport,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def __aenter__(self) -> "ConversationClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @property
    def is_closed(self) -> bool:
        return self._http.is_closed

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        endpoint: str,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            ConversationError: On connection failure, error status or invalid JSON.
        """
        if self._http.is_closed:
            raise ConversationError(ErrorKind.TRANSPORT, f"Client closed, cannot {method} {endpoint}")

        try:
            response = await self._http.request(method, endpoint, json=json)
        except httpx.RequestError as e:
            logger.warning(f"{method} {endpoint} failed: {e}")
            raise ConversationError(ErrorKind.TRANSPORT, f"Connection failed: {e}") from e

        if response.is_error:
            kind = classify_status(response.status_code, endpoint)
            logger.warning(f"{method} {endpoint} returned {response.status_code} ({kind.value})")
            raise ConversationError(
                kind,
                f"API Error {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ConversationError(
                ErrorKind.TRANSPORT,
                f"Invalid JSON from {endpoint}: {e}",
                status_code=response.status_code,
            ) from e

    async def _call(
        self,
        model: type[ModelT],
        method: str,
        endpoint: str,
        json: dict[str, Any] | None = None,
    ) -> ModelT:
        data = await self._request(method, endpoint, json=json)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ConversationError(
                ErrorKind.TRANSPORT, f"Unexpected response from {endpoint}: {e}"
            ) from e

    async def get_history(self) -> list[ServerMessage]:
        """Fetch the full stored conversation history."""
        data = await self._call(HistoryResponse, "GET", HISTORY_ENDPOINT)
        return data.messages

    async def send_unified_message(
        self,
        text: str,
        images: list[ImagePayload] | None = None,
    ) -> list[ServerMessage]:
        """Send a user message, optionally with attached images.

        The service decides the message type from the presence of images.

        Args:
            text: The user's message text.
            images: Zero or one attached images.

        Returns:
            Response messages generated by the assistant.
        """
        payload = UnifiedMessageRequest(text=text, images=images or [])
        data = await self._call(ChatResponse, "POST", MESSAGE_ENDPOINT, json=payload.model_dump())
        return data.messages

    async def start_summarization(self) -> SummarizeResponse:
        return await self._call(SummarizeResponse, "POST", SUMMARIZE_ENDPOINT, json={})

    async def get_summarization_status(self) -> SummarizeResponse:
        return await self._call(SummarizeResponse, "GET", SUMMARIZE_STATUS_ENDPOINT)

    async def should_send_proactive_message(self) -> bool:
        """Ask whether enough idle time has passed for a proactive message."""
        data = await self._call(
            ShouldSendProactiveResponse, "GET", SHOULD_SEND_PROACTIVE_ENDPOINT
        )
        return data.should_send

    async def send_proactive_message(self) -> list[ServerMessage]:
        """Have the assistant start a conversation without user input."""
        data = await self._call(ChatResponse, "POST", PROACTIVE_ENDPOINT, json={})
        return data.messages

    async def trigger_web_search(self) -> list[ServerMessage]:
        """Trigger the autonomous web search background action."""
        data = await self._call(ChatResponse, "POST", WEB_SEARCH_ENDPOINT, json={})
        return data.messages

    async def trigger_reminisce(self) -> list[ServerMessage]:
        """Trigger the reminisce background action.

        Raises:
            ConversationError: With INSUFFICIENT_HISTORY if fewer than ten
                messages are stored.
        """
        data = await self._call(ChatResponse, "POST", REMINISCE_ENDPOINT, json={})
        return data.messages
