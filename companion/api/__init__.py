"""Conversation service client.

Async HTTP access to the remote conversation service with bearer auth.

Responsibilities:
    - One coroutine per service operation (history, messages, summarization,
      proactive messages, background actions)
    - Response validation into Pydantic models
    - Failure classification into a closed ErrorKind enumeration
"""

from companion.api.client import ConversationClient
from companion.api.errors import ConversationError, ErrorKind

__all__ = ["ConversationClient", "ConversationError", "ErrorKind"]
