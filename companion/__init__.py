"""Companion Chat - client-side controller for an interactive companion chat.

Combines httpx for talking to the remote conversation service, NiceGUI for
the chat interface, FastAPI for hosting the UI and avatar assets, and
Pydantic for data validation.

Components:
    - api: Conversation service client and error classification
    - session: Timeline, attachments, avatar moods, send orchestration, scheduling
    - storage: Local image cache and persisted preferences
    - ui: Web interface for the chat session
    - models: Wire schemas for the conversation service
"""

__version__ = "0.1.0"
