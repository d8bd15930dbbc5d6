"""NiceGUI interface - thin visualization layer for the chat session.

Responsibilities:
    - Timeline rendering, refreshed on every timeline change
    - Avatar display for the current mood (video or still image)
    - Image attachment upload
    - Menu for proactive messages, background actions and summarization
    - Dark/light theme toggle persisted across restarts

Contains no session logic. Delegates all operations to ChatSession.
"""
