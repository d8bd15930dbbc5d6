"""Test package for Companion Chat.

Structure:
    - unit/: Session components with mocked service calls
    - integration/: Client, host app and full session over ASGI transports
    - helpers.py: Fake conversation service and other test doubles

Leverages pytest with pytest-asyncio and pytest-check for soft assertions.
"""
