"""Integration tests for components working together as a system.

Real HTTP requests travel through httpx into FastAPI apps via ASGITransport:
the fake conversation service for ConversationClient and ChatSession, and
the host app for avatar probing and the image cache route.
"""
