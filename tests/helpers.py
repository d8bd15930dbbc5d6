"""Test doubles shared by unit and integration tests.

Includes a fake conversation service (a FastAPI app served through
httpx.ASGITransport), an in-memory asset probe and a recording sleep.
"""

import asyncio
from typing import Any

from fastapi import FastAPI, HTTPException, Request

from companion.models.schemas import ServerMessage

API_KEY = "test-api-key"


def server_message(
    role: str,
    *segments: str,
    mood: str | None = None,
    image_path: str | None = None,
) -> dict[str, Any]:
    """Build a stored message record as the service returns it."""
    return {
        "role": role,
        "content_raw": " ".join(segments),
        "content_split": list(segments),
        "mood": mood,
        "time": 1718000000,
        "image_path": image_path,
        "message_type": "image" if image_path else "text",
    }


def as_server_message(role: str, *segments: str, **kwargs: Any) -> ServerMessage:
    return ServerMessage.model_validate(server_message(role, *segments, **kwargs))


class FakeConversationService:
    """In-memory stand-in for the remote conversation service."""

    def __init__(self) -> None:
        self.history: list[dict[str, Any]] = []
        self.replies: list[dict[str, Any]] = []
        self.proactive_replies: list[dict[str, Any]] = []
        self.should_send = False
        self.summarizing = False
        self.status_sequence: list[str] = []
        self.failures: dict[str, int] = {}
        self.requests: list[tuple[str, str, Any]] = []
        self.auth_headers: list[str | None] = []
        self.history_gate: asyncio.Event | None = None

    async def record(self, request: Request) -> Any:
        body = await request.json() if request.method == "POST" else None
        self.requests.append((request.method, request.url.path, body))
        self.auth_headers.append(request.headers.get("authorization"))

        if request.headers.get("authorization") != f"Bearer {API_KEY}":
            raise HTTPException(status_code=401, detail="Invalid API key")
        if request.url.path in self.failures:
            raise HTTPException(status_code=self.failures[request.url.path], detail="Injected failure")
        return body

    def calls_to(self, path: str) -> int:
        return sum(1 for _, p, _ in self.requests if p == path)


def build_conversation_app(service: FakeConversationService) -> FastAPI:
    """Create a FastAPI app exposing the conversation endpoints."""
    app = FastAPI()

    @app.get("/api/history")
    async def history(request: Request) -> dict[str, Any]:
        await service.record(request)
        if service.history_gate is not None:
            await service.history_gate.wait()
        return {"messages": service.history}

    @app.post("/api/message")
    async def message(request: Request) -> dict[str, Any]:
        body = await service.record(request)
        if service.summarizing:
            raise HTTPException(status_code=409, detail="Summarization in progress")
        service.history.append(server_message("user", body["text"]))
        service.history.extend(service.replies)
        return {"messages": service.replies}

    @app.post("/api/summarize")
    async def summarize(request: Request) -> dict[str, Any]:
        await service.record(request)
        service.summarizing = True
        return {"status": "started", "message": "Summarization started"}

    @app.get("/api/summarize/status")
    async def summarize_status(request: Request) -> dict[str, Any]:
        await service.record(request)
        status = service.status_sequence.pop(0) if service.status_sequence else "idle"
        if status == "idle":
            service.summarizing = False
        return {"status": status, "message": f"Summarization {status}"}

    @app.get("/api/proactive-message/should-send")
    async def should_send(request: Request) -> dict[str, Any]:
        await service.record(request)
        return {"should_send": service.should_send}

    @app.post("/api/proactive-message")
    async def proactive(request: Request) -> dict[str, Any]:
        await service.record(request)
        return {"messages": service.proactive_replies}

    @app.post("/api/background-action/web-search")
    async def web_search(request: Request) -> dict[str, Any]:
        await service.record(request)
        return {"messages": [server_message("assistant", "Found something neat")]}

    @app.post("/api/background-action/reminisce")
    async def reminisce(request: Request) -> dict[str, Any]:
        await service.record(request)
        if len(service.history) < 10:
            raise HTTPException(status_code=400, detail="Not enough history to reminisce")
        return {"messages": [server_message("assistant", "Remember when...")]}

    return app


class StubProbe:
    """Asset probe backed by a fixed set of available filenames."""

    def __init__(self, *available: str) -> None:
        self.available = set(available)
        self.probed: list[str] = []

    async def exists(self, filename: str) -> bool:
        self.probed.append(filename)
        return filename in self.available


class RecordingSleep:
    """Sleep replacement that records requested delays without waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)

    @property
    def pauses(self) -> list[float]:
        """Delays other than the zero-length yield made after each revealed message."""
        return [d for d in self.delays if d > 0]
