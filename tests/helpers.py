"""Test doubles shared by unit and integration tests."""

from collections.abc import Awaitable, Callable

import httpx

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


class RecordingBackend:
    """Stand-in for a remote HTTP service that records every request it receives.

    Wraps httpx.MockTransport; pass `backend.transport` to the code under test.
    """

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response | Awaitable[httpx.Response]:
        self.requests.append(request)
        return self._handler(request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    @property
    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


def route(responses: dict[str, httpx.Response]) -> Handler:
    """Build a handler answering by URL path; unknown paths get a 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.get(request.url.path, httpx.Response(404, text="no route"))

    return handler


def agent_success(
    answer: str = "Hi",
    confidence: float = 0.9,
    suggestions: list[str] | None = None,
) -> dict:
    """Envelope the agent relay returns for a successful answer."""
    return {
        "success": True,
        "response": {
            "status": "success",
            "result": {
                "answer": answer,
                "sources": [],
                "confidence": confidence,
                "follow_up_suggestions": ["A", "B"] if suggestions is None else suggestions,
                "requires_human": False,
            },
        },
        "timestamp": "2026-01-01T00:00:00+00:00",
    }
