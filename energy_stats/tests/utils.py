from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx

Route = Callable[[httpx.Request], httpx.Response]


class MockWorldBank:
    """Serves canned responses by URL path through ``httpx.MockTransport``.

    Each path maps to a list of payloads returned in order (one per page
    request); the last payload repeats once the list is exhausted. Every
    request is recorded so tests can assert on query parameters.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None) -> None:
        self._responses: Dict[str, List[Tuple[int, Any]]] = {}
        self.requests: List[httpx.Request] = []
        for path, payload in (responses or {}).items():
            self.add(path, payload)

    def add(self, path: str, payload: Any, status_code: int = 200) -> "MockWorldBank":
        self._responses.setdefault(path, []).append((status_code, payload))
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._responses.get(request.url.path)
        if not queue:
            return httpx.Response(404, json={"detail": f"no mock for {request.url.path}"})
        status_code, payload = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(payload, Exception):
            raise payload
        if isinstance(payload, str):
            return httpx.Response(status_code, text=payload)
        return httpx.Response(status_code, json=payload)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


def run(coro):
    """Helper to run async functions in synchronous tests."""
    return asyncio.run(coro)
