"""
Test Helpers.

Response builders, a route-style request recorder for httpx.MockTransport,
and a recording replacement for asyncio.sleep.
"""

from collections.abc import Sequence
from typing import Any

import httpx


def json_response(status: int, body: Any) -> httpx.Response:
    return httpx.Response(status, json=body)


def html_response(
    status: int,
    text: str = "<!DOCTYPE html><html><body>Not Found</body></html>",
) -> httpx.Response:
    return httpx.Response(status, text=text, headers={"content-type": "text/html; charset=utf-8"})


class RecordingSleep:
    """Async sleep replacement that records requested delays (seconds)."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class RouteRecorder:
    """
    Handler that answers by (method, path) and records every request.

    A route may map to one response or to a sequence answered in order
    (the last one repeats). Unknown routes answer 404 with a JSON message.
    """

    def __init__(
        self,
        routes: dict[tuple[str, str], httpx.Response | Sequence[httpx.Response]],
    ) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []
        self._cursor: dict[tuple[str, str], int] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        answer = self.routes.get(key)
        if answer is None:
            return json_response(404, {"message": f"no route {key[0]} {key[1]}"})
        if isinstance(answer, httpx.Response):
            return answer
        index = min(self._cursor.get(key, 0), len(answer) - 1)
        self._cursor[key] = index + 1
        return answer[index]

    def calls(self) -> list[tuple[str, str]]:
        return [(r.method, r.url.path) for r in self.requests]
