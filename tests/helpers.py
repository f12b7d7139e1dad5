from __future__ import annotations

from typing import Callable, Dict, List

import httpx

Route = Callable[[httpx.Request], httpx.Response]


class FakeProvider:
    """Routes requests by URL path and records every request it sees."""

    def __init__(self, routes: Dict[str, Route]) -> None:
        self.routes = routes
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]


def json_route(payload, status_code: int = 200) -> Route:
    return lambda request: httpx.Response(status_code, json=payload)


def paged_route(pages: List[list]) -> Route:
    def route(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params.get("page", "1"))
        if page > len(pages):
            return httpx.Response(200, json=[])
        return httpx.Response(200, json=pages[page - 1])

    return route
