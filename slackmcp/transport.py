"""HTTP transport that presents requests as coming from a browser session."""

from __future__ import annotations

import httpx


class UserAgentTransport(httpx.BaseTransport):
    """Wraps a transport and stamps each request with a user agent and session cookie."""

    def __init__(self, transport: httpx.BaseTransport, user_agent: str, cookie: str) -> None:
        self._transport = transport
        self.user_agent = user_agent
        self.cookie = cookie

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        """Send a copy of ``request`` with its user agent and cookie replaced."""
        headers = request.headers.copy()
        headers["User-Agent"] = self.user_agent
        headers["Cookie"] = f"d={self.cookie};d-s=1744415074"
        stamped = httpx.Request(
            request.method, request.url, headers=headers,
            stream=request.stream, extensions=request.extensions,
        )
        return self._transport.handle_request(stamped)

    def close(self) -> None:
        self._transport.close()