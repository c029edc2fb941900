"""Lazily authenticated access to the Slack API and the workspace's users."""

from __future__ import annotations

import json
import logging
import os
import ssl
from pathlib import Path
from typing import Any, Callable

import httpx

from .slack import DEFAULT_API_URL, SlackClient
from .transport import UserAgentTransport

log = logging.getLogger(__name__)

COMMIT_HASH = "unknown"
BUILD_TIME = "1970-01-01T00:00:00Z"
VERSION = "0.0.0"
BINARY_NAME = "slack-mcp-server"

DEFAULT_USERS_CACHE = ".users_cache.json"
USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/133.0.0.0 Safari/537.36"
)


def build_http_client(cookie: str) -> httpx.Client:
    """Build an HTTP client honouring the proxy and CA settings in the environment."""
    proxy = os.environ.get("SLACK_MCP_PROXY") or None
    ca_file = os.environ.get("SLACK_MCP_SERVER_CA", "")
    insecure = os.environ.get("SLACK_MCP_SERVER_CA_INSECURE", "") != ""

    if insecure and ca_file:
        raise ValueError(
            "Variable SLACK_MCP_SERVER_CA is at the same time with SLACK_MCP_SERVER_CA_INSECURE"
        )

    context = ssl.create_default_context()
    if ca_file:
        try:
            context.load_verify_locations(cafile=ca_file)
        except ssl.SSLError:
            log.warning("No certs appended, using system certs only")
    if insecure:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    inner = httpx.HTTPTransport(verify=context, proxy=proxy)
    return httpx.Client(transport=UserAgentTransport(inner, USER_AGENT, cookie))


class ApiProvider:
    """Authenticates on first use and keeps the users of the workspace at hand."""

    def __init__(
        self,
        token: str,
        cookie: str,
        users_cache: str | os.PathLike = DEFAULT_USERS_CACHE,
        client_factory: Callable[[str | None], Any] | None = None,
    ) -> None:
        if client_factory is None:
            def client_factory(api_url: str | None) -> SlackClient:
                return SlackClient(token, build_http_client(cookie), api_url or DEFAULT_API_URL)

        self._client_factory = client_factory
        self._client: Any = None
        self._users: dict[str, dict[str, Any]] = {}
        self.users_cache = Path(users_cache)

    def _boot(self) -> Any:
        client = self._client_factory(None)
        identity = client.auth_test()
        log.info("Authenticated as: %s", identity)
        return self._client_factory(identity["url"] + "api/")

    def provide(self) -> Any:
        """Return the authenticated client, booting it on the first call."""
        if self._client is None:
            self._client = self._boot()
            self._bootstrap_dependencies()
        return self._client

    def provide_users_map(self) -> dict[str, dict[str, Any]]:
        """Return the known users keyed by user id."""
        return self._users

    def _load_cached_users(self) -> list[dict[str, Any]] | None:
        try:
            raw = self.users_cache.read_text(encoding="utf-8")
        except OSError:
            return None
        try:
            users = json.loads(raw)
            if not isinstance(users, list) or not all(isinstance(u, dict) and "id" in u for u in users):
                raise ValueError("expected a list of users")
        except ValueError as exc:
            log.warning("Failed to unmarshal %s: %s; will refetch", self.users_cache, exc)
            return None
        return users

    def _bootstrap_dependencies(self) -> None:
        cached = self._load_cached_users()
        if cached is not None:
            self._users.update((user["id"], user) for user in cached)
            log.info("Loaded %d users from cache %r", len(cached), str(self.users_cache))
            return

        users = self._client.get_users(limit=1000)
        self._users.update((user["id"], user) for user in users)

        try:
            self.users_cache.write_text(json.dumps(users, indent=2), encoding="utf-8")
        except OSError as exc:
            log.warning("Failed to write cache file %r: %s", str(self.users_cache), exc)
        else:
            log.info("Wrote %d users to cache %r", len(users), str(self.users_cache))


def provider_from_env() -> ApiProvider:
    """Create a provider from the SLACK_MCP_* environment variables."""
    token = os.environ.get("SLACK_MCP_XOXC_TOKEN", "")
    if not token:
        raise RuntimeError("SLACK_MCP_XOXC_TOKEN environment variable is required")
    cookie = os.environ.get("SLACK_MCP_XOXD_TOKEN", "")
    if not cookie:
        raise RuntimeError("SLACK_MCP_XOXD_TOKEN environment variable is required")
    cache = os.environ.get("SLACK_MCP_USERS_CACHE") or DEFAULT_USERS_CACHE
    return ApiProvider(token, cookie, cache)