"""Minimal client for the Slack Web API methods the server uses."""

from __future__ import annotations

from typing import Any

import httpx

DEFAULT_API_URL = "https://slack.com/api/"


class SlackError(Exception):
    """A Slack API call answered with ``ok: false``."""

    def __init__(self, error: str) -> None:
        super().__init__(error)
        self.error = error


class SlackClient:
    """Calls Slack Web API methods with a user token."""

    def __init__(self, token: str, http_client: httpx.Client | None = None, api_url: str | None = None) -> None:
        self.token = token
        self.http_client = http_client or httpx.Client()
        self.api_url = api_url or DEFAULT_API_URL

    def _call(self, method: str, **params: Any) -> dict[str, Any]:
        data = {"token": self.token, **{k: v for k, v in params.items() if v not in (None, "")}}
        response = self.http_client.post(self.api_url + method, data=data)
        response.raise_for_status()
        body = response.json()
        if not body.get("ok"):
            raise SlackError(body.get("error", "unknown_error"))
        return body

    def auth_test(self) -> dict[str, Any]:
        """Return the identity behind the token, including the team ``url``."""
        return self._call("auth.test")

    def get_conversations(
        self, types: list[str] | None = None, limit: int = 0,
        exclude_archived: bool = False, cursor: str = "",
    ) -> tuple[list[dict[str, Any]], str]:
        """Return one page of conversations and the cursor of the next page."""
        body = self._call(
            "conversations.list",
            types=",".join(types) if types else None,
            limit=str(limit) if limit else None,
            exclude_archived="true" if exclude_archived else "false",
            cursor=cursor,
        )
        return body.get("channels", []), body.get("response_metadata", {}).get("next_cursor", "")

    def get_conversation_history(
        self, channel_id: str, limit: int = 0, oldest: str = "",
        latest: str = "", cursor: str = "", inclusive: bool = False,
    ) -> dict[str, Any]:
        """Return one page of a channel's history as the raw API response."""
        return self._call(
            "conversations.history",
            channel=channel_id,
            limit=str(limit) if limit else None,
            oldest=oldest,
            latest=latest,
            cursor=cursor,
            inclusive="1" if inclusive else "0",
        )

    def get_users(self, limit: int = 0) -> list[dict[str, Any]]:
        """Return every user of the workspace, following pagination."""
        users: list[dict[str, Any]] = []
        cursor = ""
        while True:
            body = self._call("users.list", limit=str(limit) if limit else None, cursor=cursor)
            users.extend(body.get("members", []))
            cursor = body.get("response_metadata", {}).get("next_cursor", "")
            if not cursor:
                return users