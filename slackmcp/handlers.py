"""Tool handlers that list channels and read channel history as CSV."""

from __future__ import annotations

import logging
import re
from dataclasses import astuple, dataclass
from datetime import datetime, time, timedelta
from typing import Any, ClassVar, Iterable, Sequence

from .text import process_text

log = logging.getLogger(__name__)

ALL_CHAN_TYPES = ["mpim", "im", "public_channel", "private_channel"]
PUB_CHAN_TYPE = ["public_channel"]

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _csv_field(field: str) -> str:
    needs_quotes = field != "" and (
        field == "\\."
        or any(char in field for char in ',"\r\n')
        or field[0].isspace()
    )
    if not needs_quotes:
        return field
    return '"' + field.replace('"', '""') + '"'


def to_csv(rows: Iterable[Sequence[Any]]) -> str:
    """Render rows as CSV with minimal quoting and newline line endings."""
    return "".join(",".join(_csv_field(str(field)) for field in row) + "\n" for row in rows)


@dataclass
class Channel:
    id: str
    name: str
    topic: str
    purpose: str
    member_count: int

    HEADER: ClassVar[tuple[str, ...]] = ("ID", "Name", "Topic", "Purpose", "MemberCount")


@dataclass
class Message:
    user_id: str
    user_name: str
    real_name: str
    channel: str
    text: str
    time: str
    cursor: str = ""

    HEADER: ClassVar[tuple[str, ...]] = (
        "UserID", "UserName", "RealName", "Channel", "Text", "Time", "Cursor",
    )


def _get_string(arguments: dict[str, Any], key: str, default: str) -> str:
    value = arguments.get(key)
    return value if isinstance(value, str) else default


def _get_string_list(arguments: dict[str, Any], key: str, default: list[str]) -> list[str]:
    value = arguments.get(key)
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, str)]
    return list(default)


def limit_by_numeric(limit: str) -> int:
    """Parse a message-count limit."""
    if not _INTEGER.fullmatch(limit):
        raise ValueError(f'invalid numeric limit: "{limit}"')
    return int(limit)


def limit_by_days(limit: str, now: datetime | None = None) -> tuple[int, str, str]:
    """Parse a limit such as ``"3d"`` into (page size, oldest, latest) timestamps.

    ``oldest`` is midnight of the first day of the range, ``latest`` is now.
    """
    days_text = limit.removesuffix("d")
    if not _INTEGER.fullmatch(days_text) or int(days_text) <= 0:
        raise ValueError(
            f"invalid duration limit \"{limit}\": must be a positive integer with 'd' suffix"
        )
    days = int(days_text)
    if now is None:
        now = datetime.now().astimezone()
    first_day = now.date() - timedelta(days=days - 1)
    oldest_time = datetime.combine(first_day, time(), tzinfo=now.tzinfo)
    latest = f"{int(now.timestamp())}.000000"
    oldest = f"{int(oldest_time.timestamp())}.000000"
    return 100, oldest, latest


class ChannelsHandler:
    """Lists channels of the requested types as CSV."""

    def __init__(self, provider: Any) -> None:
        self.provider = provider

    def __call__(self, arguments: dict[str, Any]) -> str:
        sort_type = _get_string(arguments, "sort", "popularity")
        channel_types = _get_string_list(arguments, "channel_types", PUB_CHAN_TYPE)

        client = self.provider.provide()

        raw_channels: list[dict[str, Any]] = []
        cursor = ""
        while True:
            page, cursor = client.get_conversations(
                types=channel_types, limit=100, exclude_archived=True, cursor=cursor
            )
            raw_channels.extend(page)
            if not cursor:
                break
        log.info("channels fetch complete %d", len(raw_channels))

        channels = [
            Channel(
                id=raw.get("id", ""),
                name="#" + raw.get("name", ""),
                topic=(raw.get("topic") or {}).get("value", ""),
                purpose=(raw.get("purpose") or {}).get("value", ""),
                member_count=int(raw.get("num_members", 0)),
            )
            for raw in raw_channels
        ]

        if sort_type == "popularity":
            channels.sort(key=lambda channel: channel.member_count, reverse=True)

        return to_csv([Channel.HEADER, *(astuple(channel) for channel in channels)])


class ConversationsHandler:
    """Reads a channel's history as CSV."""

    def __init__(self, provider: Any) -> None:
        self.provider = provider

    def __call__(self, arguments: dict[str, Any]) -> str:
        channel = _get_string(arguments, "channel_id", "")
        if not channel:
            raise ValueError("channel_id must be a string")

        limit = _get_string(arguments, "limit", "")
        cursor = _get_string(arguments, "cursor", "")

        page_limit, oldest, latest = 0, "", ""
        if limit.endswith("d"):
            page_limit, oldest, latest = limit_by_days(limit)
        elif cursor == "":
            page_limit = limit_by_numeric(limit)

        client = self.provider.provide()
        history = client.get_conversation_history(
            channel,
            limit=page_limit,
            oldest=oldest,
            latest=latest,
            cursor=cursor,
            inclusive=False,
        )

        users = self.provider.provide_users_map()

        messages = []
        for raw in history.get("messages", []):
            user = users.get(raw.get("user", ""))
            if user is None:
                continue
            messages.append(
                Message(
                    user_id=raw.get("user", ""),
                    user_name=user.get("name", ""),
                    real_name=user.get("real_name", ""),
                    channel=channel,
                    text=process_text(raw.get("text", "")),
                    time=raw.get("ts", ""),
                )
            )

        if messages and history.get("has_more"):
            messages[-1].cursor = (history.get("response_metadata") or {}).get("next_cursor", "")

        return to_csv([Message.HEADER, *(astuple(message) for message in messages)])