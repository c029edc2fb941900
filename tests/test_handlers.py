import csv
import io
from datetime import datetime, timezone

import pytest

from slackmcp.handlers import (
    Channel,
    ChannelsHandler,
    ConversationsHandler,
    Message,
    limit_by_days,
    limit_by_numeric,
    to_csv,
)


def _parse(text):
    return list(csv.reader(io.StringIO(text)))


class FakeClient:
    def __init__(self, pages=None, history=None):
        self.pages = pages or []
        self.history = history or {}
        self.list_calls = []
        self.history_calls = []

    def get_conversations(self, types, limit, exclude_archived, cursor):
        self.list_calls.append((list(types), limit, exclude_archived, cursor))
        return self.pages[len(self.list_calls) - 1]

    def get_conversation_history(self, channel_id, limit, oldest, latest, cursor, inclusive):
        self.history_calls.append(
            dict(channel_id=channel_id, limit=limit, oldest=oldest, latest=latest, cursor=cursor, inclusive=inclusive)
        )
        return self.history


class FakeProvider:
    def __init__(self, client, users=None):
        self.client = client
        self.users = users or {}

    def provide(self):
        return self.client

    def provide_users_map(self):
        return self.users


def _channel(cid, name, members):
    return {"id": cid, "name": name, "topic": {"value": "t-" + name}, "purpose": {"value": "p-" + name}, "num_members": members}


def test_to_csv_round_trip():
    rows = [["a", "b"], ["x,y", 'he said "hi"'], ["line\nbreak", ""]]
    assert _parse(to_csv(rows)) == rows


def test_to_csv_quotes_leading_space_only_when_needed():
    assert to_csv([[" a", "", "b"]]) == '" a",,b\n'


def test_channels_header_and_sorting():
    pages = [
        ([_channel("C1", "small", 3), _channel("C2", "big", 50)], "next"),
        ([_channel("C3", "mid", 10)], ""),
    ]
    client = FakeClient(pages=pages)
    rows = _parse(ChannelsHandler(FakeProvider(client))({"channel_types": ["public_channel", "im"]}))
    assert tuple(rows[0]) == Channel.HEADER
    assert rows[0] == ["ID", "Name", "Topic", "Purpose", "MemberCount"]
    assert [row[0] for row in rows[1:]] == ["C2", "C3", "C1"]
    assert rows[1][1] == "#big"
    assert rows[1][2] == "t-big"
    assert client.list_calls[0] == (["public_channel", "im"], 100, True, "")
    assert client.list_calls[1][3] == "next"


def test_channels_default_types_and_unsorted():
    pages = [([_channel("C1", "a", 1), _channel("C2", "b", 9)], "")]
    client = FakeClient(pages=pages)
    rows = _parse(ChannelsHandler(FakeProvider(client))({"sort": "none"}))
    assert [row[0] for row in rows[1:]] == ["C1", "C2"]
    assert client.list_calls[0][0] == ["public_channel"]


def test_limit_by_numeric():
    assert limit_by_numeric("50") == 50
    with pytest.raises(ValueError, match="invalid numeric limit"):
        limit_by_numeric("")
    with pytest.raises(ValueError):
        limit_by_numeric("ten")


def test_limit_by_days_range():
    now = datetime(2024, 1, 10, 15, 30, tzinfo=timezone.utc)
    page, oldest, latest = limit_by_days("3d", now)
    assert page == 100
    assert latest == f"{int(now.timestamp())}.000000"
    midnight = datetime(2024, 1, 8, tzinfo=timezone.utc)
    assert oldest == f"{int(midnight.timestamp())}.000000"


@pytest.mark.parametrize("limit", ["0d", "-2d", "xd", "d"])
def test_limit_by_days_rejects(limit):
    with pytest.raises(ValueError, match="invalid duration limit"):
        limit_by_days(limit)


USERS = {"U1": {"id": "U1", "name": "alice", "real_name": "Alice Example"}}


def test_history_requires_channel():
    with pytest.raises(ValueError, match="channel_id"):
        ConversationsHandler(FakeProvider(FakeClient()))({})


def test_history_requires_numeric_limit_without_cursor():
    with pytest.raises(ValueError):
        ConversationsHandler(FakeProvider(FakeClient()))({"channel_id": "C1"})


def test_history_rows_skip_unknown_users_and_set_cursor():
    history = {
        "messages": [
            {"user": "U1", "text": "Deploy finished", "ts": "1700000000.000100"},
            {"user": "U404", "text": "ignored", "ts": "1700000000.000200"},
            {"user": "U1", "text": "Rollback started", "ts": "1700000000.000300"},
        ],
        "has_more": True,
        "response_metadata": {"next_cursor": "bmV4dA=="},
    }
    client = FakeClient(history=history)
    rows = _parse(ConversationsHandler(FakeProvider(client, USERS))({"channel_id": "C1", "limit": "20"}))
    assert tuple(rows[0]) == Message.HEADER
    assert len(rows) == 3
    assert rows[1][:4] == ["U1", "alice", "Alice Example", "C1"]
    assert rows[1][5] == "1700000000.000100"
    assert rows[1][6] == ""
    assert rows[2][6] == "bmV4dA=="
    assert rows[2][4].split() == ["rollback", "started"]
    assert client.history_calls[0]["limit"] == 20
    assert client.history_calls[0]["inclusive"] is False


def test_history_with_cursor_passes_it_through():
    client = FakeClient(history={"messages": [], "has_more": False})
    out = ConversationsHandler(FakeProvider(client, USERS))({"channel_id": "C1", "cursor": "cur"})
    assert _parse(out) == [list(Message.HEADER)]
    assert client.history_calls[0]["cursor"] == "cur"
    assert client.history_calls[0]["limit"] == 0


def test_history_with_days_limit():
    client = FakeClient(history={"messages": [], "has_more": False})
    ConversationsHandler(FakeProvider(client, USERS))({"channel_id": "C1", "limit": "2d"})
    call = client.history_calls[0]
    assert call["limit"] == 100
    assert call["oldest"].endswith(".000000")
    assert float(call["oldest"]) < float(call["latest"])