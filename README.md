# slackmcp

Read access to a Slack workspace, shaped for assistant tools. The package
lists channels and reads channel history, and answers both in CSV.

## Installation

```
pip install .
```

## Configuration

Requests authenticate with browser session credentials. `provider_from_env()`
and `build_http_client()` read these environment variables:

| Variable | Meaning |
| --- | --- |
| `SLACK_MCP_XOXC_TOKEN` | the `xoxc-` session token (required) |
| `SLACK_MCP_XOXD_TOKEN` | the `d` cookie value (required) |
| `SLACK_MCP_USERS_CACHE` | path of the users cache file, default `.users_cache.json` |
| `SLACK_MCP_PROXY` | proxy URL for all Slack requests |
| `SLACK_MCP_SERVER_CA` | extra CA certificate file (PEM) to trust |
| `SLACK_MCP_SERVER_CA_INSECURE` | if set, skip TLS verification; combining it with `SLACK_MCP_SERVER_CA` raises `ValueError` |

`provider_from_env()` raises `RuntimeError` when either token is missing.

## Use from Python

```python
from slackmcp.provider import provider_from_env
from slackmcp.handlers import ChannelsHandler, ConversationsHandler

provider = provider_from_env()

channels_csv = ChannelsHandler(provider)({"channel_types": ["public_channel"]})
history_csv = ConversationsHandler(provider)({"channel_id": "C0123456789", "limit": "7d"})
```

### `slackmcp.provider`

`ApiProvider(token, cookie, users_cache, client_factory)` authenticates on the
first call to `provide()`: it calls `auth.test`, then returns a `SlackClient`
aimed at the workspace's own API URL. On that first call it also loads the
user directory, from the users cache file when it can be read and parsed, or
else from `users.list`, after which it writes the cache. Delete the cache file
to refresh it. `provide_users_map()` returns the users keyed by user id.

`build_http_client(cookie)` returns an `httpx.Client` that sends every request
with a desktop browser user agent and the `d` cookie, through the proxy and
CA settings above.

### `slackmcp.handlers`

Each handler is called with a dictionary of arguments and returns CSV text.

- `ChannelsHandler`: `channel_types` is a list drawn from `mpim`, `im`,
  `public_channel`, `private_channel` (default `public_channel`); archived
  channels are left out. `sort` defaults to `popularity`, which orders by
  member count, highest first; any other value keeps the API's order.
  Columns: `ID,Name,Topic,Purpose,MemberCount`, names prefixed with `#`.
- `ConversationsHandler`: `channel_id` is required. `limit` is either a day
  range such as `1d` or `30d` (from midnight of the first day until now, 100
  messages per page) or a message count such as `50`; it may be empty only
  when `cursor` is given. Messages from users not in the user directory are
  left out. Columns: `UserID,UserName,RealName,Channel,Text,Time,Cursor`;
  when more messages exist, the last row's `Cursor` holds the value to pass
  as `cursor` for the next page. Bad arguments raise `ValueError`.

`limit_by_days()`, `limit_by_numeric()` and `to_csv()` are available on their
own as well.

### Other modules

- `slackmcp.slack`: `SlackClient` with `auth_test()`, `get_conversations()`,
  `get_conversation_history()` and `get_users()`; a reply with `ok: false`
  raises `SlackError`.
- `slackmcp.text`: `process_text()` strips HTML tags, lower-cases the text
  and removes English stop words; message texts pass through it.
- `slackmcp.transport`: `UserAgentTransport`, the httpx transport that sets
  the user agent and cookie.

## What this package does not do

It has no command to run and no server: it does not speak the Model Context
Protocol over standard input and output or over HTTP. To offer the handlers to
an assistant, register them as tools in a server of your own.