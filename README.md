# worm

Building blocks for a chat bot: transport-independent command handlers, a
client for an OpenAI-compatible chat completions API, a host system summary,
SQLite storage for redeem-code subscriptions and reminders, and a background
service that posts new Genshin Impact redeem codes to subscribed channels
through the Discord REST API.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Configuration

Settings come from the environment. The `worm` command loads a `.env` file
from the working directory first if one exists:

```
TOKEN=token
CLIENT_ID=123456789012345678
API_KEY=placeholder
MODEL_AI=some-chat-model
BASE_URL=https://api.example.com/v1
SCRAPER_URL=https://codes.example.com
```

`worm.config.Config.from_env(prompt_file)` reads all six variables and the
system prompt file (`system-prompt.txt` by default). A missing variable or an
unreadable prompt file raises `worm.errors.ConfigError`.

- `TOKEN` – the bot token, sent as `Authorization: Bot <token>` when posting messages.
- `CLIENT_ID` – the owner's user id; it must be an unsigned 64-bit integer.
- `API_KEY`, `MODEL_AI`, `BASE_URL` – the chat completions endpoint used by
  the AI client (`BASE_URL` + `/chat/completions`).
- `SCRAPER_URL` – required by `Config`; the code scraper itself queries its
  built-in code API address (`worm.scraper.genshin.DEFAULT_API_URL`).

## Running

```
worm [--db PATH] [--prompt-file PATH]
```

`worm` loads the configuration, opens (or creates) the SQLite database
(`redeem_bot.db` by default), creates the redeem and reminder tables, and
runs the redeem-code checker until interrupted. Configuration and database
errors are printed to standard error and give exit status 1.

### Redeem-code checker

`worm.services.redeem_checker.CodeCheckerService` checks once at start and
then every 300 seconds. It fetches the codes whose status is `OK`, keeps
those not yet in the `redeem_codes` table, and for each one posts an `@here`
message with an embed (code, redeem steps, rewards and status) to every
active server whose game list contains `genshin`, pausing half a second
between messages. Afterwards the new codes are stored, so each is announced
once. Failures to reach one channel are logged and do not stop the others.

## Command handlers

`worm.commands` holds one coroutine per command. Each takes plain values
(ids, text, the shared `Data` holding the `DbPool` and owner ids) and returns
a `Reply` with `content`, an `Embed` and an `ephemeral` flag. Use outside the
allowed place or by a non-owner raises `CommandError`.

| Function | Restriction | Reply |
|---|---|---|
| `ping()` | none | `Pong!` |
| `general_ping(guild_id)` | in a guild | `Pong?` |
| `say(text)` | none | the text |
| `everyone(data, author_id, guild_id)` | owner, in a guild | `@everyone` |
| `worm(text, config, client)` | none | the AI model's answer, or `Error: ...` |
| `sys_info(data, author_id)` | owner | ephemeral embed with OS, CPU and memory |
| `redeem_setup(data, guild_id, channel_id, game)` | in a guild | subscribes the guild's channel to a game |
| `redeem_disable(data, guild_id)` | in a guild | stops notifications for the guild |
| `redeem_enable(data, guild_id)` | in a guild | resumes notifications for the guild |
| `redeem_codes(data, game)` | none | up to ten newest stored codes for the game |

## Using the storage

The storage functions work on a plain `sqlite3` connection:

```python
import sqlite3
from worm.repository import redeem

conn = sqlite3.connect(":memory:")
redeem.init_tables(conn)
redeem.insert_server(conn, guild_id=1, channel_id=2, games="genshin")
servers = redeem.get_active_servers(conn, "genshin")
```

`worm.repository.reminder` offers `init_tables`, `insert_reminder`,
`get_pending_reminders`, `mark_as_sent`, `get_user_reminders`,
`delete_reminder` and `cleanup_sent_reminders`. `worm.repository.connection`
provides `create_pool(db_path)`, whose `DbPool.acquire()` is an async context
manager that hands out the shared connection one task at a time.

## What it does not do

The package does not connect to the Discord gateway. The `worm` command
therefore does not receive messages, does not dispatch the command handlers,
does not check administrator permissions and does not set the bot's
presence; `worm.app.next_activity` only computes the rotation of presence
activities. Reminders are stored but nothing delivers them.