"""Chat command handlers, independent of the transport that delivers them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

import httpx

from worm.config import Config
from worm.discord import Colour, Embed
from worm.errors import BotError, ConfigError
from worm.repository import redeem
from worm.repository.connection import DbPool
from worm.services.ai import Ai
from worm.sysinfo import SysInfo

LOADING_MESSAGE = "Loading..."


class CommandError(BotError):
    """A command was used where or by whom it is not allowed."""

    prefix = "Command error"


@dataclass
class Data:
    """State shared by every command invocation."""

    db: DbPool
    owners: frozenset[int] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Reply:
    """What a command answers with."""

    content: str | None = None
    embed: Embed | None = None
    ephemeral: bool = False


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _require_guild(guild_id: int | None) -> int:
    if guild_id is None:
        raise CommandError("Must be used in a guild")
    return guild_id


def _require_owner(data: Data, author_id: int) -> None:
    if author_id not in data.owners:
        raise CommandError("Only bot owners can use this command")


async def ping() -> Reply:
    """Answer with a pong."""
    return Reply(content="Pong!")


async def general_ping(guild_id: int | None) -> Reply:
    """Guild-only pong."""
    _require_guild(guild_id)
    return Reply(content="Pong?")


async def say(text: str) -> Reply:
    """Repeat the given text."""
    return Reply(content=text)


async def everyone(data: Data, author_id: int, guild_id: int | None) -> Reply:
    """Mention everyone; owners only, in a guild."""
    _require_guild(guild_id)
    _require_owner(data, author_id)
    return Reply(content="@everyone")


async def worm(
    text: str,
    config: Config | None = None,
    client: httpx.AsyncClient | None = None,
) -> Reply:
    """Ask the AI model; failures become an error message in the reply."""
    if config is None:
        try:
            config = Config.from_env()
        except ConfigError as exc:
            raise ConfigError(f"Failed to load config: {exc.message}") from exc

    ai = Ai(config.base_url, config.api_key, config.model_ai, config.prompt, client)
    try:
        content = await ai.call_api(text)
    except BotError as exc:
        content = f"Error: {exc.message}"
    except Exception as exc:
        content = f"Error: {exc}"
    return Reply(content=content)


async def sys_info(data: Data, author_id: int) -> Reply:
    """Host OS, CPU and memory summary, shown only to the caller."""
    _require_owner(data, author_id)
    info = SysInfo.collect()
    embed = Embed(title="Sys", colour=Colour.BLUE, timestamp=_now())
    embed.add_field("OS", info.os, False)
    embed.add_field("CPU", info.cpu, False)
    embed.add_field("Memory", info.memory, False)
    return Reply(embed=embed, ephemeral=True)


async def redeem_setup(data: Data, guild_id: int | None, channel_id: int, game: str) -> Reply:
    """Send redeem-code notifications for ``game`` to ``channel_id``."""
    guild = _require_guild(guild_id)
    async with data.db.acquire() as conn:
        redeem.insert_server(conn, guild, channel_id, game)
    embed = Embed(
        title="Redeem Setup Successful",
        description=(
            f"Redeem code notifications for **{game.upper()}** "
            f"will be sent to <#{channel_id}>"
        ),
        colour=Colour.DARK_GREEN,
        timestamp=_now(),
    )
    return Reply(embed=embed)


async def redeem_disable(data: Data, guild_id: int | None) -> Reply:
    """Stop notifications for this guild."""
    guild = _require_guild(guild_id)
    async with data.db.acquire() as conn:
        redeem.disable_server(conn, guild)
    embed = Embed(
        title="Notifications Disabled",
        description="Redeem code notifications have been disabled for this server",
        colour=Colour.RED,
        timestamp=_now(),
    )
    return Reply(embed=embed)


async def redeem_enable(data: Data, guild_id: int | None) -> Reply:
    """Resume notifications for this guild."""
    guild = _require_guild(guild_id)
    async with data.db.acquire() as conn:
        redeem.enable_server(conn, guild)
    embed = Embed(
        title="Notifications Enabled",
        description="Redeem code notifications have been enabled for this server",
        colour=Colour.DARK_GREEN,
        timestamp=_now(),
    )
    return Reply(embed=embed)


async def redeem_codes(data: Data, game: str) -> Reply:
    """List the newest stored codes for ``game``."""
    async with data.db.acquire() as conn:
        codes = redeem.get_codes_by_game(conn, game)

    if not codes:
        return Reply(content=f"No redeem codes available for **{game.upper()}**")

    lines = "\n".join(
        f"`{c.code}`" + (f" - {c.description}" if c.description is not None else "")
        for c in codes
    )
    embed = Embed(
        title=f"{game.upper()} Redeem Codes",
        description=lines,
        colour=Colour.BLUE,
        footer=f"Total: {len(codes)} codes",
        timestamp=_now(),
    )
    return Reply(embed=embed)