import sqlite3

import httpx
import pytest
import respx

from worm import commands
from worm.commands import CommandError, Data, Reply
from worm.config import Config
from worm.discord import Colour
from worm.repository import redeem
from worm.repository.connection import DbConnection, DbPool

OWNER = 42
BASE_URL = "http://ai.example.com/v1"


def _make_data(tmp_path) -> tuple[Data, sqlite3.Connection]:
    db = DbConnection(tmp_path / "bot.db")
    redeem.init_tables(db.connection)
    return Data(db=DbPool(db), owners=frozenset({OWNER})), db.connection


def _config() -> Config:
    return Config(
        token="token",
        client_id=str(OWNER),
        api_key="placeholder",
        model_ai="model",
        base_url=BASE_URL,
        prompt="be nice",
        scraper_url="http://codes.example.com",
    )


@pytest.mark.asyncio
async def test_ping():
    assert await commands.ping() == Reply(content="Pong!")


@pytest.mark.asyncio
async def test_general_ping_in_guild():
    assert (await commands.general_ping(1)).content == "Pong?"


@pytest.mark.asyncio
async def test_general_ping_outside_guild():
    with pytest.raises(CommandError):
        await commands.general_ping(None)


@pytest.mark.asyncio
async def test_say_repeats_text():
    assert (await commands.say("hello there")).content == "hello there"


@pytest.mark.asyncio
async def test_everyone_for_owner(tmp_path):
    data, _ = _make_data(tmp_path)
    assert (await commands.everyone(data, OWNER, 5)).content == "@everyone"


@pytest.mark.asyncio
async def test_everyone_rejects_non_owner(tmp_path):
    data, _ = _make_data(tmp_path)
    with pytest.raises(CommandError):
        await commands.everyone(data, OWNER + 1, 5)


@pytest.mark.asyncio
async def test_everyone_requires_guild(tmp_path):
    data, _ = _make_data(tmp_path)
    with pytest.raises(CommandError):
        await commands.everyone(data, OWNER, None)


@pytest.mark.asyncio
async def test_worm_returns_ai_reply():
    with respx.mock:
        route = respx.post(f"{BASE_URL}/chat/completions").mock(
            return_value=httpx.Response(
                200, json={"choices": [{"message": {"content": "hi there"}}]}
            )
        )
        async with httpx.AsyncClient() as client:
            reply = await commands.worm("hello", _config(), client)
    assert reply.content == "hi there"
    assert route.called


@pytest.mark.asyncio
async def test_worm_reports_failure_in_reply():
    with respx.mock:
        respx.post(f"{BASE_URL}/chat/completions").mock(return_value=httpx.Response(500))
        async with httpx.AsyncClient() as client:
            reply = await commands.worm("hello", _config(), client)
    assert reply.content == "Error: API request failed with status: 500 Internal Server Error"


@pytest.mark.asyncio
async def test_sys_info_for_owner(tmp_path):
    data, _ = _make_data(tmp_path)
    reply = await commands.sys_info(data, OWNER)
    assert reply.ephemeral is True
    assert [f.name for f in reply.embed.fields] == ["OS", "CPU", "Memory"]
    assert reply.embed.fields[2].value.endswith("digunakan")


@pytest.mark.asyncio
async def test_sys_info_rejects_non_owner(tmp_path):
    data, _ = _make_data(tmp_path)
    with pytest.raises(CommandError):
        await commands.sys_info(data, 7)


@pytest.mark.asyncio
async def test_redeem_setup_registers_server(tmp_path):
    data, conn = _make_data(tmp_path)
    reply = await commands.redeem_setup(data, 10, 20, "genshin")
    assert reply.embed.title == "Redeem Setup Successful"
    assert reply.embed.description == (
        "Redeem code notifications for **GENSHIN** will be sent to <#20>"
    )
    assert reply.embed.colour == Colour.DARK_GREEN
    servers = redeem.get_active_servers(conn, "genshin")
    assert [(s.guild_id, s.channel_id) for s in servers] == [(10, 20)]


@pytest.mark.asyncio
async def test_redeem_setup_requires_guild(tmp_path):
    data, conn = _make_data(tmp_path)
    with pytest.raises(CommandError):
        await commands.redeem_setup(data, None, 20, "genshin")
    assert redeem.get_active_servers(conn, "genshin") == []


@pytest.mark.asyncio
async def test_redeem_disable_and_enable(tmp_path):
    data, conn = _make_data(tmp_path)
    await commands.redeem_setup(data, 10, 20, "genshin")

    disabled = await commands.redeem_disable(data, 10)
    assert disabled.embed.colour == Colour.RED
    assert redeem.get_active_servers(conn, "genshin") == []

    enabled = await commands.redeem_enable(data, 10)
    assert enabled.embed.title == "Notifications Enabled"
    assert len(redeem.get_active_servers(conn, "genshin")) == 1


@pytest.mark.asyncio
async def test_redeem_codes_empty(tmp_path):
    data, _ = _make_data(tmp_path)
    reply = await commands.redeem_codes(data, "hsr")
    assert reply.content == "No redeem codes available for **HSR**"
    assert reply.embed is None


@pytest.mark.asyncio
async def test_redeem_codes_lists_codes(tmp_path):
    data, conn = _make_data(tmp_path)
    redeem.insert_code(conn, "genshin", "ABC", "Primogems", None)
    redeem.insert_code(conn, "genshin", "XYZ", None, None)
    redeem.insert_code(conn, "hsr", "OTHER", "Jade", None)

    reply = await commands.redeem_codes(data, "genshin")
    lines = set(reply.embed.description.split("\n"))
    assert lines == {"`ABC` - Primogems", "`XYZ`"}
    assert reply.embed.title == "GENSHIN Redeem Codes"
    assert reply.embed.footer == "Total: 2 codes"
    assert reply.embed.colour == Colour.BLUE