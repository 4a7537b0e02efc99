import asyncio

import httpx
import pytest
import respx

from worm.discord import Colour
from worm.errors import ClientError
from worm.repository import redeem
from worm.repository.connection import DbConnection, DbPool
from worm.scraper.genshin import DEFAULT_API_URL, GenshinCodeData
from worm.services.redeem_checker import (
    CodeCheckerService,
    build_code_embed,
    start_code_checker,
)


def make_code(code, rewards="Primogems"):
    return GenshinCodeData(id=1, code=code, status="OK", game="genshin", rewards=rewards)


class FakeScraper:
    def __init__(self, *batches):
        self.batches = list(batches)
        self.calls = 0

    async def fetch_codes(self):
        self.calls += 1
        result = self.batches[min(self.calls, len(self.batches)) - 1]
        if isinstance(result, Exception):
            raise result
        return list(result)


class FakeHttp:
    def __init__(self, failing=()):
        self.sent = []
        self.failing = set(failing)

    async def send_message(self, channel_id, content=None, embed=None):
        if channel_id in self.failing:
            raise ClientError("unreachable channel")
        self.sent.append((channel_id, content, embed))
        return {}


@pytest.fixture
def db_connection():
    connection = DbConnection(":memory:")
    redeem.init_tables(connection.connection)
    yield connection
    connection.close()


@pytest.fixture
def pool(db_connection):
    return DbPool(db_connection)


def make_service(pool, scraper, http, interval=300.0):
    service = CodeCheckerService(pool, http, scraper, interval)
    service.notification_delay = 0
    return service


def test_build_code_embed_contents():
    embed = build_code_embed(make_code("ABC123", "Hero's Wit"))
    assert embed.title == "Kode Redeem Genshin Impact Baru!"
    assert "**Kode:** `ABC123`" in embed.description
    assert embed.colour == Colour.from_rgb(91, 206, 250)
    assert embed.footer == "Auto-detected by Redeem Bot"
    assert [(f.name, f.value, f.inline) for f in embed.fields] == [
        ("Rewards", "Hero's Wit", False),
        ("Status", "OK", True),
    ]


@pytest.mark.asyncio
async def test_new_codes_are_announced_and_saved(pool, db_connection):
    conn = db_connection.connection
    redeem.insert_server(conn, 100, 200, "genshin")
    redeem.insert_server(conn, 101, 201, "wuwa")
    http = FakeHttp()
    codes = [make_code("AAA", "gems"), make_code("BBB", "mora")]
    service = make_service(pool, FakeScraper(codes), http)

    found = await service.check_for_new_codes()

    assert [c.code for c in found] == ["AAA", "BBB"]
    assert [(channel, content) for channel, content, _ in http.sent] == [
        (200, "@here"),
        (200, "@here"),
    ]
    assert "`AAA`" in http.sent[0][2].description
    assert "`BBB`" in http.sent[1][2].description
    stored = {c.code: c.description for c in redeem.get_codes_by_game(conn, "genshin")}
    assert stored == {"AAA": "gems", "BBB": "mora"}

    again = await service.check_for_new_codes()
    assert again == []
    assert len(http.sent) == 2


@pytest.mark.asyncio
async def test_known_codes_are_skipped(pool, db_connection):
    conn = db_connection.connection
    redeem.insert_server(conn, 100, 200, "genshin")
    redeem.insert_code(conn, "genshin", "AAA", "gems")
    http = FakeHttp()
    service = make_service(pool, FakeScraper([make_code("AAA"), make_code("BBB")]), http)

    found = await service.check_for_new_codes()

    assert [c.code for c in found] == ["BBB"]
    assert len(http.sent) == 1


@pytest.mark.asyncio
async def test_empty_fetch_sends_nothing(pool, db_connection):
    redeem.insert_server(db_connection.connection, 100, 200, "genshin")
    http = FakeHttp()
    service = make_service(pool, FakeScraper([]), http)

    assert await service.check_for_new_codes() == []
    assert http.sent == []


@pytest.mark.asyncio
async def test_failed_channel_does_not_stop_others(pool, db_connection):
    conn = db_connection.connection
    redeem.insert_server(conn, 100, 200, "genshin")
    redeem.insert_server(conn, 102, 202, "genshin,hsr")
    http = FakeHttp(failing={200})
    service = make_service(pool, FakeScraper([make_code("AAA")]), http)

    delivered = await service.notify_new_codes([make_code("AAA")])
    assert delivered == 1
    assert [channel for channel, _, _ in http.sent] == [202]

    await service.check_for_new_codes()
    assert redeem.is_code_sent(conn, "AAA")


@pytest.mark.asyncio
async def test_disabled_server_gets_nothing_but_codes_are_saved(pool, db_connection):
    conn = db_connection.connection
    redeem.insert_server(conn, 100, 200, "genshin")
    redeem.disable_server(conn, 100)
    http = FakeHttp()
    service = make_service(pool, FakeScraper([make_code("AAA")]), http)

    found = await service.check_for_new_codes()

    assert [c.code for c in found] == ["AAA"]
    assert http.sent == []
    assert redeem.is_code_sent(conn, "AAA")


@pytest.mark.asyncio
async def test_monitoring_survives_errors(pool):
    scraper = FakeScraper(ClientError("offline"), [])
    service = make_service(pool, scraper, FakeHttp(), interval=0.01)

    task = asyncio.create_task(service.start_monitoring())
    await asyncio.sleep(0.1)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert scraper.calls >= 2


@pytest.mark.asyncio
async def test_start_code_checker_polls_default_api(pool):
    http = FakeHttp()
    with respx.mock() as router:
        route = router.get(DEFAULT_API_URL).mock(
            return_value=httpx.Response(200, json={"codes": [], "game": "genshin"})
        )
        task = await start_code_checker(pool, http)
        for _ in range(100):
            if route.called:
                break
            await asyncio.sleep(0.01)
        assert task.done() is False
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    assert task.cancelled() is True
    assert route.call_count == 1
    assert http.sent == []