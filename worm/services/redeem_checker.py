"""Background service that announces newly published Genshin redeem codes."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from worm.discord import Colour, DiscordHttp, Embed
from worm.repository import redeem
from worm.repository.connection import DbPool
from worm.scraper.genshin import GenshinCodeData, GenshinCodeScraper

logger = logging.getLogger(__name__)

GAME = "genshin"
DEFAULT_CHECK_INTERVAL = 300.0
EMBED_COLOUR = Colour.from_rgb(91, 206, 250)


def build_code_embed(code: GenshinCodeData) -> Embed:
    """The announcement embed for one code."""
    description = (
        "Kode baru telah ditemukan! Segera redeem sebelum kadaluarsa.\n\n"
        f"**Kode:** `{code.code}`\n"
        "**Cara Redeem:**\n"
        "1. Buka [Genshin Impact Redeem](https://genshin.hoyoverse.com/en/gift)\n"
        "2. Login dengan akun Anda\n"
        "3. Masukkan kode di atas\n"
        "4. Klaim reward di in-game mail"
    )
    embed = Embed(
        title="Kode Redeem Genshin Impact Baru!",
        description=description,
        colour=EMBED_COLOUR,
        footer="Auto-detected by Redeem Bot",
        timestamp=datetime.now(timezone.utc),
    )
    embed.add_field("Rewards", code.rewards, False)
    embed.add_field("Status", code.status, True)
    return embed


class CodeCheckerService:
    """Polls for codes, notifies subscribed channels and records what was sent."""

    notification_delay = 0.5

    def __init__(
        self,
        db: DbPool,
        http: DiscordHttp,
        scraper: GenshinCodeScraper | None = None,
        check_interval: float = DEFAULT_CHECK_INTERVAL,
    ) -> None:
        self.db = db
        self.http = http
        self.scraper = scraper if scraper is not None else GenshinCodeScraper()
        self.check_interval = check_interval

    async def start_monitoring(self) -> None:
        """Check for new codes forever, once per interval, starting immediately."""
        while True:
            try:
                await self.check_for_new_codes()
            except Exception as exc:
                logger.error("Error checking for new codes: %s", exc)
            await asyncio.sleep(self.check_interval)

    async def check_for_new_codes(self) -> list[GenshinCodeData]:
        """Announce and store codes not seen before; return them."""
        logger.info("Checking for new Genshin codes...")
        current_codes = await self.scraper.fetch_codes()

        if not current_codes:
            logger.info("No active codes found from API")
            return []

        async with self.db.acquire() as conn:
            new_codes = [c for c in current_codes if not redeem.is_code_sent(conn, c.code)]

        if not new_codes:
            logger.info("No new codes found.")
            return []

        logger.info("Found %d new code(s)!", len(new_codes))
        await self.notify_new_codes(new_codes)

        async with self.db.acquire() as conn:
            for code in new_codes:
                redeem.insert_code(conn, GAME, code.code, code.rewards, None)
                logger.info("Saved code to database: %s", code.code)

        return new_codes

    async def notify_new_codes(self, new_codes: Sequence[GenshinCodeData]) -> int:
        """Send the codes to every active server; return how many succeeded."""
        async with self.db.acquire() as conn:
            servers = redeem.get_active_servers(conn, GAME)

        if not servers:
            logger.info("No active servers configured for notifications")
            return 0

        logger.info("Sending notifications to %d server(s)", len(servers))
        delivered = 0
        for server in servers:
            try:
                await self.send_notification(server.channel_id, new_codes)
            except Exception as exc:
                logger.error(
                    "Failed to send notification to channel %s (guild %s): %s",
                    server.channel_id,
                    server.guild_id,
                    exc,
                )
            else:
                delivered += 1
                logger.info(
                    "Successfully sent notification to guild %s (channel %s)",
                    server.guild_id,
                    server.channel_id,
                )
        return delivered

    async def send_notification(
        self, channel_id: int, codes: Sequence[GenshinCodeData]
    ) -> None:
        """Post one announcement per code to ``channel_id``."""
        for code in codes:
            await self.http.send_message(channel_id, content="@here", embed=build_code_embed(code))
            await asyncio.sleep(self.notification_delay)


async def start_code_checker(db: DbPool, http: DiscordHttp) -> asyncio.Task[None]:
    """Start the checker in the background and return its task."""
    checker = CodeCheckerService(db, http)
    task = asyncio.create_task(checker.start_monitoring())
    logger.info("Code checker service started - monitoring every 5 minutes")
    return task