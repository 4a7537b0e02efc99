"""Minimal Discord REST support: colours, embeds and message sending."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar

import httpx

from worm.errors import ClientError

API_BASE = "https://discord.com/api/v10"


@dataclass(frozen=True)
class Colour:
    """A 24-bit RGB colour as used by embeds."""

    value: int

    DARK_GREEN: ClassVar[Colour]
    RED: ClassVar[Colour]
    BLUE: ClassVar[Colour]

    @classmethod
    def from_rgb(cls, red: int, green: int, blue: int) -> Colour:
        for component in (red, green, blue):
            if not 0 <= component <= 255:
                raise ValueError(f"colour component out of range: {component}")
        return cls((red << 16) | (green << 8) | blue)

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.value >> 16) & 0xFF, (self.value >> 8) & 0xFF, self.value & 0xFF


Colour.DARK_GREEN = Colour(0x1F8B4C)
Colour.RED = Colour(0xE74C3C)
Colour.BLUE = Colour(0x3498DB)


@dataclass
class EmbedField:
    name: str
    value: str
    inline: bool = False


@dataclass
class Embed:
    """A rich message embed."""

    title: str | None = None
    description: str | None = None
    colour: Colour | None = None
    footer: str | None = None
    timestamp: datetime | None = None
    fields: list[EmbedField] = field(default_factory=list)

    def add_field(self, name: str, value: str, inline: bool = False) -> Embed:
        self.fields.append(EmbedField(name, value, inline))
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON shape the Discord API expects."""
        data: dict[str, Any] = {}
        if self.title is not None:
            data["title"] = self.title
        if self.description is not None:
            data["description"] = self.description
        if self.colour is not None:
            data["color"] = self.colour.value
        if self.footer is not None:
            data["footer"] = {"text": self.footer}
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp.isoformat()
        if self.fields:
            data["fields"] = [
                {"name": f.name, "value": f.value, "inline": f.inline} for f in self.fields
            ]
        return data


class DiscordHttp:
    """Sends messages through the Discord REST API."""

    def __init__(self, token: str, client: httpx.AsyncClient | None = None) -> None:
        self._headers = {"Authorization": f"Bot {token}"}
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient()

    async def send_message(
        self,
        channel_id: int,
        content: str | None = None,
        embed: Embed | None = None,
    ) -> dict[str, Any]:
        """Post a message to a channel and return the created message."""
        if content is None and embed is None:
            raise ValueError("a message needs content or an embed")
        payload: dict[str, Any] = {}
        if content is not None:
            payload["content"] = content
        if embed is not None:
            payload["embeds"] = [embed.to_dict()]
        try:
            response = await self._client.post(
                f"{API_BASE}/channels/{channel_id}/messages",
                headers=self._headers,
                json=payload,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ClientError(f"Failed to send message to channel {channel_id}: {exc}") from exc
        return response.json()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> DiscordHttp:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()