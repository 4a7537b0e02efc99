"""Fetches currently valid Genshin Impact redeem codes from a public code API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from worm.errors import ClientError

DEFAULT_API_URL = "https://hoyo-codes.seria.moe/codes?game=genshin"
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
ACTIVE_STATUS = "OK"


@dataclass(frozen=True)
class GenshinCodeData:
    """One redeem code as reported by the code API."""

    id: int
    code: str
    status: str
    game: str
    rewards: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GenshinCodeData:
        return cls(
            id=int(data["id"]),
            code=str(data["code"]),
            status=str(data["status"]),
            game=str(data["game"]),
            rewards=str(data["rewards"]),
        )


class GenshinCodeScraper:
    """Client for the redeem-code API."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_url = api_url
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient()

    async def fetch_codes(self) -> list[GenshinCodeData]:
        """Return the codes whose status is ``OK``."""
        try:
            response = await self._client.get(
                self.api_url, headers={"User-Agent": USER_AGENT}
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ClientError(f"Failed to fetch codes from {self.api_url}: {exc}") from exc

        try:
            payload["game"]
            codes = [GenshinCodeData.from_dict(item) for item in payload["codes"]]
        except (KeyError, TypeError, ValueError) as exc:
            raise ClientError(f"Unexpected response from {self.api_url}: {exc}") from exc

        return [code for code in codes if code.status == ACTIVE_STATUS]

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> GenshinCodeScraper:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()