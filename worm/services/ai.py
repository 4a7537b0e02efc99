"""Chat-completion client that keeps the latest exchange as context."""

from __future__ import annotations

from typing import Any

import httpx

from worm.errors import ClientError

MAX_TOKENS = 2000
TEMPERATURE = 0.7


class Ai:
    """Talks to an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        prompt: str,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url
        self.model = model
        self.prompt = prompt
        self._api_key = api_key
        self._client = client
        self._history: dict[str, str] = {}

    async def call_api(self, user_input: str) -> str:
        """Send ``user_input`` with the system prompt and history; return the reply."""
        if self._client is not None:
            return await self._request(self._client, user_input)
        async with httpx.AsyncClient(timeout=None) as client:
            return await self._request(client, user_input)

    async def _request(self, client: httpx.AsyncClient, user_input: str) -> str:
        self._history["user"] = user_input

        messages: list[dict[str, str]] = [{"role": "system", "content": self.prompt}]
        messages.extend(
            {"role": role, "content": content} for role, content in self._history.items()
        )
        body: dict[str, Any] = {
            "model": self.model,
            "max_tokens": MAX_TOKENS,
            "temperature": TEMPERATURE,
            "messages": messages,
        }

        try:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                json=body,
            )
        except httpx.HTTPError as exc:
            raise ClientError(f"API request failed: {exc}") from exc

        if not response.is_success:
            raise ClientError(
                f"API request failed with status: {response.status_code} {response.reason_phrase}"
            )

        try:
            reply = str(response.json()["choices"][0]["message"]["content"])
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise ClientError(f"Unexpected API response: {exc!r}") from exc

        self._history["assistant"] = reply
        return reply