"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from worm.errors import ConfigError

DEFAULT_PROMPT_FILE = "system-prompt.txt"

_REQUIRED_VARS = (
    ("scraper_url", "SCRAPER_URL", "SCRAPER_URL not configure"),
    ("api_key", "API_KEY", "API_KEY not configured"),
    ("token", "TOKEN", "TOKEN not configured"),
    ("client_id", "CLIENT_ID", "CLIENT_ID not configured"),
    ("model_ai", "MODEL_AI", "MODEL_AI not configured"),
    ("base_url", "BASE_URL", "BASE_URL not configured"),
)


@dataclass(frozen=True)
class Config:
    """Settings the bot needs to run."""

    token: str
    client_id: str
    api_key: str
    model_ai: str
    base_url: str
    prompt: str
    scraper_url: str

    @classmethod
    def from_env(cls, prompt_file: str | os.PathLike[str] = DEFAULT_PROMPT_FILE) -> Config:
        """Build a config from environment variables and the system prompt file."""
        try:
            prompt = Path(prompt_file).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(
                f"Failed to read prompt file '{os.fspath(prompt_file)}': {exc}"
            ) from exc

        values = {}
        for attr, var, missing_message in _REQUIRED_VARS:
            value = os.environ.get(var)
            if value is None:
                raise ConfigError(missing_message)
            values[attr] = value

        return cls(prompt=prompt, **values)