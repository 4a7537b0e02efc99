"""Exception hierarchy used across the bot."""


class BotError(Exception):
    """Base class for every error the bot reports."""

    prefix = "Bot error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"


class ConfigError(BotError):
    """Configuration could not be loaded or is invalid."""

    prefix = "Configuration error"


class ClientError(BotError):
    """The chat client could not be created or talked to."""

    prefix = "Client error"


class BotRuntimeError(BotError):
    """An unexpected failure while the bot was running."""

    prefix = "Runtime error"