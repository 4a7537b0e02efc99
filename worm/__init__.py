"""Chat bot pieces: command handlers, AI client, system info and redeem-code notifications."""

__version__ = "0.1.0"