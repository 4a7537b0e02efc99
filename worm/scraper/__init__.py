"""Fetcher for Genshin Impact redeem codes."""