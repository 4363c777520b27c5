"""Logcord: per-guild moderation logging for Discord."""

__version__ = "0.1.0"
