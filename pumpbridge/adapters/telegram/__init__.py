"""Telegram Bot API adapter."""

from pumpbridge.adapters.telegram.client import TelegramAPIError, TelegramClient
from pumpbridge.adapters.telegram.updates import parse_update

__all__ = ["TelegramAPIError", "TelegramClient", "parse_update"]
