"""Connector Telegram Bot API (sendMessage)."""

from api.connectors.telegram.http_client import (
    TelegramHttpClient,
    create_telegram_http_client,
)

__all__ = [
    "TelegramHttpClient",
    "create_telegram_http_client",
]
