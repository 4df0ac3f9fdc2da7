"""Message formatting and Telegram delivery."""

from __future__ import annotations

from typing import Protocol

import httpx
import structlog

from ..config import TelegramConfig
from ..errors import ConfigurationError, NetworkError
from .parser import NewsItem, escape_markdown_underscores


def escape_title(text: str) -> str:
    """Escape the characters legacy Telegram Markdown treats as entity markers."""

    text = escape_markdown_underscores(text)
    for ch in "*`[":
        text = text.replace(ch, f"\\{ch}")
    return text


def format_message(item: NewsItem) -> str:
    """Render a story as Telegram Markdown.

    The URL was escaped at parse time; the title is escaped here.
    """

    title = escape_title(item.title)
    return f"*{title}*\n{item.url} | [{item.comment_count}]({item.comment_link})"


class Notifier(Protocol):
    """Delivery channel for formatted messages."""

    def send(self, message: str) -> None:
        ...


class TelegramNotifier:
    """Send messages through the Bot API ``sendMessage`` method.

    Delivery is fire-and-forget: the response body is never inspected, only
    transport failures and non-2xx statuses are reported.
    """

    def __init__(
        self,
        config: TelegramConfig,
        client: httpx.Client | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        if not config.bot_token:
            raise ConfigurationError(
                "Telegram bot token is not configured (set NEWS_RELAY_TELEGRAM_TOKEN)"
            )
        self.config = config
        self.logger = logger or structlog.get_logger("news_relay.notifier")
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=config.timeout)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def params(self, message: str) -> dict[str, str]:
        params = {
            "chat_id": self.config.channel,
            "parse_mode": self.config.parse_mode,
        }
        if self.config.silent:
            params["disable_notification"] = "true"
        params["text"] = message
        return params

    def send(self, message: str) -> None:
        try:
            response = self._client.get(self.config.endpoint, params=self.params(message))
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            # the request URL embeds the bot token, keep it out of messages
            raise NetworkError(
                f"Telegram sendMessage returned status {exc.response.status_code}"
            ) from None
        except httpx.HTTPError as exc:
            raise NetworkError(f"Telegram sendMessage failed: {type(exc).__name__}") from None
        self.logger.debug("message_delivered", chat_id=self.config.channel)

    def notify(self, item: NewsItem) -> None:
        self.send(format_message(item))


__all__ = ["Notifier", "TelegramNotifier", "escape_title", "format_message"]
