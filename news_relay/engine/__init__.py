"""Engine components orchestrating fetch → parse → filter → notify → persist."""

from .dedup import SentLog
from .fetcher import Fetcher
from .filter import select_new_items
from .notifier import Notifier, TelegramNotifier, format_message
from .parser import NewsItem, Parser

__all__ = [
    "Fetcher",
    "NewsItem",
    "Notifier",
    "Parser",
    "SentLog",
    "TelegramNotifier",
    "format_message",
    "select_new_items",
]
