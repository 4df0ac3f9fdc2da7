"""Story selection."""

from __future__ import annotations

from typing import Iterable

from .dedup import SentLog
from .parser import NewsItem


def select_new_items(log: SentLog, items: Iterable[NewsItem], min_score: int) -> list[NewsItem]:
    """Return items scoring strictly above ``min_score`` that ``log`` has not seen."""

    return [item for item in items if item.score > min_score and not log.has(item.url)]


__all__ = ["select_new_items"]
