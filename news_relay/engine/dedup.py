"""Sent log: which story URLs were already relayed, and when."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Mapping

from ..errors import CorruptLogError
from ..infra.storage import JsonFileStore

SENT_KEY = "sent"


def _decode_entries(payload: Any, path: Path) -> dict[str, int]:
    if not isinstance(payload, dict) or not isinstance(payload.get(SENT_KEY), dict):
        raise CorruptLogError(f"Sent log {path} has no '{SENT_KEY}' mapping")
    entries: dict[str, int] = {}
    for url, stamp in payload[SENT_KEY].items():
        if isinstance(stamp, bool) or not isinstance(stamp, (int, float)):
            raise CorruptLogError(f"Sent log {path} has a non-numeric timestamp for {url!r}")
        if isinstance(stamp, float) and not math.isfinite(stamp):
            raise CorruptLogError(f"Sent log {path} has a non-finite timestamp for {url!r}")
        entries[url] = int(stamp)
    return entries


class SentLog:
    """Persisted mapping of URL to epoch-millisecond send time.

    Every mutation is written to disk before the method returns.
    """

    def __init__(
        self,
        path: Path,
        entries: Mapping[str, int] | None = None,
        store: JsonFileStore | None = None,
    ) -> None:
        self.path = path
        self.store = store or JsonFileStore()
        self._entries: dict[str, int] = dict(entries or {})

    @classmethod
    def load(cls, path: Path, store: JsonFileStore | None = None) -> "SentLog":
        """Read the log at ``path``; a missing file gives an empty log."""

        store = store or JsonFileStore()
        try:
            payload = store.read(path)
        except (ValueError, UnicodeDecodeError) as exc:
            raise CorruptLogError(f"Sent log {path} is not valid JSON: {exc}") from exc
        if payload is None:
            return cls(path, store=store)
        return cls(path, _decode_entries(payload, path), store=store)

    def has(self, url: str) -> bool:
        return url in self._entries

    __contains__ = has

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> dict[str, int]:
        return dict(self._entries)

    def mark_sent(self, url: str, timestamp_ms: int) -> None:
        self._entries[url] = int(timestamp_ms)
        self._persist()

    def prune(self, now_ms: int, retention_ms: int) -> int:
        """Drop entries older than ``retention_ms``; return how many went."""

        expired = [url for url, stamp in self._entries.items() if now_ms - stamp > retention_ms]
        for url in expired:
            del self._entries[url]
        self._persist(indent=2)
        return len(expired)

    def _persist(self, indent: int | None = None) -> None:
        self.store.write(self.path, {SENT_KEY: self._entries}, indent=indent)


__all__ = ["SENT_KEY", "SentLog"]
