"""Run coordinator wiring together fetching, parsing, filtering, notifying and the sent log."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .config import RelayConfig
from .engine import Fetcher, Notifier, Parser, SentLog, TelegramNotifier, format_message, select_new_items
from .errors import CorruptLogError, RelayError
from .infra import JsonFileStore
from .logging_conf import get_logger


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(slots=True)
class RunSummary:
    """Outcome of one run."""

    fetched: int = 0
    selected: int = 0
    sent: int = 0
    pruned: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_dict(self) -> dict:
        return {
            "fetched": self.fetched,
            "selected": self.selected,
            "sent": self.sent,
            "pruned": self.pruned,
            "error": self.error,
        }


class Orchestrator:
    """Run the relay pipeline once per :meth:`run` call.

    Fetch, parse, load the sent log, filter, then for every selected story
    mark it in the log before sending it, and finally prune old log entries.
    Marking first means a crash between mark and send loses that story rather
    than relaying it twice.
    """

    def __init__(
        self,
        config: RelayConfig,
        log_path: Path,
        fetcher: Fetcher | None = None,
        parser: Parser | None = None,
        notifier: Notifier | None = None,
        store: JsonFileStore | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.config = config
        self.log_path = log_path
        self.fetcher = fetcher or Fetcher(config.listing)
        self.parser = parser or Parser(config.listing)
        self.store = store or JsonFileStore()
        self.clock = clock
        self.logger = get_logger("orchestrator").bind(job=config.job_name)
        self._notifier = notifier

    @property
    def notifier(self) -> Notifier:
        if self._notifier is None:
            self._notifier = TelegramNotifier(self.config.telegram)
        return self._notifier

    def run(self) -> RunSummary:
        summary = RunSummary()
        self.logger.info("run_started")
        try:
            self._run(summary)
        except RelayError as exc:
            summary.error = str(exc)
            self.logger.error("run_failed", error_type=type(exc).__name__, **summary.as_dict())
        except Exception as exc:  # noqa: BLE001
            summary.error = f"{type(exc).__name__}: {exc}"
            self.logger.exception("run_crashed", **summary.as_dict())
        else:
            self.logger.info("run_completed", **summary.as_dict())
        return summary

    def close(self) -> None:
        self.fetcher.close()
        close = getattr(self._notifier, "close", None)
        if callable(close):
            close()

    # ------------------------------------------------------------------
    def _run(self, summary: RunSummary) -> None:
        html = self.fetcher.fetch()
        self.logger.info("html_fetched", url=self.config.listing.url)

        items = self.parser.parse(html)
        summary.fetched = len(items)
        self.logger.info("items_parsed", count=len(items))

        sent_log = self._load_log()
        selected = select_new_items(sent_log, items, self.config.min_score)
        summary.selected = len(selected)
        self.logger.info("items_selected", count=len(selected), min_score=self.config.min_score)

        if selected:
            notifier = self.notifier
            for item in selected:
                self.logger.info("item_sending", title=item.title, url=item.url, score=item.score)
                sent_log.mark_sent(item.url, self.clock())
                notifier.send(format_message(item))
                summary.sent += 1

        summary.pruned = sent_log.prune(self.clock(), self.config.retention_ms)
        if summary.pruned:
            self.logger.info("log_pruned", removed=summary.pruned, remaining=len(sent_log))

    def _load_log(self) -> SentLog:
        try:
            return SentLog.load(self.log_path, self.store)
        except CorruptLogError as exc:
            if not self.config.dedup.reset_on_corrupt:
                raise
            self.logger.warning("sent_log_reset", path=str(self.log_path), error=str(exc))
            return SentLog(self.log_path, store=self.store)


__all__ = ["Orchestrator", "RunSummary", "now_ms"]
