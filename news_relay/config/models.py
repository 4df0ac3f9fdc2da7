"""Pydantic models describing a relay job."""

from __future__ import annotations

from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_JOB_NAME = "ycomb-poster"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ScheduleType(str, Enum):
    """Trigger modes for the built-in scheduler."""

    CRON = "cron"
    INTERVAL = "interval"


class ScheduleConfig(_Frozen):
    """When `serve` should start a run."""

    type: ScheduleType = Field(default=ScheduleType.INTERVAL)
    value: Any = Field(
        default=600,
        description="Interval seconds, IntervalTrigger kwargs dict, or crontab expression.",
    )

    @model_validator(mode="after")
    def _validate_value(self) -> "ScheduleConfig":
        if self.type is ScheduleType.CRON and not isinstance(self.value, str):
            raise ValueError("Cron schedule requires string expression")
        if self.type is ScheduleType.INTERVAL:
            if isinstance(self.value, bool) or not isinstance(self.value, (int, float, dict)):
                raise ValueError("Interval schedule requires seconds (int/float) or kwargs dict")
            if isinstance(self.value, (int, float)) and self.value <= 0:
                raise ValueError("Interval seconds must be positive")
        return self


class ListingSelectors(_Frozen):
    """CSS selectors locating stories on the listing page.

    ``container`` and ``link`` accept several selectors tried in order, so the
    older and the current Hacker News markup are both understood.
    """

    container: list[str] = Field(default_factory=lambda: [".itemlist", "#hnmain"])
    row: str = ".athing"
    link: list[str] = Field(default_factory=lambda: ["a.storylink", ".titleline > a"])
    subtext: str = ".subtext"
    score: str = ".score"

    @field_validator("container", "link", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> list[str]:
        if isinstance(value, str):
            value = [value]
        if not value:
            raise ValueError("at least one selector is required")
        return list(value)


class ListingConfig(_Frozen):
    """Where the stories come from."""

    url: str = "https://news.ycombinator.com/"
    timeout: float = 15.0
    user_agent: str = DEFAULT_USER_AGENT
    selectors: ListingSelectors = Field(default_factory=ListingSelectors)

    @field_validator("url")
    @classmethod
    def _require_http(cls, value: str) -> str:
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError("listing url must be http(s)")
        return value


class TelegramConfig(_Frozen):
    """Telegram Bot API destination."""

    bot_token: str = ""
    channel: str = "@news_ycombinator"
    silent: bool = True
    parse_mode: str = "Markdown"
    api_base: str = "https://api.telegram.org"
    timeout: float = 10.0

    @property
    def endpoint(self) -> str:
        return f"{self.api_base.rstrip('/')}/bot{self.bot_token}/sendMessage"


class DedupConfig(_Frozen):
    """Sent log location and retention."""

    store_path: Path | None = None
    retention_days: float = 15
    reset_on_corrupt: bool = False

    @field_validator("store_path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Path | None:
        if value in (None, ""):
            return None
        return Path(value)

    @field_validator("retention_days")
    @classmethod
    def _positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("retention_days must be > 0")
        return value


class RelayConfig(_Frozen):
    """Complete, immutable description of one relay job."""

    job_name: str = DEFAULT_JOB_NAME
    min_score: int = Field(default=20, ge=0)
    listing: ListingConfig = Field(default_factory=ListingConfig)
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    dedup: DedupConfig = Field(default_factory=DedupConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)

    @field_validator("job_name")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("job_name cannot be empty")
        return value.strip()

    @property
    def retention_ms(self) -> int:
        return int(timedelta(days=self.dedup.retention_days).total_seconds() * 1000)

    def resolved_log_path(self, data_dir: Path) -> Path:
        """Return the sent log path, scoped to the job name by default."""

        path = self.dedup.store_path or Path(self.job_name) / "sent.json"
        if not path.is_absolute():
            return (data_dir / path).resolve()
        return path


__all__ = [
    "DEFAULT_JOB_NAME",
    "DedupConfig",
    "ListingConfig",
    "ListingSelectors",
    "RelayConfig",
    "ScheduleConfig",
    "ScheduleType",
    "TelegramConfig",
]
