"""Shared fixtures: isolated project home, configs, listing HTML and mocked HTTP."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable

import httpx
import pytest

from news_relay.config import ListingConfig, RelayConfig, TelegramConfig

BASE_URL = "https://news.ycombinator.com/"


@dataclass
class Row:
    title: str
    href: str
    score: int | None = 30
    comments_href: str = "item?id=1"
    comments_label: str = "12 comments"


def render_listing(rows: Iterable[Row | dict], *, extra_subtexts: int = 0) -> str:
    """Build a page shaped like the classic Hacker News front page."""

    rows = [Row(**row) if isinstance(row, dict) else row for row in rows]
    parts = ['<html><body><center><table id="hnmain"><tr><td>', '<table class="itemlist">']
    for index, row in enumerate(rows, start=1):
        score = f'<span class="score" id="score_{index}">{row.score} points</span> by ' if row.score is not None else ""
        parts.append(
            f'<tr class="athing" id="{index}"><td class="title"><span class="rank">{index}.</span></td>'
            f'<td class="title"><a href="{row.href}" class="storylink">{row.title}</a></td></tr>'
        )
        parts.append(
            f'<tr><td colspan="2"></td><td class="subtext">{score}'
            f'<a href="user?id=someone" class="hnuser">someone</a> '
            f'<span class="age"><a href="item?id={index}">1 hour ago</a></span> | '
            f'<a href="{row.comments_href}">{row.comments_label}</a></td></tr>'
        )
        parts.append('<tr class="spacer" style="height:5px"></tr>')
    for _ in range(extra_subtexts):
        parts.append('<tr><td class="subtext"><a href="item?id=99">discuss</a></td></tr>')
    parts.append("</table></td></tr></table></center></body></html>")
    return "".join(parts)


@pytest.fixture
def listing_html() -> Callable[..., str]:
    return render_listing


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep config, data and log files of every test under its tmp_path."""

    monkeypatch.setenv("NEWS_RELAY_HOME", str(tmp_path))
    for name in ("NEWS_RELAY_TELEGRAM_TOKEN", "NEWS_RELAY_TELEGRAM_CHANNEL", "NEWS_RELAY_MIN_SCORE"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def relay_home(isolated_home: Path) -> Path:
    return isolated_home


@pytest.fixture
def relay_config() -> Callable[..., RelayConfig]:
    def _builder(**overrides: Any) -> RelayConfig:
        base: dict[str, Any] = {
            "job_name": "test-job",
            "min_score": 20,
            "listing": ListingConfig(url=BASE_URL, timeout=5),
            "telegram": TelegramConfig(bot_token="123:secret", channel="@test_channel"),
        }
        base.update(overrides)
        return RelayConfig(**base)

    return _builder


@pytest.fixture
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]:
    clients: list[httpx.Client] = []

    def _factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _factory
    for client in clients:
        client.close()
