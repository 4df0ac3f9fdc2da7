from __future__ import annotations

from news_relay.engine import NewsItem, SentLog, select_new_items


def _item(url: str, score: int) -> NewsItem:
    return NewsItem(url=url, title=url, score=score, comment_link="c", comment_count="discuss")


def test_threshold_is_strict_and_seen_items_are_dropped(tmp_path) -> None:
    log = SentLog(tmp_path / "sent.json", {"https://seen": 1})
    items = [
        _item("https://a", 21),
        _item("https://b", 20),
        _item("https://seen", 500),
        _item("https://c", 0),
        _item("https://d", 99),
    ]
    selected = select_new_items(log, items, 20)
    assert [item.url for item in selected] == ["https://a", "https://d"]


def test_selection_is_idempotent_and_side_effect_free(tmp_path) -> None:
    path = tmp_path / "sent.json"
    log = SentLog(path)
    items = [_item("https://a", 50), _item("https://b", 5), _item("https://c", 30)]
    first = select_new_items(log, items, 20)
    second = select_new_items(log, items, 20)
    assert first == second
    assert len(log) == 0
    assert not path.exists()


def test_accepts_any_iterable(tmp_path) -> None:
    log = SentLog(tmp_path / "sent.json")
    generator = (_item(f"https://{n}", n) for n in (10, 30))
    assert [item.score for item in select_new_items(log, generator, 20)] == [30]
